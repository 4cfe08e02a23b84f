from colorama import Fore
from switchlang import switch

from car_bnb.infrastructure.errors import CarBnbError
from car_bnb.infrastructure.state import Session
import car_bnb.services.data_service as svc
import car_bnb.services.identity as identity
import car_bnb.services.views as views


"""
Owner-facing CLI workflow.

This module provides the interactive command loop and actions for owners:
- Account creation, login and logout.
- Registering cars and listing them.
- Viewing and cancelling the bookings renters made on those cars.

Conventions:
- Uses switchlang.switch for a case-like control flow pattern.
- The Session created by program.main is passed into every action; it is the
  only record of who is signed in.
- Delegates persistence, validation, and querying to services (svc, identity, views).
- Service errors (CarBnbError) are printed with error_msg and the loop carries on.

Handlers may return a signal string:
- 'change_mode': go back to the owner/renter selector.
- 'redirect': the signed-in user belongs to the other flow; route by role.
"""

"""
Entry point for the owner workflow loop.

Returns the signal that ended the loop ('change_mode' or 'redirect').
"""
def run(session: Session):
    print(' ****************** Welcome owner **************** ')
    print()

    show_commands()

    # Main interactive loop.
    while True:
        # Prompt carries the first name once signed in.
        action = get_action(session)

        try:
            with switch(action) as s:
                s.case('c', lambda: create_account(session, is_owner=True))
                s.case('l', lambda: log_into_account(session, want_owner=True))
                s.case('y', lambda: list_cars(session))
                s.case('r', lambda: register_car(session))
                s.case('v', lambda: view_bookings(session))
                s.case('d', lambda: cancel_a_booking(session))
                s.case('o', lambda: log_out(session))
                s.case('m', lambda: 'change_mode')  # Back to the mode selector.
                s.case(['x', 'bye', 'exit', 'exit()'], exit_app)
                s.case('?', show_commands)
                s.case('', lambda: None)  # No-op for empty input.
                s.default(unknown_command)
            session.reload(identity.find_user)  # Profile may have changed or been removed.
        except CarBnbError as e:
            error_msg(e.message)
            continue

        # Cosmetic spacing after actions.
        if action:
            print()

        # Mode change or role redirect goes back to program.main.
        if s.result in ('change_mode', 'redirect'):
            return s.result


def show_commands():
    print('What action would you like to take:')
    print('[C]reate an owner account')
    print('[L]ogin to your account')
    print('List [y]our cars')
    print('[R]egister a car')
    print('[V]iew bookings on your cars')
    print('[D]elete (cancel) a booking')
    print('Log [o]ut')
    print('Change [M]ode (renter or owner)')
    print('e[X]it app')
    print('[?] Help (this info)')
    print()


"""
Create a new account and sign it in.

The role comes from the flow the user is in: the owner flow creates owners,
the renter flow creates renters.
"""
def create_account(session: Session, is_owner: bool):
    print(' ****************** REGISTER **************** ')

    first_name = input('What is your first name? ')
    last_name = input('What is your last name? ')
    email = input('What is your email? ')
    password = input('Choose a password (6+ characters): ')

    user = identity.sign_up(email, password, first_name, last_name, is_owner)
    session.populate(user)  # New accounts are signed in straight away.
    success_msg(f"Created new account with id {session.uid}.")


"""
Sign in with email and password.

Side effects:
- Populates the session on success.
- When the account's role does not match this flow, returns 'redirect' so
  program.main can send the user to the right one.
"""
def log_into_account(session: Session, want_owner: bool):
    print(' ****************** LOGIN **************** ')

    email = input('What is your email? ')
    password = input('What is your password? ')

    user = identity.sign_in(email, password)
    session.populate(user)
    success_msg('You have been logged in.')

    # Wrong menu for this account.
    if session.is_owner() != want_owner:
        print('Taking you to the {} menu.'.format('owner' if session.is_owner() else 'renter'))
        return 'redirect'


def log_out(session: Session):
    identity.sign_out(session)
    success_msg('Logged out.')


"""
Collect car details from the owner and create the listing.

The address is geocoded as part of creation; an unresolvable address
aborts with nothing saved.
"""
def register_car(session: Session):
    print(' ****************** REGISTER CAR **************** ')

    if not require_owner(session, 'register a car'):
        return

    brand = input('Brand? ')
    if not brand.strip():
        error_msg('Cancelled')
        return

    # Raw strings; create_listing validates and parses cost.
    fields = {
        'brand': brand,
        'model': input('Model? '),
        'color': input('Color? '),
        'license_plate': input('License plate? '),
        'cost': input('How much are you charging per day? '),
        'city': input('City? '),
        'address': input('Street address? '),
        'image_url': input('Image URL? '),
    }

    listing = svc.create_listing(session.uid, fields)  # Geocodes the address first.
    success_msg(f'Listing created with id {listing.id}.')


def list_cars(session: Session):
    print(' ******************     Your cars     **************** ')

    if not require_owner(session, 'see your cars'):
        return

    dashboard = views.owner_dashboard(session.uid)
    if dashboard.is_empty:
        print("You haven't listed any cars yet.")
        return

    print(f"You have {len(dashboard.listings)} cars.")
    for idx, car in enumerate(dashboard.listings):
        print(f' {idx + 1}. {car.title} ({car.color}) plate {car.license_plate}, '
              f'{car.price_badge}/day in {car.city}.')


"""
Show bookings renters made on the owner's cars and return the rows shown.
"""
def view_bookings(session: Session, suppress_header=False):
    if not suppress_header:
        print(' ****************** Bookings on your cars **************** ')

    if not require_owner(session, 'see your bookings'):
        return []

    view = views.owner_bookings(session.uid)
    if view.is_empty:
        print('No one has booked your cars yet.')
        return []

    print("You have {} bookings.".format(len(view.rows)))
    for idx, row in enumerate(view.rows):
        b = row.booking
        car = row.listing.title if row.listing else '(listing removed)'
        renter = row.renter.full_name if row.renter else 'Unknown renter'
        print(' {}. [{}] {} booked by {}, {}.'.format(idx + 1, b.confirmation_code, car, renter, b.date_range))

    return view.rows


def cancel_a_booking(session: Session):
    print(' ****************** Cancel a booking **************** ')

    rows = view_bookings(session, suppress_header=True)
    if not rows:
        return

    choose_and_cancel(rows)


"""
Let the user pick one of the displayed rows by number and delete that booking.
Shared with the renter flow.
"""
def choose_and_cancel(rows):
    number = input('Which booking do you want to cancel (number)? ')
    if not number.strip():
        error_msg('Cancelled')
        return

    try:
        row = rows[int(number) - 1]  # Shown numbers are 1-based.
    except (ValueError, IndexError):
        error_msg(f'{number} is not one of the listed bookings.')
        return

    svc.cancel_booking(str(row.booking.id))  # Hard delete.
    success_msg(f'Booking {row.booking.confirmation_code} canceled.')


def require_owner(session: Session, doing: str) -> bool:
    if not session.is_authenticated:
        error_msg(f'You must login first to {doing}.')
        return False
    if not session.is_owner():
        error_msg(f'Only owner accounts can {doing}.')
        return False
    return True


"""
Exit the application by raising KeyboardInterrupt.

This is caught by program.main to terminate gracefully.
"""
def exit_app():
    print()
    print('bye')
    raise KeyboardInterrupt()


def get_action(session: Session):
    text = '> '
    if session.is_authenticated:
        text = f'{session.first_name}> '

    action = input(Fore.YELLOW + text + Fore.WHITE)
    return action.strip().lower()  # Commands are case-insensitive.


def unknown_command():
    print("Sorry we didn't understand that command.")


def success_msg(text):
    print(Fore.LIGHTGREEN_EX + text + Fore.WHITE)


def error_msg(text):
    print(Fore.LIGHTRED_EX + text + Fore.WHITE)
