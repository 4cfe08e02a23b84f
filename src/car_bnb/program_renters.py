from dateutil import parser
from switchlang import switch

from car_bnb.infrastructure import background
from car_bnb.infrastructure.errors import CarBnbError
from car_bnb.infrastructure.state import Session
import car_bnb.program_owners as owners
from car_bnb.program_owners import success_msg, error_msg
import car_bnb.services.data_service as svc
import car_bnb.services.identity as identity
import car_bnb.services.views as views

"""
Renter-facing CLI workflow.

This module provides the interactive command loop and actions for renters:
- Account creation, login and logout via the owner module helpers.
- Searching cars by city.
- Booking a car and viewing or cancelling existing bookings.

Notes:
- Dates are read with dateutil.parser and stored as yyyy-mm-dd strings.
- City searches run on a background task; Ctrl+C while waiting drops the
  search and returns to the prompt instead of leaving the app.
"""

"""
Entry point for the renter workflow loop.

Returns the signal that ended the loop ('change_mode' or 'redirect').
"""
def run(session: Session):
    print(' ****************** Welcome renter **************** ')
    print()

    show_commands()

    # Main interactive loop; prompt and helpers are shared with the owner flow.
    while True:
        action = owners.get_action(session)

        try:
            with switch(action) as s:
                s.case('c', lambda: owners.create_account(session, is_owner=False))
                s.case('l', lambda: owners.log_into_account(session, want_owner=False))
                s.case('o', lambda: owners.log_out(session))

                s.case('s', search_cars)
                s.case('b', lambda: book_a_car(session))
                s.case('v', lambda: view_bookings(session))
                s.case('d', lambda: cancel_a_booking(session))

                s.case('m', lambda: 'change_mode')  # Back to the mode selector.

                s.case('?', show_commands)
                s.case('', lambda: None)  # No-op for empty input.
                s.case(['x', 'bye', 'exit', 'exit()'], owners.exit_app)

                s.default(owners.unknown_command)
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
    print('[C]reate an account')
    print('[L]ogin to your account')
    print('[S]earch cars by city')
    print('[B]ook a car')
    print('[V]iew your bookings')
    print('[D]elete (cancel) a booking')
    print('Log [o]ut')
    print('[M]ain menu')
    print('e[X]it app')
    print('[?] Help (this info)')
    print()


"""
Ask for a city and show the cars listed there.

Returns the matching listings (empty when cancelled or nothing was found).
"""
def search_cars():
    print(' ****************** Search cars **************** ')

    city = input('Which city are you renting in? ').strip()
    if not city:
        error_msg('cancelled')
        return []

    # Geocoding plus the query runs off the prompt thread.
    task = background.submit(views.city_search, city)
    print(f'Searching {city}... (Ctrl+C to stop)')
    try:
        result = task.wait()
    except KeyboardInterrupt:
        task.cancel()  # Late result is dropped.
        error_msg('Search cancelled.')
        return []
    except background.TaskCancelled:
        error_msg('Search cancelled.')
        return []

    lat, lon = result.center
    print(f'{city} is around ({lat:.4f}, {lon:.4f}).')

    if result.is_empty:
        print(f'There are no cars listed in {city}.')
        return []

    print("There are {} cars available in {}.".format(len(result.listings), city))
    for idx, car in enumerate(result.listings):
        print(' {}. {} {} ({}) at {}, ({:.4f}, {:.4f})'.format(
            idx + 1,
            car.price_badge,
            car.title,
            car.color,
            car.address,
            car.latitude,
            car.longitude,
        ))

    return result.listings


"""
Walk the renter through picking a car and booking it.

Steps:
- Ensure the renter is logged in.
- Search a city and select a car from the results.
- Show the car profile (including the owner's name).
- Collect check-in/out dates and create the booking.
"""
def book_a_car(session: Session):
    print(' ****************** Book a car **************** ')
    if not session.is_authenticated:
        error_msg('You must log in first to book a car')
        return

    cars = search_cars()
    if not cars:
        return

    number = input('Which car do you want to book (number)? ')
    if not number.strip():
        error_msg('cancelled')
        return
    try:
        car = cars[int(number) - 1]  # Shown numbers are 1-based.
    except (ValueError, IndexError):
        error_msg(f'{number} is not one of the listed cars.')
        return

    show_car_profile(car)

    start_text = input('Check-in date [yyyy-mm-dd]: ')
    end_text = input('Check-out date [yyyy-mm-dd]: ')
    if not start_text.strip() or not end_text.strip():
        error_msg('Enter rental dates')
        return

    try:
        # Accepts most date spellings; stored as yyyy-mm-dd.
        checkin = parser.parse(start_text).date()
        checkout = parser.parse(end_text).date()
    except (ValueError, OverflowError):
        error_msg('Dates must look like yyyy-mm-dd.')
        return

    if checkin >= checkout:
        error_msg('Check in must be before check out')
        return

    # No overlap check against existing bookings.
    booking = svc.create_booking(str(car.id), session.uid, checkin.isoformat(), checkout.isoformat())

    success_msg('Booking confirmed! {} from {} to {} at {}/day. Confirmation code: {}'.format(
        car.title, booking.start_date, booking.end_date, car.price_badge, booking.confirmation_code))


def show_car_profile(car):
    owner = identity.find_user(car.created_by_uid)
    owner_name = owner.full_name if owner else 'Unknown'  # Owner account may be gone.

    print()
    print(f' {car.title} ({car.license_plate})')
    print(f'   Color: {car.color}')
    print(f'   Owner: {owner_name}')
    print(f'   ${car.cost} per day')
    print(f'   Photo: {car.image_url}')
    print()


def view_bookings(session: Session, suppress_header=False):
    if not suppress_header:
        print(' ****************** Your bookings **************** ')

    if not session.is_authenticated:
        error_msg('You must log in first to view your bookings')
        return []

    view = views.renter_bookings(session.uid)
    if view.is_empty:
        print("You don't have any bookings.")
        return []

    print("You have {} bookings.".format(len(view.rows)))
    for idx, row in enumerate(view.rows):
        b = row.booking
        if row.listing:
            car = '{} ({}) at {}, {}'.format(row.listing.title, row.listing.color,
                                            row.listing.address, row.listing.city)
        else:
            car = '(listing removed)'
        print(' {}. [{}] {}, {}.'.format(idx + 1, b.confirmation_code, car, b.date_range))

    return view.rows


def cancel_a_booking(session: Session):
    print(' ****************** Cancel a booking **************** ')

    rows = view_bookings(session, suppress_header=True)
    if not rows:
        return

    owners.choose_and_cancel(rows)
