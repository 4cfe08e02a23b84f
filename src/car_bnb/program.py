"""
Application entry point for Car BnB.

This module:
- Loads settings and configures logging, the geocoder and the MongoEngine connection.
- Prints a stylized application header.
- Creates the Session for this run and dispatches to the owner or renter flow,
  passing the session along.
"""
import logging

from colorama import Fore, init as colorama_init

import car_bnb.data.mongo_setup as mongo_setup
import car_bnb.program_owners as program_owners
import car_bnb.program_renters as program_renters
from car_bnb.infrastructure.config import load_settings
from car_bnb.infrastructure.errors import ConfigError
from car_bnb.infrastructure.state import Session
from car_bnb.services import geocoding


"""
Initialize the app and dispatch to owner/renter flows in a loop.

Steps:
1) Load settings; configure logging, the geocoder and the database alias 'core'.
2) Print the application header.
3) In a loop:
    - After a login redirect, pick the flow from the session's role.
    - Otherwise ask whether the user is renting or listing.
    - Run that flow until it returns.
4) Exit gracefully on Ctrl+C (KeyboardInterrupt).
"""
def main():
    try:
        settings = load_settings()
    except ConfigError as ce:
        program_owners.error_msg(ce.message)  # Bad CAR_BNB_* value; nothing to run against.
        return

    logging.basicConfig(
        level=getattr(logging, settings.log_level),  # Already one of the standard names.
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    colorama_init()  # Enables ANSI colours on Windows terminals.
    geocoding.configure(settings)
    mongo_setup.global_init(settings)  # Registers the 'core' alias used by every model.

    print_header()

    session = Session()  # Who is signed in, for this run only.
    signal = None  # Last signal returned by a flow.
    try:
        while True:
            # After a role redirect, skip the intent prompt.
            if signal == 'redirect' and session.is_authenticated:
                rent = not session.is_owner()
            else:
                rent = find_user_intent() == 'rent'

            if rent:
                signal = program_renters.run(session)
            else:
                signal = program_owners.run(session)
    except KeyboardInterrupt:
        return  # Ctrl+C or the exit command.


def print_header():
    car = \
        """
                 ______
            ___//__][__\\___
           (o  _  Car BnB _ o)
            `-(_)------(_)-'
        """

    print(Fore.WHITE + '****************  CAR BnB  ****************')
    print(Fore.GREEN + car)
    print(Fore.WHITE + '*******************************************')
    print()
    print("Welcome to Car BnB!")
    print("Why are you here?")
    print()


"""
Ask whether the user wants to rent or to list a car.

Returns:
    str: 'rent' for renters or 'list' for owners.
"""
def find_user_intent():
    print("[r] Rent a car")
    print("[o] List your car as an owner")
    print()

    choice = input("Are you a [r]enter or [o]wner? ")

    # Anything but 'o' goes to the renter flow.
    if choice.strip().lower() == 'o':
        return 'list'

    return 'rent'


if __name__ == '__main__':
    main()
