import contextlib
import logging
import math
import random
import string
from typing import Callable, Iterator, Optional, Tuple

import bson
from mongoengine.errors import OperationError
from pymongo.errors import PyMongoError

from car_bnb.data.bookings import Booking
from car_bnb.data.listings import Listing
from car_bnb.infrastructure.errors import NotFoundError, StoreError, ValidationError
from car_bnb.services import geocoding

"""
Listing and booking repository built on MongoEngine.

Notes:
- Every write is a single document save or delete; nothing spans two documents,
  so there is nothing to roll back when a call fails.
- Driver failures surface as StoreError immediately. Nothing is retried.
- Ids cross the service boundary as strings. Listing.created_by_uid, Booking.listing_id,
  Booking.owner_id and Booking.renter_id are plain string copies of document ids.
- The find_* functions are generators: nothing is read until they are iterated, and
  calling again re-issues the query.
"""

logger = logging.getLogger(__name__)

LISTING_TEXT_FIELDS = ('brand', 'model', 'color', 'license_plate', 'city', 'address', 'image_url')

CODE_LETTERS = string.ascii_uppercase


@contextlib.contextmanager
def store_operation(operation: str):
    try:
        yield
    # Driver errors, and the OperationError MongoEngine raises when save() fails.
    except (PyMongoError, OperationError) as e:
        logger.error("Store failure during %s: %s", operation, e)
        raise StoreError(operation, str(e)) from e


def _parse_cost(raw) -> float:
    try:
        cost = float(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationError('cost', f'{raw!r} is not a number')

    if math.isnan(cost) or math.isinf(cost) or cost < 0:
        raise ValidationError('cost', 'must be a non-negative number')

    return cost


"""
Create and persist a new Listing for an owner.

Parameters:
    owner_id: Id of the owning user. Stored as created_by_uid and never changed.
    fields: Mapping with brand, model, color, license_plate, cost, city, address, image_url.
            Text values are stripped; cost may be a number or numeric text.
    geocode: Callable turning "<address>, <city>" into (latitude, longitude).
             Defaults to services.geocoding.resolve.

Returns:
    The saved Listing with its store-assigned id and is_booked False.

Raises:
    ValidationError for an empty text field or a bad cost.
    GeocodeError when the address cannot be resolved; nothing is written then.
"""
def create_listing(owner_id: str, fields: dict,
                   geocode: Optional[Callable[[str], Tuple[float, float]]] = None) -> Listing:
    if not owner_id:
        raise ValidationError('owner', 'you must be signed in to create a listing')

    values = {}
    for name in LISTING_TEXT_FIELDS:
        value = str(fields.get(name) or '').strip()
        if not value:
            raise ValidationError(name.replace('_', ' '), 'is required')
        values[name] = value

    cost = _parse_cost(fields.get('cost'))  # Accepts 45, "45" or "45.50".

    geocode = geocode or geocoding.resolve
    latitude, longitude = geocode(f"{values['address']}, {values['city']}")  # Raises before anything is saved.

    listing = Listing(**values)
    listing.cost = cost
    listing.created_by_uid = str(owner_id)
    listing.latitude = latitude
    listing.longitude = longitude
    listing.is_booked = False  # Never changed after this.

    with store_operation('create listing'):
        listing.save()

    logger.info("Owner %s listed %s as %s", owner_id, listing.title, listing.id)
    return listing


def get_listing(listing_id: str) -> Listing:
    # A malformed id cannot match any document.
    if not listing_id or not bson.ObjectId.is_valid(str(listing_id)):
        raise NotFoundError('listings', listing_id)

    with store_operation('get listing'):
        listing = Listing.objects(id=listing_id).first()

    if listing is None:
        logger.warning("Listing %s not found", listing_id)
        raise NotFoundError('listings', listing_id)

    return listing


def find_listings_for_owner(owner_id: str) -> Iterator[Listing]:
    with store_operation('list listings by owner'):
        yield from Listing.objects(created_by_uid=owner_id)


"""
Listings whose city equals `city` exactly. No case folding or trimming is applied,
so 'austin' does not match 'Austin'.
"""
def find_listings_in_city(city: str) -> Iterator[Listing]:
    with store_operation('list listings by city'):
        yield from Listing.objects(city=city)


"""
Make a short human-shareable booking reference: two uppercase letters followed
by a number in 1000..9999 (e.g. 'QK4821'). Uniqueness is not checked.
"""
def generate_confirmation_code(rng=random) -> str:
    letters = rng.choice(CODE_LETTERS) + rng.choice(CODE_LETTERS)
    return f'{letters}{rng.randint(1000, 9999)}'


"""
Book a listing for a renter over a date range.

Steps:
    1. Load the listing (NotFoundError if it does not exist).
    2. Require non-empty start and end dates (ValidationError otherwise).
    3. Generate a confirmation code.
    4. Save the booking with owner_id copied from the listing's created_by_uid.

Important:
    - Dates are stored as given (stripped). Their order is not checked.
    - Existing bookings for the listing are not consulted, so two bookings may
      overlap. Two concurrent calls for the same listing both succeed.
"""
def create_booking(listing_id: str, renter_id: str, start_date: str, end_date: str) -> Booking:
    listing = get_listing(listing_id)

    start_date = (start_date or '').strip()
    end_date = (end_date or '').strip()
    if not start_date:
        raise ValidationError('start date', 'is required')
    if not end_date:
        raise ValidationError('end date', 'is required')
    if not renter_id:
        raise ValidationError('renter', 'you must be signed in to book')

    booking = Booking()
    booking.confirmation_code = generate_confirmation_code()  # Collisions are possible and not checked.
    booking.listing_id = str(listing.id)
    booking.owner_id = listing.created_by_uid  # Point-in-time copy for owner queries.
    booking.renter_id = str(renter_id)
    booking.start_date = start_date
    booking.end_date = end_date

    with store_operation('create booking'):
        booking.save()

    logger.info("Renter %s booked listing %s (%s) as %s",
                renter_id, listing.id, booking.confirmation_code, booking.id)
    return booking


"""
Delete a booking. Either the owner or the renter may cancel; there is no record of
canceled bookings afterwards. Cancelling an id that does not exist is not an error.
"""
def cancel_booking(booking_id: str):
    if not booking_id or not bson.ObjectId.is_valid(str(booking_id)):
        logger.warning("Ignoring cancel of malformed booking id %r", booking_id)
        return

    with store_operation('cancel booking'):
        deleted = Booking.objects(id=booking_id).delete()  # Number of documents removed.

    if deleted:
        logger.info("Canceled booking %s", booking_id)
    else:
        logger.warning("Cancel of booking %s matched nothing", booking_id)


def find_bookings_for_owner(owner_id: str) -> Iterator[Booking]:
    with store_operation('list bookings by owner'):
        yield from Booking.objects(owner_id=owner_id)


def find_bookings_for_renter(renter_id: str) -> Iterator[Booking]:
    with store_operation('list bookings by renter'):
        yield from Booking.objects(renter_id=renter_id)
