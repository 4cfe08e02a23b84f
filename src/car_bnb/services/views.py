"""
Read-only projections for the owner and renter dashboards.

Each view materializes one repository query and reports whether it came back
empty. Booking rows carry the listing (and for owners, the renter profile)
needed to display them; those lookups are batched into one id__in query per
collection instead of one per row.
"""
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple

import bson

from car_bnb.data.bookings import Booking
from car_bnb.data.listings import Listing
from car_bnb.data.users import User
from car_bnb.services import data_service as svc
from car_bnb.services import geocoding


class ListingsView(NamedTuple):
    listings: List[Listing]
    is_empty: bool


class BookingRow(NamedTuple):
    booking: Booking
    listing: Optional[Listing]  # None if the listing record is gone.
    renter: Optional[User] = None


class BookingsView(NamedTuple):
    rows: List[BookingRow]
    is_empty: bool


def _by_id(document_cls, ids: Iterable[str]) -> Dict[str, object]:
    valid = {i for i in ids if i and bson.ObjectId.is_valid(i)}  # Skip blanks and malformed ids.
    if not valid:
        return {}
    with svc.store_operation(f'resolve {document_cls.__name__.lower()}s'):
        return {str(doc.id): doc for doc in document_cls.objects(id__in=list(valid))}  # One query per collection.


def owner_dashboard(owner_id: str) -> ListingsView:
    listings = list(svc.find_listings_for_owner(owner_id))
    return ListingsView(listings, not listings)


def renter_bookings(renter_id: str) -> BookingsView:
    bookings = list(svc.find_bookings_for_renter(renter_id))
    listings = _by_id(Listing, (b.listing_id for b in bookings))

    rows = [BookingRow(b, listings.get(b.listing_id)) for b in bookings]  # Missing listing shows as None.
    return BookingsView(rows, not rows)


def owner_bookings(owner_id: str) -> BookingsView:
    bookings = list(svc.find_bookings_for_owner(owner_id))
    listings = _by_id(Listing, (b.listing_id for b in bookings))
    renters = _by_id(User, (b.renter_id for b in bookings))

    rows = [
        BookingRow(b, listings.get(b.listing_id), renters.get(b.renter_id))
        for b in bookings
    ]
    return BookingsView(rows, not rows)


class SearchView(NamedTuple):
    center: Tuple[float, float]
    listings: List[Listing]
    is_empty: bool


"""
Locate a city and collect the listings registered in it.

The city is geocoded first (the map center for the results); an unknown city
raises GeocodeError before the listings collection is queried.
"""
def city_search(city: str, geocode: Optional[Callable[[str], Tuple[float, float]]] = None) -> SearchView:
    geocode = geocode or geocoding.resolve
    center = geocode(city)  # GeocodeError stops the search here.
    listings = list(svc.find_listings_in_city(city))
    return SearchView(center, listings, not listings)
