"""Shared test configuration and fixtures.

MongoEngine's 'core' alias is bound to an in-memory mongomock client for the
whole session; every collection is dropped after each test for isolation.
"""

import bson
import mongoengine
import mongomock
import pytest

from car_bnb.data.bookings import Booking
from car_bnb.data.listings import Listing
from car_bnb.data.users import User
from car_bnb.services import data_service as svc
from car_bnb.services import identity


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session", autouse=True)
def mongo_connection():
    """Register the 'core' alias against mongomock once per test session."""
    mongoengine.connect(
        "car_bnb_test",
        alias="core",
        mongo_client_class=mongomock.MongoClient,
    )
    yield
    mongoengine.disconnect(alias="core")


@pytest.fixture(autouse=True)
def clean_collections():
    yield
    for document_cls in (Listing, Booking, User):
        document_cls.drop_collection()


# ---------------------------------------------------------------------------
# Geocoding stand-ins
# ---------------------------------------------------------------------------


class FakeGeocoder:
    """Resolves every address to fixed coordinates and records the lookups."""

    def __init__(self, latitude: float = 30.27, longitude: float = -97.74):
        self.latitude = latitude
        self.longitude = longitude
        self.calls = []

    def __call__(self, address: str):
        self.calls.append(address)
        return self.latitude, self.longitude


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


# ---------------------------------------------------------------------------
# Domain records
# ---------------------------------------------------------------------------


def listing_fields(**overrides) -> dict:
    fields = {
        "brand": "Toyota",
        "model": "Camry",
        "color": "Silver",
        "license_plate": "ABC-1234",
        "cost": 45.0,
        "city": "Austin",
        "address": "100 Main St",
        "image_url": "https://example.com/camry.jpg",
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def owner() -> User:
    return identity.sign_up("owner@example.com", "secret-pw", "Olive", "Owner", is_owner=True)


@pytest.fixture
def renter() -> User:
    return identity.sign_up("renter@example.com", "secret-pw", "Ray", "Renter", is_owner=False)


@pytest.fixture
def listing(owner, geocoder) -> Listing:
    return svc.create_listing(str(owner.id), listing_fields(), geocode=geocoder)


@pytest.fixture
def missing_id() -> str:
    """A well-formed id that no document has."""
    return str(bson.ObjectId())
