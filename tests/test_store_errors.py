"""Backend failures surface as StoreError from every repository entry point."""

import mongomock
import pytest
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from car_bnb import program_owners
from car_bnb.data.bookings import Booking
from car_bnb.data.listings import Listing
from car_bnb.infrastructure.errors import StoreError
from car_bnb.infrastructure.state import Session
from car_bnb.services import data_service as svc
from car_bnb.services import identity, views
from conftest import listing_fields


def _raise(error):
    def _fail(*args, **kwargs):
        raise error

    return _fail


@pytest.fixture
def writes_rejected(monkeypatch):
    """The server refuses inserts (MongoEngine turns this into OperationError on save)."""
    monkeypatch.setattr(
        mongomock.Collection, "insert_one",
        _raise(OperationFailure("not authorized on car_bnb to execute command")),
    )


@pytest.fixture
def server_unreachable(monkeypatch):
    error = ServerSelectionTimeoutError("localhost:27017: connection refused")
    monkeypatch.setattr(mongomock.Collection, "find", _raise(error))
    monkeypatch.setattr(mongomock.Collection, "delete_many", _raise(error))


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


class TestRejectedWrites:
    def test_create_listing(self, owner, geocoder, writes_rejected) -> None:
        with pytest.raises(StoreError) as exc:
            svc.create_listing(str(owner.id), listing_fields(), geocode=geocoder)
        assert exc.value.operation == "create listing"
        assert "not authorized" in exc.value.message

    def test_create_booking(self, listing, renter, writes_rejected) -> None:
        with pytest.raises(StoreError) as exc:
            svc.create_booking(str(listing.id), str(renter.id), "2024-01-01", "2024-01-05")
        assert exc.value.operation == "create booking"

    def test_sign_up(self, writes_rejected) -> None:
        with pytest.raises(StoreError) as exc:
            identity.sign_up("new@example.com", "secret-pw", "New", "User", is_owner=False)
        assert exc.value.operation == "sign up"


# ---------------------------------------------------------------------------
# Reads and deletes
# ---------------------------------------------------------------------------


class TestUnreachableServer:
    def test_get_listing(self, missing_id, server_unreachable) -> None:
        with pytest.raises(StoreError):
            svc.get_listing(missing_id)

    def test_queries_fail_when_iterated(self, server_unreachable) -> None:
        results = svc.find_bookings_for_renter("renter-1")
        with pytest.raises(StoreError):
            list(results)

    def test_cancel_booking(self, missing_id, server_unreachable) -> None:
        with pytest.raises(StoreError):
            svc.cancel_booking(missing_id)

    def test_dashboard_view(self, server_unreachable) -> None:
        with pytest.raises(StoreError):
            views.owner_dashboard("owner-1")


# ---------------------------------------------------------------------------
# CLI keeps running
# ---------------------------------------------------------------------------


def test_owner_prompt_survives_rejected_write(monkeypatch, owner, writes_rejected) -> None:
    remaining = iter([
        "r", "Toyota", "Camry", "Silver", "ABC-1234", "45", "Austin", "100 Main St", "https://img",
        "x",
    ])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(remaining))
    monkeypatch.setattr("car_bnb.services.geocoding.resolve", lambda address: (30.27, -97.74))

    session = Session()
    session.populate(owner)

    # Reaching the exit command means the failure was reported and the loop carried on.
    with pytest.raises(KeyboardInterrupt):
        program_owners.run(session)

    assert Listing.objects.count() == 0
    assert Booking.objects.count() == 0
