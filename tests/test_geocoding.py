"""Tests for the HTTP geocoder, with requests patched out."""

from unittest import mock

import pytest
import requests

from car_bnb.infrastructure.config import Settings
from car_bnb.infrastructure.errors import GeocodeError
from car_bnb.services import geocoding


def _response(payload=None, status_error=None, json_error=None):
    response = mock.Mock()
    response.raise_for_status.side_effect = status_error
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture(autouse=True)
def geocoder_settings():
    geocoding.configure(Settings(geocoder_url="https://geo.test/search", geocoder_user_agent="tests/1.0",
                                 geocoder_timeout=3.0, _env_file=None))
    yield
    geocoding.configure(None)


class TestResolve:
    def test_first_match(self) -> None:
        payload = [{"lat": "30.27", "lon": "-97.74"}, {"lat": "0", "lon": "0"}]
        with mock.patch.object(geocoding.requests, "get", return_value=_response(payload)) as get:
            assert geocoding.resolve("100 Main St, Austin") == (30.27, -97.74)

        args, kwargs = get.call_args
        assert args == ("https://geo.test/search",)
        assert kwargs["params"] == {"q": "100 Main St, Austin", "format": "json", "limit": 1}
        assert kwargs["headers"] == {"User-Agent": "tests/1.0"}
        assert kwargs["timeout"] == 3.0

    def test_no_match(self) -> None:
        with mock.patch.object(geocoding.requests, "get", return_value=_response([])):
            with pytest.raises(GeocodeError):
                geocoding.resolve("Atlantis")

    def test_blank_address_skips_request(self) -> None:
        with mock.patch.object(geocoding.requests, "get") as get:
            with pytest.raises(GeocodeError):
                geocoding.resolve("   ")
        get.assert_not_called()

    def test_network_failure(self) -> None:
        with mock.patch.object(geocoding.requests, "get", side_effect=requests.ConnectionError("down")):
            with pytest.raises(GeocodeError) as exc:
                geocoding.resolve("Austin")
        assert isinstance(exc.value.__cause__, requests.ConnectionError)

    def test_http_error(self) -> None:
        response = _response(status_error=requests.HTTPError("503"))
        with mock.patch.object(geocoding.requests, "get", return_value=response):
            with pytest.raises(GeocodeError):
                geocoding.resolve("Austin")

    @pytest.mark.parametrize("payload", [[{"lat": "north"}], [{"lat": "1"}], [None]])
    def test_unreadable_match(self, payload) -> None:
        with mock.patch.object(geocoding.requests, "get", return_value=_response(payload)):
            with pytest.raises(GeocodeError):
                geocoding.resolve("Austin")

    def test_non_json_body(self) -> None:
        with mock.patch.object(geocoding.requests, "get", return_value=_response(json_error=ValueError("bad"))):
            with pytest.raises(GeocodeError):
                geocoding.resolve("Austin")
