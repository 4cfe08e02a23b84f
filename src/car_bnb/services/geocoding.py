"""
Address to coordinates lookup against a Nominatim-compatible search API.

configure() takes the endpoint, user agent and timeout from Settings. resolve()
returns the first match as (latitude, longitude) or raises GeocodeError. Results
are not cached.
"""
import logging
from typing import Optional, Tuple

import requests

from car_bnb.infrastructure.config import Settings, load_settings
from car_bnb.infrastructure.errors import GeocodeError

logger = logging.getLogger(__name__)

_settings: Optional[Settings] = None  # Set by program.main; loaded lazily otherwise.


def configure(settings: Optional[Settings]):
    global _settings
    _settings = settings


def resolve(address: str) -> Tuple[float, float]:
    address = (address or '').strip()
    if not address:
        raise GeocodeError(address, 'empty address')

    settings = _settings if _settings is not None else load_settings()

    logger.info("Geocoding %r", address)
    try:
        r = requests.get(
            settings.geocoder_url,
            params={'q': address, 'format': 'json', 'limit': 1},
            headers={'User-Agent': settings.geocoder_user_agent},
            timeout=settings.geocoder_timeout,
        )
        r.raise_for_status()
        results = r.json()
    except requests.RequestException as e:
        logger.warning("Geocoding request failed for %r: %s", address, e)
        raise GeocodeError(address, 'lookup service unavailable') from e
    except ValueError as e:
        raise GeocodeError(address, 'unreadable response') from e

    if not results:
        logger.warning("No geocoding match for %r", address)
        raise GeocodeError(address)

    try:
        first = results[0]
        return float(first['lat']), float(first['lon'])
    except (KeyError, TypeError, ValueError) as e:
        raise GeocodeError(address, 'unreadable response') from e
