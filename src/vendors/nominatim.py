"""Client utilities for the OpenStreetMap Nominatim reverse-geocoding API."""

import logging
import re
from typing import Any, Dict, Optional

import requests

from src.geo.models import Coordinate, LocationGuess

logger = logging.getLogger(__name__)
_SESSION = requests.Session()

DEFAULT_URL = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_USER_AGENT = "DistrictLocator/1.0"
DEFAULT_TIMEOUT = 15.0
# Zoom 8 returns county/state_district granularity rather than street level.
DISTRICT_ZOOM = 8

# Address fields tried in order for the district-level name.
DISTRICT_FIELDS = ("state_district", "county", "city", "town", "municipality", "village")

_DISTRICT_SUFFIX = re.compile(r"\s+district$", re.IGNORECASE)


class NominatimError(RuntimeError):
    """Raised when Nominatim answers with an error payload."""


def reverse(
    coord: Coordinate,
    *,
    url: str = DEFAULT_URL,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    params = {
        "lat": coord.latitude,
        "lon": coord.longitude,
        "format": "json",
        "addressdetails": 1,
        "zoom": DISTRICT_ZOOM,
        "accept-language": "en",
    }
    # Nominatim's usage policy rejects requests without an identifying User-Agent.
    headers = {"User-Agent": user_agent}
    response = _SESSION.get(url, params=params, headers=headers, timeout=timeout)
    response.raise_for_status()
    payload = response.json()
    if not isinstance(payload, dict):
        raise NominatimError(f"unexpected payload type {type(payload).__name__}")
    if "error" in payload:
        raise NominatimError(str(payload["error"]))
    return payload


def parse_address(payload: Dict[str, Any]) -> Optional[LocationGuess]:
    """Normalise a Nominatim payload into a LocationGuess, or None if incomplete."""
    address = payload.get("address")
    if not isinstance(address, dict):
        logger.debug("Nominatim payload has no address block: keys=%s", list(payload.keys())[:10])
        return None

    district = next((address[field] for field in DISTRICT_FIELDS if _non_empty(address.get(field))), None)
    state = address.get("state")
    if not district or not _non_empty(state):
        logger.debug("Nominatim address missing district or state: %s", address)
        return None

    district = _DISTRICT_SUFFIX.sub("", district).strip()
    return LocationGuess(
        district=district,
        state=state,
        formatted_address=payload.get("display_name") or f"{district}, {state}, India",
    )


def _non_empty(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def lookup(
    coord: Coordinate,
    *,
    url: str = DEFAULT_URL,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = DEFAULT_TIMEOUT,
) -> Optional[LocationGuess]:
    """Reverse-geocode ``coord``; any transport or payload failure yields None."""
    try:
        payload = reverse(coord, url=url, user_agent=user_agent, timeout=timeout)
    except (requests.RequestException, ValueError, NominatimError) as exc:
        logger.warning(
            "Nominatim lookup failed for %s, %s: %s", coord.latitude, coord.longitude, exc
        )
        return None
    return parse_address(payload)
