"""Offline coordinate classification against the static bounds table."""

import logging
from typing import Iterable, Optional

from src.geo.bounds import CITY_REGIONS, STATE_REGIONS, in_service_area
from src.geo.models import BoundedRegion, Coordinate, LocationGuess

logger = logging.getLogger(__name__)


def _first_containing(coord: Coordinate, regions: Iterable[BoundedRegion]) -> Optional[BoundedRegion]:
    for region in regions:
        if region.contains(coord):
            return region
    return None


def resolve_fallback(
    coord: Coordinate,
    city_regions: Iterable[BoundedRegion] = CITY_REGIONS,
    state_regions: Iterable[BoundedRegion] = STATE_REGIONS,
) -> Optional[LocationGuess]:
    """Return the first city-level, then state-level, region containing ``coord``.

    No distance ranking is applied: overlapping boxes resolve purely by list
    order, and city-level boxes always take precedence over state-level ones.
    """
    if not in_service_area(coord):
        logger.warning("Coordinates %s, %s are outside India bounds", coord.latitude, coord.longitude)
        return None

    region = _first_containing(coord, city_regions) or _first_containing(coord, state_regions)
    if region is None:
        logger.warning(
            "Coordinates %s, %s are in India but not in any known region", coord.latitude, coord.longitude
        )
        return None

    logger.info(
        "Fallback detection matched %s, %s for %s, %s",
        region.district,
        region.state,
        coord.latitude,
        coord.longitude,
    )
    return region.to_guess()
