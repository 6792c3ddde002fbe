"""Entry point combining coordinate resolution and catalog matching."""

from typing import Any, Dict, Optional

from src.geo.matcher import CatalogMatcher
from src.geo.models import Coordinate
from src.geo.resolver import CoordinateResolver


def resolve_and_match(
    latitude: float,
    longitude: float,
    *,
    resolver: CoordinateResolver,
    matcher: CatalogMatcher,
) -> Dict[str, Any]:
    """Detect the district for a coordinate and link it to a catalog record.

    ``guess`` is None when the coordinate could not be resolved at all; in
    that case matching is skipped. ``matched`` is False whenever no catalog
    record was linked, so callers can still show the detected place name.
    """
    coord = Coordinate(latitude=float(latitude), longitude=float(longitude))
    guess = resolver.resolve(coord)
    record: Optional[Dict[str, Any]] = None
    if guess is not None:
        record = matcher.match(guess)
    return {"guess": guess, "matched_record": record, "matched": record is not None}
