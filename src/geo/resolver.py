"""Coordinate-to-district resolution: cache, upstream geocoder, offline fallback."""

import logging
import re
from functools import partial
from typing import Callable, Optional, Sequence

from src.core.config import Settings
from src.geo.bounds import in_service_area
from src.geo.cache import ResultCache
from src.geo.fallback import resolve_fallback
from src.geo.models import Coordinate, LocationGuess
from src.vendors import nominatim

logger = logging.getLogger(__name__)

Strategy = Callable[[Coordinate], Optional[LocationGuess]]

_TRAILING_TOKEN = re.compile(r"\s+(district|zilla)$", re.IGNORECASE)
_LEADING_TOKEN = re.compile(r"^district\s+", re.IGNORECASE)


def normalize_guess(guess: LocationGuess) -> LocationGuess:
    """Trim names and drop "District"/"Zilla" decorations from the district."""
    district = guess.district.strip()
    district = _TRAILING_TOKEN.sub("", district)
    district = _LEADING_TOKEN.sub("", district)
    return LocationGuess(
        district=district,
        state=guess.state.strip(),
        formatted_address=guess.formatted_address,
    )


class CoordinateResolver:
    """Resolve coordinates through an ordered list of strategies.

    Strategies are tried in order and the first non-None guess wins. Results
    are normalised and memoised in ``cache``; misses are never cached.
    """

    def __init__(self, strategies: Sequence[Strategy], cache: Optional[ResultCache] = None) -> None:
        self.strategies = list(strategies)
        self.cache = cache if cache is not None else ResultCache()

    def resolve(self, coord: Coordinate) -> Optional[LocationGuess]:
        if not in_service_area(coord):
            logger.warning("Coordinates %s, %s are outside India bounds", coord.latitude, coord.longitude)
            return None

        cached = self.cache.get(coord)
        if cached is not None:
            logger.debug("Returning cached location for %s, %s", coord.latitude, coord.longitude)
            return cached

        guess = None
        for strategy in self.strategies:
            guess = strategy(coord)
            if guess is not None:
                break
            logger.info("%s found nothing for %s, %s", _strategy_name(strategy), coord.latitude, coord.longitude)

        if guess is None:
            return None

        guess = normalize_guess(guess)
        self.cache.put(coord, guess)
        logger.info("Resolved %s, %s to %s, %s", coord.latitude, coord.longitude, guess.district, guess.state)
        return guess


def _strategy_name(strategy: Strategy) -> str:
    func = getattr(strategy, "func", strategy)
    return getattr(func, "__qualname__", repr(func))


def build_resolver(settings: Settings) -> CoordinateResolver:
    """Wire the Nominatim lookup and bounds-table fallback from settings."""
    upstream = partial(
        nominatim.lookup,
        url=settings.nominatim_url,
        user_agent=settings.nominatim_user_agent,
        timeout=settings.nominatim_timeout,
    )
    return CoordinateResolver(
        strategies=[upstream, resolve_fallback],
        cache=ResultCache(ttl_seconds=settings.location_cache_ttl),
    )
