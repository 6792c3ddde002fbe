"""Map a detected LocationGuess onto a concrete district catalog record."""

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from src.geo.models import LocationGuess

logger = logging.getLogger(__name__)

District = Dict[str, Any]

STATE_CANDIDATE_LIMIT = 3
_VARIANT_SUFFIXES = (" Urban", " Rural", " District")
_ADDED_SUFFIXES = (" Urban", " Rural")


class Catalog(Protocol):
    def find_by_name(self, name: str) -> Optional[District]: ...

    def find_by_name_in_state(self, name: str, state: str, exact: bool = False) -> Optional[District]: ...

    def find_in_state(self, state: str, limit: int = STATE_CANDIDATE_LIMIT) -> List[District]: ...


def name_variations(district: str) -> List[str]:
    """Candidate spellings: suffix-stripped forms first, then Urban/Rural added.

    The input itself is never returned, and duplicates keep their first position.
    """
    candidates: List[str] = []
    lowered = district.lower()
    for suffix in _VARIANT_SUFFIXES:
        if lowered.endswith(suffix.lower()):
            candidates.append(district[: -len(suffix)].strip())
    for suffix in _ADDED_SUFFIXES:
        candidates.append(f"{district}{suffix}")

    unique: List[str] = []
    seen = {lowered}
    for candidate in candidates:
        if candidate and candidate.lower() not in seen:
            seen.add(candidate.lower())
            unique.append(candidate)
    return unique


class CatalogMatcher:
    """Find the single best catalog record for a guess.

    Tiers run in order and stop at the first hit:

    1. ``exact``: case-insensitive full-name match, any state.
    2. ``partial``: catalog name contains the guessed name, inside the guessed state.
    3. ``variation``: exact in-state match on Urban/Rural/District spelling variants.
    4. ``state``: up to three records in the state, preferring one whose name
       contains the guessed name, else the first.
    """

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog
        self.tiers: List[Tuple[str, Callable[[LocationGuess], Optional[District]]]] = [
            ("exact", self._match_exact),
            ("partial", self._match_partial),
            ("variation", self._match_variation),
            ("state", self._match_state),
        ]

    def match(self, guess: LocationGuess) -> Optional[District]:
        record, _ = self.match_with_tier(guess)
        return record

    def match_with_tier(self, guess: LocationGuess) -> Tuple[Optional[District], Optional[str]]:
        for tier, matcher in self.tiers:
            record = matcher(guess)
            if record is not None:
                logger.info(
                    "Matched %s, %s to catalog district %s via %s tier",
                    guess.district,
                    guess.state,
                    record.get("name"),
                    tier,
                )
                return record, tier
        logger.warning("No catalog district matches %s, %s", guess.district, guess.state)
        return None, None

    def _match_exact(self, guess: LocationGuess) -> Optional[District]:
        return self.catalog.find_by_name(guess.district)

    def _match_partial(self, guess: LocationGuess) -> Optional[District]:
        return self.catalog.find_by_name_in_state(guess.district, guess.state)

    def _match_variation(self, guess: LocationGuess) -> Optional[District]:
        for variation in name_variations(guess.district):
            record = self.catalog.find_by_name_in_state(variation, guess.state, exact=True)
            if record is not None:
                return record
        return None

    def _match_state(self, guess: LocationGuess) -> Optional[District]:
        candidates = self.catalog.find_in_state(guess.state, limit=STATE_CANDIDATE_LIMIT)
        if not candidates:
            return None
        needle = guess.district.lower()
        for record in candidates:
            if needle in str(record.get("name", "")).lower():
                return record
        return candidates[0]
