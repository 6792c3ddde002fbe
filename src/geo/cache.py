"""Short-lived, process-local memoisation of resolved coordinates."""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from src.geo.models import Coordinate, LocationGuess

DEFAULT_TTL_SECONDS = 300.0


@dataclass(frozen=True, slots=True)
class CacheEntry:
    value: LocationGuess
    created_at: float


def cache_key(coord: Coordinate) -> str:
    """Bucket coordinates to 3 decimal places (~110 m)."""
    return f"{coord.latitude:.3f}_{coord.longitude:.3f}"


class ResultCache:
    """TTL cache keyed by rounded coordinates.

    Expired entries are ignored on read and overwritten on the next ``put``;
    there is no size bound or background eviction.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, coord: Coordinate) -> Optional[LocationGuess]:
        key = cache_key(coord)
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.created_at >= self._ttl:
            return None
        return entry.value

    def put(self, coord: Coordinate, guess: LocationGuess) -> None:
        entry = CacheEntry(value=guess, created_at=self._clock())
        with self._lock:
            self._entries[cache_key(coord)] = entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
