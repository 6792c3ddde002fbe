"""Value types shared by the coordinate-to-district resolution pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict


@dataclass(frozen=True, slots=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class LocationGuess:
    """District and state detected for a coordinate, before catalog matching."""

    district: str
    state: str
    formatted_address: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class BoundedRegion:
    """Rectangular lat/lng box labelled with the district it stands for."""

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float
    state: str
    district: str

    def contains(self, coord: Coordinate) -> bool:
        return (
            self.min_lat <= coord.latitude <= self.max_lat
            and self.min_lng <= coord.longitude <= self.max_lng
        )

    def to_guess(self) -> LocationGuess:
        return LocationGuess(
            district=self.district,
            state=self.state,
            formatted_address=f"{self.district}, {self.state}, India",
        )
