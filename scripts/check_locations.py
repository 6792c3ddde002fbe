"""Resolve a handful of metro coordinates and print what the resolver detects.

Run from the repository root: python -m scripts.check_locations [--offline]
"""

import argparse
import logging

from src.core.config import get_settings
from src.geo.fallback import resolve_fallback
from src.geo.models import Coordinate
from src.geo.resolver import CoordinateResolver, build_resolver

SAMPLE_COORDINATES = [
    ("Delhi", 28.6139, 77.2090),
    ("Mumbai", 19.0760, 72.8777),
    ("Bangalore", 12.9716, 77.5946),
    ("Chennai", 13.0827, 80.2707),
    ("Kolkata", 22.5726, 88.3639),
    ("Hyderabad", 17.3850, 78.4867),
]


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = argparse.ArgumentParser(description="Smoke-test coordinate to district detection")
    parser.add_argument("--offline", action="store_true", help="Skip Nominatim and use the bounds table only")
    args = parser.parse_args()

    resolver = CoordinateResolver([resolve_fallback]) if args.offline else build_resolver(get_settings())
    for name, lat, lng in SAMPLE_COORDINATES:
        guess = resolver.resolve(Coordinate(lat, lng))
        if guess is None:
            print(f"{name} ({lat}, {lng}): no result")
            continue
        print(f"{name} ({lat}, {lng}): {guess.district}, {guess.state} | {guess.formatted_address}")


if __name__ == "__main__":
    main()
