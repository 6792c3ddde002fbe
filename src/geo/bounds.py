"""Static bounding boxes used for offline district detection inside India.

Boxes are (min_lat, max_lat, min_lng, max_lng). Lists are scanned in
declaration order and the first containing box wins, so overlapping entries
must be ordered most-specific first.
"""

from typing import Tuple

from src.geo.models import BoundedRegion, Coordinate

# National bounding box; anything outside is rejected before any lookup.
INDIA_BOUNDS = BoundedRegion(6.0, 37.0, 68.0, 97.0, state="", district="")


def _regions(*entries: Tuple[Tuple[float, float, float, float], str, str]) -> Tuple[BoundedRegion, ...]:
    return tuple(
        BoundedRegion(min_lat, max_lat, min_lng, max_lng, state=state, district=district)
        for (min_lat, max_lat, min_lng, max_lng), state, district in entries
    )


CITY_REGIONS = _regions(
    # Major metros
    ((28.40, 28.88, 76.84, 77.34), "Delhi", "Central Delhi"),
    ((19.01, 19.27, 72.77, 73.01), "Maharashtra", "Mumbai Suburban"),
    ((12.83, 13.14, 77.46, 77.78), "Karnataka", "Bengaluru Urban"),
    ((12.91, 13.23, 80.12, 80.32), "Tamil Nadu", "Chennai"),
    ((22.46, 22.65, 88.26, 88.42), "West Bengal", "Kolkata"),
    ((17.27, 17.56, 78.25, 78.61), "Telangana", "Hyderabad"),
    # State capitals
    ((26.81, 27.03, 75.68, 75.93), "Rajasthan", "Jaipur"),
    ((22.96, 23.15, 72.46, 72.68), "Gujarat", "Ahmedabad"),
    ((18.43, 18.64, 73.73, 73.95), "Maharashtra", "Pune"),
    ((15.29, 15.60, 73.76, 74.14), "Goa", "North Goa"),
    ((25.29, 25.47, 82.93, 83.03), "Uttar Pradesh", "Varanasi"),
    ((26.44, 26.55, 80.29, 80.41), "Uttar Pradesh", "Kanpur Nagar"),
    ((28.58, 28.75, 77.05, 77.28), "Uttar Pradesh", "Ghaziabad"),
    # Additional major cities
    ((23.00, 23.30, 72.50, 72.70), "Gujarat", "Ahmedabad"),
    ((21.10, 21.20, 79.05, 79.15), "Maharashtra", "Nagpur"),
    ((13.00, 13.10, 77.55, 77.65), "Karnataka", "Bengaluru Rural"),
    ((11.00, 11.10, 76.95, 77.05), "Tamil Nadu", "Coimbatore"),
    ((26.15, 26.25, 91.73, 91.83), "Assam", "Kamrup Metropolitan"),
)

# Coarse per-state boxes, each mapped to a representative district.
STATE_REGIONS = _regions(
    ((8.0, 13.0, 74.0, 78.0), "Karnataka", "Bengaluru Urban"),
    ((11.0, 14.0, 78.0, 81.0), "Tamil Nadu", "Chennai"),
    ((15.0, 20.0, 73.0, 81.0), "Maharashtra", "Mumbai Suburban"),
    ((20.0, 25.0, 68.0, 75.0), "Gujarat", "Ahmedabad"),
    ((24.0, 31.0, 68.0, 78.0), "Rajasthan", "Jaipur"),
    ((24.0, 31.0, 77.0, 85.0), "Uttar Pradesh", "Lucknow"),
    ((21.0, 28.0, 85.0, 89.0), "West Bengal", "Kolkata"),
)


def in_service_area(coord: Coordinate) -> bool:
    """Return True when the coordinate lies inside the national bounding box."""
    return INDIA_BOUNDS.contains(coord)
