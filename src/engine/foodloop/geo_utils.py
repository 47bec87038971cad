"""Shared geographic utility functions."""

import math

EARTH_RADIUS_KM = 6371.0

# Fixed lookup used in place of geocoding by the registration and listing forms
CITY_COORDINATES: dict[str, tuple[float, float]] = {
    "delhi": (28.6139, 77.2090),
    "mumbai": (19.0760, 72.8777),
    "bangalore": (12.9716, 77.5946),
    "chennai": (13.0827, 80.2707),
    "kolkata": (22.5726, 88.3639),
}

DEFAULT_CITY = "delhi"


def haversine_km(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    radius_km: float = EARTH_RADIUS_KM,
) -> float:
    """Great-circle distance between two WGS84 points.

    Args:
        lat1: Latitude of the first point in degrees.
        lon1: Longitude of the first point in degrees.
        lat2: Latitude of the second point in degrees.
        lon2: Longitude of the second point in degrees.
        radius_km: Sphere radius to use.

    Returns:
        Distance in kilometres.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    a = min(1.0, max(0.0, a))  # rounding can push near-antipodal points past 1
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return radius_km * c


def is_valid_coordinate(lat: float | None, lon: float | None) -> bool:
    """Check that a latitude/longitude pair is present, finite and in WGS84 range."""
    if lat is None or lon is None:
        return False
    try:
        lat_f = float(lat)
        lon_f = float(lon)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat_f) and math.isfinite(lon_f)):
        return False
    return -90 <= lat_f <= 90 and -180 <= lon_f <= 180


def lookup_city_coordinates(
    text: str,
    default: str | None = DEFAULT_CITY,
) -> tuple[float, float] | None:
    """Resolve a free-text address to coordinates via the fixed city table.

    The first city name contained in the text (case-insensitive) wins.

    Args:
        text: Address or location string, e.g. "321 Food Court, Delhi, India".
        default: City to fall back to when nothing matches, or None for no fallback.

    Returns:
        (latitude, longitude), or None when nothing matches and no default is given.
    """
    lowered = (text or "").lower()
    for city, coords in CITY_COORDINATES.items():
        if city in lowered:
            return coords
    if default is None:
        return None
    return CITY_COORDINATES[default]
