from math import asin, cos, radians, sin, sqrt
from typing import Optional

EARTH_RADIUS_KM = 6371  # https://en.wikipedia.org/wiki/Earth_radius


def distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    round_ndigits: Optional[int] = None,
) -> float:
    """
    Calculates distance in km between two points on a sphere given their
    latitudes and longitudes.
    https://en.wikipedia.org/wiki/Haversine_formula
    """
    lat1 = radians(lat1)
    lat2 = radians(lat2)
    lon1 = radians(lon1)
    lon2 = radians(lon2)

    dlon = lon2 - lon1
    dlat = lat2 - lat1
    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    km = 2 * EARTH_RADIUS_KM * asin(min(1.0, sqrt(h)))
    if round_ndigits is None:
        return km
    return round(km, round_ndigits)


def node_distance(a, b) -> float:
    """Great-circle distance in km between two objects exposing ``lat``/``lon``."""
    return distance(a.lat, a.lon, b.lat, b.lon)
