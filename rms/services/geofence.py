"""
Geospatial helpers.
Uses Haversine formula to calculate distance between points.
"""
import math
from typing import Optional, Sequence

# Earth radius in meters
EARTH_RADIUS_M = 6371000


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on Earth.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in meters
    """
    # Convert to radians
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    # Haversine formula
    a = (
        math.sin(delta_phi / 2) ** 2 +
        math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def within_radius(
    center_lat: float,
    center_lng: float,
    point: Optional[Sequence[float]],
    radius_m: float,
) -> bool:
    """
    Check whether a ``[lng, lat]`` point lies within ``radius_m`` of the center.

    A missing point never matches.
    """
    if point is None:
        return False
    lng, lat = point[0], point[1]
    return haversine_distance(center_lat, center_lng, lat, lng) <= radius_m
