"""
Great-circle distance, distance labels and compass helpers.
"""

from math import radians, degrees, sin, cos, sqrt, atan2
from typing import Any

from shared.constants import COMPASS_DIRECTIONS, EARTH_RADIUS_M


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Calculate the distance in meters between two WGS84 coordinates.

    No range validation: out-of-range degrees still yield a number.
    """
    dlat = radians(lat2 - lat1)
    dlng = radians(lng2 - lng1)

    a = sin(dlat/2)**2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlng/2)**2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_M * c


def distance_m(a: Any, b: Any) -> float:
    """Haversine distance between two objects exposing `latitude` / `longitude`."""
    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


def format_distance(distance_m: float) -> str:
    """
    Human-readable distance label used by the list and map views.

    - under 1 km  -> "850m"
    - under 10 km -> "3.2km"
    - otherwise   -> "27km"
    """
    km = distance_m / 1000
    if km < 1:
        return f"{round(distance_m)}m"
    if km < 10:
        return f"{km:.1f}km"
    return f"{round(km)}km"


def bearing_deg(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """두 좌표 사이의 방위각 (degrees, 0~360)"""
    phi1, phi2 = radians(lat1), radians(lat2)
    dlam = radians(lng2 - lng1)
    x = sin(dlam) * cos(phi2)
    y = cos(phi1) * sin(phi2) - sin(phi1) * cos(phi2) * cos(dlam)
    return (degrees(atan2(x, y)) + 360) % 360


def compass_direction(heading_deg: float) -> str:
    """8방위 라벨 (N, NE, ... NW)"""
    heading = heading_deg % 360
    index = int((heading + 22.5) // 45) % len(COMPASS_DIRECTIONS)
    return COMPASS_DIRECTIONS[index]
