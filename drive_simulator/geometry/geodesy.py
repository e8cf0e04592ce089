"""Great-circle math on a spherical Earth.

All functions take ``GeoPoint`` instances or ``(lat, lon)`` tuples in decimal
degrees and are pure. Distances are kilometres on a sphere of radius
``EARTH_RADIUS_KM``.
"""

import math
from typing import Tuple, Union

from drive_simulator.config import EARTH_RADIUS_KM
from drive_simulator.utils.data_models import GeoPoint

PointLike = Union[GeoPoint, Tuple[float, float]]


def to_lat_lon(point: PointLike) -> Tuple[float, float]:
    if isinstance(point, GeoPoint):
        return point.lat, point.lon
    lat, lon = point
    return float(lat), float(lon)


def normalize_bearing(degrees: float) -> float:
    """Wrap an angle into [0, 360)."""
    bearing = degrees % 360.0
    # -1e-17 % 360 rounds to 360.0
    return 0.0 if bearing >= 360.0 else bearing


def heading_difference(a: float, b: float) -> float:
    """Absolute angular difference between two headings, in [0, 180]."""
    diff = abs(a - b) % 360.0
    return 360.0 - diff if diff > 180.0 else diff


def calculate_bearing(point_a: PointLike, point_b: PointLike) -> float:
    """
    Initial compass bearing from point_a to point_b along the great circle

    Returns:
        Bearing in degrees, [0, 360). Coincident points give 0.0.
    """
    lat1, lon1 = to_lat_lon(point_a)
    lat2, lon2 = to_lat_lon(point_b)
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lon = math.radians(lon2 - lon1)

    x = math.sin(delta_lon) * math.cos(lat2_rad)
    y = (
        math.cos(lat1_rad) * math.sin(lat2_rad)
        - math.sin(lat1_rad) * math.cos(lat2_rad) * math.cos(delta_lon)
    )
    # atan2(0, 0) is 0, so identical points are stable
    return normalize_bearing(math.degrees(math.atan2(x, y)))


def haversine_distance_km(point_a: PointLike, point_b: PointLike) -> float:
    """Great-circle distance between two points in kilometres."""
    lat1, lon1 = to_lat_lon(point_a)
    lat2, lon2 = to_lat_lon(point_b)
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def destination_point(origin: PointLike, bearing_deg: float, distance_km: float) -> GeoPoint:
    """
    Project a point along a great circle

    Args:
        origin: Starting point
        bearing_deg: Initial bearing in degrees clockwise from north
        distance_km: Distance to travel in kilometres

    Returns:
        GeoPoint reached, longitude wrapped into [-180, 180)
    """
    lat1, lon1 = to_lat_lon(origin)
    lat1_rad = math.radians(lat1)
    lon1_rad = math.radians(lon1)
    bearing_rad = math.radians(bearing_deg)
    angular = distance_km / EARTH_RADIUS_KM

    sin_lat2 = (
        math.sin(lat1_rad) * math.cos(angular)
        + math.cos(lat1_rad) * math.sin(angular) * math.cos(bearing_rad)
    )
    lat2_rad = math.asin(max(-1.0, min(1.0, sin_lat2)))
    lon2_rad = lon1_rad + math.atan2(
        math.sin(bearing_rad) * math.sin(angular) * math.cos(lat1_rad),
        math.cos(angular) - math.sin(lat1_rad) * math.sin(lat2_rad),
    )

    lon2 = (math.degrees(lon2_rad) + 540.0) % 360.0 - 180.0
    return GeoPoint(lat=math.degrees(lat2_rad), lon=lon2)


def calculate_pitch(center: PointLike, current: PointLike, height_km: float) -> float:
    """
    Camera pitch needed at ``current`` to look at the top of an object
    ``height_km`` tall standing at ``center``.
    """
    distance = haversine_distance_km(center, current)
    if distance == 0:
        return 90.0 if height_km > 0 else 0.0
    return math.degrees(math.atan(height_km / distance))
