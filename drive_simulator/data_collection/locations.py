"""Classify and normalize origin/destination input strings."""

import math
from typing import Optional, Tuple

from drive_simulator.utils.data_models import GeoPoint
from drive_simulator.utils.errors import InputError


def _split_numeric_pair(text: str) -> Optional[Tuple[float, float]]:
    parts = text.strip().split(",")
    if len(parts) != 2:
        return None
    try:
        first, second = float(parts[0].strip()), float(parts[1].strip())
    except ValueError:
        return None
    if not (math.isfinite(first) and math.isfinite(second)):
        return None
    return first, second


def _is_lat_lon(first: float, second: float) -> bool:
    return -90 <= first <= 90 and -180 <= second <= 180


def is_coordinate_input(text: str) -> bool:
    """True when text is a numeric pair valid as either ``lat,lon`` or ``lon,lat``."""
    pair = _split_numeric_pair(text)
    if pair is None:
        return False
    first, second = pair
    return _is_lat_lon(first, second) or _is_lat_lon(second, first)


def parse_coordinate_input(text: str) -> GeoPoint:
    """
    Parse a coordinate pair typed by the user

    ``lat,lon`` is assumed first; a pair only valid as ``lon,lat`` is swapped.

    Raises:
        InputError: If text is not a numeric pair or is out of range in both orders
    """
    pair = _split_numeric_pair(text)
    if pair is None:
        raise InputError(f"Expected a 'lat,lon' pair, got: {text!r}")

    first, second = pair
    if _is_lat_lon(first, second):
        return GeoPoint(lat=first, lon=second)
    if _is_lat_lon(second, first):
        return GeoPoint(lat=second, lon=first)
    raise InputError(
        "Invalid coordinates: lat must be -90 to 90, lon must be -180 to 180. "
        f"Got: {first},{second}"
    )


def looks_like_coordinate_pair(text: str) -> bool:
    """True for any two-number pair, whether or not it is in range."""
    return _split_numeric_pair(text) is not None


def format_lon_lat(point: GeoPoint) -> str:
    """Canonical ``lon,lat`` string passed between collaborators."""
    return f"{point.lon},{point.lat}"


def parse_lon_lat(text: str) -> GeoPoint:
    """Inverse of ``format_lon_lat``; used on geocoder answers."""
    pair = _split_numeric_pair(text)
    if pair is None:
        raise InputError(f"Expected a 'lon,lat' pair, got: {text!r}")
    lon, lat = pair
    if not _is_lat_lon(lat, lon):
        raise InputError(f"Coordinate out of range: {text!r}")
    return GeoPoint(lat=lat, lon=lon)
