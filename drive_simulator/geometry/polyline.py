"""Encoded polyline codec (Google / OSRM ``geometries=polyline`` format).

Each coordinate is stored as a delta from the previous point, scaled by
``10 ** precision``, zig-zag sign folded and split into 5-bit chunks. Chunks
are offset by 63 into printable ASCII, and every chunk except the last of a
value carries the 0x20 continuation bit.
"""

from typing import Iterable, List, Tuple

from pydantic import ValidationError

from drive_simulator.config import DEFAULT_POLYLINE_PRECISION
from drive_simulator.utils.data_models import GeoPoint
from drive_simulator.utils.errors import MalformedPolylineError

_ASCII_OFFSET = 63
_CHUNK_MASK = 0x1F
_CONTINUATION = 0x20


def _decode_value(encoded: str, index: int) -> Tuple[int, int]:
    """Decode one signed varint starting at ``index``; return (value, next_index)."""
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise MalformedPolylineError(
                f"Polyline ends inside a value at position {index}"
            )
        chunk = ord(encoded[index]) - _ASCII_OFFSET
        if chunk < 0 or chunk > 0x3F:
            raise MalformedPolylineError(
                f"Invalid polyline character {encoded[index]!r} at position {index}"
            )
        index += 1
        result |= (chunk & _CHUNK_MASK) << shift
        shift += 5
        if chunk < _CONTINUATION:
            break

    value = ~(result >> 1) if result & 1 else result >> 1
    return value, index


def decode_polyline(encoded: str, precision: int = DEFAULT_POLYLINE_PRECISION) -> List[GeoPoint]:
    """
    Decode an encoded polyline string

    Args:
        encoded: Encoded polyline
        precision: Number of decimal digits the coordinates were scaled by

    Returns:
        Points in the order they appear in the string

    Raises:
        MalformedPolylineError: If the string is truncated or holds invalid characters
    """
    factor = 10 ** precision
    points: List[GeoPoint] = []
    index = 0
    lat = 0
    lon = 0

    while index < len(encoded):
        lat_change, index = _decode_value(encoded, index)
        if index >= len(encoded):
            raise MalformedPolylineError(
                f"Polyline ends after a latitude with no longitude at position {index}"
            )
        lon_change, index = _decode_value(encoded, index)
        lat += lat_change
        lon += lon_change
        try:
            points.append(GeoPoint(lat=lat / factor, lon=lon / factor))
        except ValidationError as error:
            raise MalformedPolylineError(
                f"Polyline decodes to an out-of-range coordinate at position {index}"
            ) from error

    return points


def _encode_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else value << 1
    chunks = []
    while value >= _CONTINUATION:
        chunks.append(chr((_CONTINUATION | (value & _CHUNK_MASK)) + _ASCII_OFFSET))
        value >>= 5
    chunks.append(chr(value + _ASCII_OFFSET))
    return "".join(chunks)


def encode_polyline(
    points: Iterable[GeoPoint],
    precision: int = DEFAULT_POLYLINE_PRECISION,
) -> str:
    """Encode points into a polyline string, rounding to ``precision`` digits."""
    factor = 10 ** precision
    encoded: List[str] = []
    prev_lat = 0
    prev_lon = 0

    for point in points:
        lat = round(point.lat * factor)
        lon = round(point.lon * factor)
        encoded.append(_encode_value(lat - prev_lat))
        encoded.append(_encode_value(lon - prev_lon))
        prev_lat, prev_lon = lat, lon

    return "".join(encoded)
