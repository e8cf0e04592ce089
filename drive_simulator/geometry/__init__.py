from .geodesy import (
    calculate_bearing,
    calculate_pitch,
    destination_point,
    haversine_distance_km,
    heading_difference,
    normalize_bearing,
)
from .polyline import decode_polyline, encode_polyline
from .route_sampler import generate_evenly_spaced_points

__all__ = [
    "calculate_bearing",
    "calculate_pitch",
    "destination_point",
    "haversine_distance_km",
    "heading_difference",
    "normalize_bearing",
    "decode_polyline",
    "encode_polyline",
    "generate_evenly_spaced_points",
]
