"""Resample a route polyline into evenly spaced, bearing-annotated waypoints."""

from typing import List, Sequence

from drive_simulator.config import DEFAULT_SAMPLING_INTERVAL
from drive_simulator.utils.data_models import Waypoint
from drive_simulator.utils.errors import InputError
from drive_simulator.utils.logging import get_logger

from .geodesy import PointLike, to_lat_lon, calculate_bearing, destination_point, haversine_distance_km

logger = get_logger(__name__)

# Slack for float noise in summed segment lengths (1 micrometre)
DISTANCE_TOLERANCE_KM = 1e-9


def generate_evenly_spaced_points(
    route: Sequence[PointLike],
    target_spacing_meters: float = DEFAULT_SAMPLING_INTERVAL,
) -> List[Waypoint]:
    """
    Sample waypoints along a route at a fixed physical spacing

    The first route point is always emitted, facing along the first segment.
    Further waypoints sit at every multiple of the spacing up to the route
    length; a multiple that lands on the route end is emitted, otherwise the
    destination itself is not. Each is projected along the great circle from
    the start of the segment containing it and carries that segment's bearing.

    Args:
        route: Ordered route points
        target_spacing_meters: Distance between consecutive waypoints

    Returns:
        Waypoints in travel order; empty when the route has fewer than 2 points

    Raises:
        InputError: If the spacing is not positive
    """
    if target_spacing_meters <= 0:
        raise InputError(f"Sampling interval must be positive, got {target_spacing_meters}")
    if len(route) < 2:
        return []

    coords = [to_lat_lon(point) for point in route]
    spacing_km = target_spacing_meters / 1000

    segment_lengths = [
        haversine_distance_km(coords[i], coords[i + 1]) for i in range(len(coords) - 1)
    ]
    total_distance = sum(segment_lengths)

    waypoints = [
        Waypoint(
            lat=coords[0][0],
            lon=coords[0][1],
            bearing=calculate_bearing(coords[0], coords[1]),
            sequence_id=0,
        )
    ]

    # Cursor: segment index, route distance before that segment, distance consumed inside it
    segment_index = 0
    accumulated = 0.0
    into_segment = 0.0
    next_distance = spacing_km

    while (
        next_distance <= total_distance + DISTANCE_TOLERANCE_KM
        and segment_index < len(segment_lengths)
    ):
        segment_length = segment_lengths[segment_index]
        remaining = segment_length - into_segment
        offset = next_distance - (accumulated + into_segment)

        if segment_length > 0 and offset <= remaining + DISTANCE_TOLERANCE_KM:
            into_segment = min(into_segment + offset, segment_length)
            start = coords[segment_index]
            bearing = calculate_bearing(start, coords[segment_index + 1])
            point = destination_point(start, bearing, into_segment)
            waypoints.append(
                Waypoint(
                    lat=point.lat,
                    lon=point.lon,
                    bearing=bearing,
                    sequence_id=len(waypoints),
                )
            )
            next_distance = spacing_km * len(waypoints)
        else:
            accumulated += segment_length
            into_segment = 0.0
            segment_index += 1

    logger.debug(
        "Sampled route",
        route_points=len(coords),
        waypoints=len(waypoints),
        total_km=total_distance,
        spacing_m=target_spacing_meters,
    )
    return waypoints
