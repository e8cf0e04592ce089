"""Tests for evenly spaced waypoint generation."""

import math

import pytest

from drive_simulator.geometry.geodesy import (
    destination_point,
    haversine_distance_km,
    heading_difference,
)
from drive_simulator.geometry.route_sampler import generate_evenly_spaced_points
from drive_simulator.utils.data_models import GeoPoint
from drive_simulator.utils.errors import InputError

START = GeoPoint(lat=38.5, lon=-120.2)


def straight_route(length_m, bearing=0.0, cuts=(0.4,)):
    """Points on one great circle from START, split at the given fractions."""
    fractions = [0.0, *cuts, 1.0]
    return [destination_point(START, bearing, length_m * f / 1000) for f in fractions]


@pytest.mark.parametrize("route", [[], [START]])
def test_fewer_than_two_points_yields_nothing(route):
    assert generate_evenly_spaced_points(route, 50) == []


def test_first_waypoint_is_route_start_facing_first_segment():
    route = [(0.0, 0.0), (0.0, 0.001), (0.001, 0.001)]
    waypoints = generate_evenly_spaced_points(route, 50)

    assert (waypoints[0].lat, waypoints[0].lon) == (0.0, 0.0)
    assert waypoints[0].bearing == pytest.approx(90.0)
    assert waypoints[0].sequence_id == 0


@pytest.mark.parametrize(
    "length_m, spacing_m",
    [(175.0, 50.0), (1234.0, 100.0), (99.0, 20.0), (3000.0, 7.0)],
)
def test_straight_route_spacing(length_m, spacing_m):
    route = straight_route(length_m, bearing=63.0, cuts=(0.25, 0.5, 0.8))
    waypoints = generate_evenly_spaced_points(route, spacing_m)

    assert len(waypoints) == math.floor(length_m / spacing_m) + 1
    for previous, current in zip(waypoints, waypoints[1:]):
        gap_m = haversine_distance_km(previous.point, current.point) * 1000
        assert gap_m == pytest.approx(spacing_m, rel=0.01)
        # Great-circle bearing drifts slightly over a few km
        assert heading_difference(current.bearing, 63.0) < 0.1


@pytest.mark.parametrize("bearing", [0.0, 45.0, 180.0, 301.0])
@pytest.mark.parametrize(
    "length_m, spacing_m",
    [(150.0, 50.0), (100.0, 25.0), (300.0, 100.0)],
)
def test_spacing_multiple_at_route_end_is_emitted(length_m, spacing_m, bearing):
    route = straight_route(length_m, bearing=bearing, cuts=(0.3,))
    waypoints = generate_evenly_spaced_points(route, spacing_m)

    assert len(waypoints) == math.floor(length_m / spacing_m) + 1
    last_to_end_m = haversine_distance_km(waypoints[-1].point, route[-1]) * 1000
    assert last_to_end_m < 1e-3


def test_spacing_multiple_on_interior_vertex():
    # Corner sits exactly 100 m along the route
    corner = destination_point(START, 90.0, 0.1)
    route = [START, corner, destination_point(corner, 0.0, 0.1)]
    waypoints = generate_evenly_spaced_points(route, 50)

    assert len(waypoints) == 5
    assert haversine_distance_km(waypoints[2].point, corner) * 1000 < 1e-3


def test_waypoints_follow_route_order():
    route = straight_route(500.0, bearing=200.0, cuts=(0.1, 0.3, 0.35, 0.9))
    waypoints = generate_evenly_spaced_points(route, 40)

    distances = [haversine_distance_km(START, wp.point) for wp in waypoints]
    assert distances == sorted(distances)
    assert [wp.sequence_id for wp in waypoints] == list(range(len(waypoints)))


def test_bearing_follows_segment_after_turn():
    # ~111 m east then ~111 m north
    route = [(0.0, 0.0), (0.0, 0.001), (0.001, 0.001)]
    waypoints = generate_evenly_spaced_points(route, 50)

    assert len(waypoints) == 5
    assert [round(wp.bearing) % 360 for wp in waypoints[:3]] == [90, 90, 90]
    assert heading_difference(waypoints[3].bearing, 0.0) < 1e-6
    assert heading_difference(waypoints[4].bearing, 0.0) < 1e-6

    # 150 m mark sits ~38.8 m north of the corner
    corner_to_third = haversine_distance_km((0.0, 0.001), waypoints[3].point) * 1000
    first_leg_m = haversine_distance_km((0.0, 0.0), (0.0, 0.001)) * 1000
    assert corner_to_third == pytest.approx(150.0 - first_leg_m, abs=1e-6)
    assert waypoints[3].lon == pytest.approx(0.001, abs=1e-9)


def test_duplicate_consecutive_points_terminate():
    route = [(0.0, 0.0), (0.0, 0.0), (0.0, 0.001), (0.0, 0.001), (0.0, 0.002), (0.0, 0.002)]
    waypoints = generate_evenly_spaced_points(route, 50)

    # ~222.4 m of road: marks at 0, 50, 100, 150, 200
    assert len(waypoints) == 5
    for waypoint in waypoints[1:]:
        assert waypoint.bearing == pytest.approx(90.0)
        assert waypoint.lat == pytest.approx(0.0, abs=1e-12)


def test_route_of_identical_points_only_emits_start():
    route = [START, START, START]
    waypoints = generate_evenly_spaced_points(route, 10)

    assert len(waypoints) == 1
    assert waypoints[0].bearing == 0.0


def test_spacing_longer_than_route_only_emits_start():
    waypoints = generate_evenly_spaced_points(straight_route(30.0), 50)
    assert len(waypoints) == 1


def test_does_not_append_destination():
    route = straight_route(175.0)
    waypoints = generate_evenly_spaced_points(route, 50)

    last_to_end_m = haversine_distance_km(waypoints[-1].point, route[-1]) * 1000
    assert last_to_end_m == pytest.approx(25.0, rel=0.01)


@pytest.mark.parametrize("spacing", [0, -5])
def test_non_positive_spacing_rejected(spacing):
    with pytest.raises(InputError):
        generate_evenly_spaced_points(straight_route(100.0), spacing)
