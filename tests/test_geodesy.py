"""Tests for great-circle distance, bearing and projection."""

import math

import pytest

from drive_simulator.geometry.geodesy import (
    calculate_bearing,
    calculate_pitch,
    destination_point,
    haversine_distance_km,
    heading_difference,
    normalize_bearing,
)
from drive_simulator.utils.data_models import GeoPoint

ORIGIN = GeoPoint(lat=38.5, lon=-120.2)
KM_PER_DEGREE = 6371 * math.pi / 180


class TestHaversineDistance:
    def test_one_degree_along_equator(self):
        distance = haversine_distance_km((0.0, 0.0), (0.0, 1.0))
        assert distance == pytest.approx(KM_PER_DEGREE, rel=1e-9)

    def test_same_point_is_zero(self):
        assert haversine_distance_km(ORIGIN, ORIGIN) == 0.0

    @pytest.mark.parametrize(
        "other",
        [
            GeoPoint(lat=40.7, lon=-120.95),
            GeoPoint(lat=-33.86, lon=151.21),
            GeoPoint(lat=89.9, lon=179.9),
        ],
    )
    def test_symmetric(self, other):
        assert haversine_distance_km(ORIGIN, other) == haversine_distance_km(other, ORIGIN)

    def test_accepts_tuples_and_points(self):
        as_tuple = haversine_distance_km((38.5, -120.2), (40.7, -120.95))
        as_point = haversine_distance_km(ORIGIN, GeoPoint(lat=40.7, lon=-120.95))
        assert as_tuple == as_point


class TestBearing:
    def test_cardinal_directions(self):
        assert calculate_bearing((0.0, 0.0), (1.0, 0.0)) == pytest.approx(0.0)
        assert calculate_bearing((0.0, 0.0), (0.0, 1.0)) == pytest.approx(90.0)
        assert calculate_bearing((0.0, 0.0), (-1.0, 0.0)) == pytest.approx(180.0)
        assert calculate_bearing((0.0, 0.0), (0.0, -1.0)) == pytest.approx(270.0)

    def test_identical_points_do_not_fail(self):
        assert calculate_bearing(ORIGIN, ORIGIN) == 0.0

    def test_result_in_range(self):
        bearing = calculate_bearing((0.0, 0.0), (1.0, -1e-12))
        assert 0.0 <= bearing < 360.0


class TestDestinationPoint:
    @pytest.mark.parametrize("bearing", [0.0, 30.0, 90.0, 135.0, 180.0, 225.0, 270.0, 359.5])
    @pytest.mark.parametrize("distance_km", [0.01, 0.5, 25.0, 400.0])
    def test_round_trip_with_bearing_and_distance(self, bearing, distance_km):
        target = destination_point(ORIGIN, bearing, distance_km)

        assert heading_difference(calculate_bearing(ORIGIN, target), bearing) < 1e-3
        assert haversine_distance_km(ORIGIN, target) == pytest.approx(distance_km, rel=1e-6)

    def test_zero_distance_returns_origin(self):
        target = destination_point(ORIGIN, 123.0, 0.0)
        assert target.lat == pytest.approx(ORIGIN.lat)
        assert target.lon == pytest.approx(ORIGIN.lon)

    def test_longitude_wraps_across_antimeridian(self):
        target = destination_point((0.0, 179.9), 90.0, 50.0)
        assert -180.0 <= target.lon < -179.0


class TestAngles:
    @pytest.mark.parametrize(
        "a, b, expected",
        [(350.0, 10.0, 20.0), (10.0, 350.0, 20.0), (0.0, 180.0, 180.0), (90.0, 90.0, 0.0)],
    )
    def test_heading_difference_wraps(self, a, b, expected):
        assert heading_difference(a, b) == pytest.approx(expected)

    def test_normalize_bearing(self):
        assert normalize_bearing(-90.0) == pytest.approx(270.0)
        assert normalize_bearing(720.0) == 0.0
        assert normalize_bearing(-1e-17) == 0.0


class TestPitch:
    def test_forty_five_degrees_at_equal_height_and_distance(self):
        current = destination_point(ORIGIN, 90.0, 0.1)
        assert calculate_pitch(ORIGIN, current, 0.1) == pytest.approx(45.0, rel=1e-6)

    def test_straight_up_when_standing_at_center(self):
        assert calculate_pitch(ORIGIN, ORIGIN, 0.05) == 90.0
