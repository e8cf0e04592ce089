"""Tests for coordinate input classification and parsing."""

import pytest

from drive_simulator.data_collection.locations import (
    format_lon_lat,
    is_coordinate_input,
    looks_like_coordinate_pair,
    parse_coordinate_input,
    parse_lon_lat,
)
from drive_simulator.utils.data_models import GeoPoint
from drive_simulator.utils.errors import InputError


class TestCoordinateInput:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("38.5,-120.2", (38.5, -120.2)),
            (" 38.5 , -120.2 ", (38.5, -120.2)),
            ("-33.86,151.21", (-33.86, 151.21)),
            ("90,180", (90.0, 180.0)),
        ],
    )
    def test_lat_lon_pairs(self, text, expected):
        point = parse_coordinate_input(text)
        assert point.as_tuple() == expected
        assert is_coordinate_input(text)

    def test_pair_only_valid_as_lon_lat_is_swapped(self):
        point = parse_coordinate_input("151.21,-33.86")
        assert point.as_tuple() == (-33.86, 151.21)

    def test_out_of_range_in_both_orders(self):
        assert looks_like_coordinate_pair("200,300")
        assert not is_coordinate_input("200,300")
        with pytest.raises(InputError, match="lat must be -90 to 90"):
            parse_coordinate_input("200,300")

    @pytest.mark.parametrize(
        "text",
        ["Sacramento, CA", "1600 Amphitheatre Parkway", "1,2,3", "38.5", "nan,1", "inf,0", ""],
    )
    def test_non_pairs_are_addresses(self, text):
        assert not looks_like_coordinate_pair(text)
        assert not is_coordinate_input(text)
        with pytest.raises(InputError):
            parse_coordinate_input(text)


class TestLonLatStrings:
    def test_format(self):
        assert format_lon_lat(GeoPoint(lat=38.5, lon=-120.2)) == "-120.2,38.5"

    def test_parse_inverts_format(self):
        point = GeoPoint(lat=-33.86, lon=151.21)
        assert parse_lon_lat(format_lon_lat(point)) == point

    @pytest.mark.parametrize("text", ["not coordinates", "10,95", "-120.2"])
    def test_parse_rejects_bad_answers(self, text):
        with pytest.raises(InputError):
            parse_lon_lat(text)
