"""Shared fixtures: in-memory geocoder, router and imagery provider."""

import threading
import time
from typing import Dict, List, Optional, Sequence, Set, Tuple

import pytest

from drive_simulator.config import SEARCH_RADIUS_DEGREES
from drive_simulator.data_collection.route_provider import RouteResponse
from drive_simulator.geometry.polyline import encode_polyline
from drive_simulator.utils.data_models import CandidateImage, GeoPoint
from drive_simulator.utils.errors import ImageryProviderError, LookupFailure

ORIGIN = GeoPoint(lat=38.5, lon=-120.2)

# Straight route due north: 0 m, ~75.6 m, ~155.7 m
STRAIGHT_ROUTE = [
    GeoPoint(lat=38.5, lon=-120.2),
    GeoPoint(lat=38.50068, lon=-120.2),
    GeoPoint(lat=38.5014, lon=-120.2),
]


def make_candidate(
    image_id: str,
    lat: float,
    lon: float,
    compass_angle: Optional[float] = 0.0,
    is_pano: bool = False,
    thumb_url: Optional[str] = "auto",
) -> CandidateImage:
    return CandidateImage(
        image_id=image_id,
        lat=lat,
        lon=lon,
        compass_angle=compass_angle,
        is_pano=is_pano,
        thumb_url=f"https://images.example/{image_id}.jpg" if thumb_url == "auto" else thumb_url,
    )


# One usable image per 50 m mark of STRAIGHT_ROUTE, plus decoys
STRAIGHT_ROUTE_IMAGES = [
    make_candidate("img-0", 38.50001, -120.20001, compass_angle=5.0),
    make_candidate("img-0-backwards", 38.5, -120.2, compass_angle=200.0),
    make_candidate("img-1", 38.50045, -120.2, compass_angle=2.0),
    make_candidate("img-2", 38.50090, -120.2, compass_angle=355.0),
    make_candidate("img-3-pano", 38.50135, -120.2, compass_angle=0.0, is_pano=True),
    make_candidate("img-3", 38.50134, -120.20002, compass_angle=10.0),
]


class FakeGeocoder:
    def __init__(self, answers: Dict[str, str]) -> None:
        self.answers = answers
        self.calls: List[str] = []

    def geocode(self, address: str) -> str:
        self.calls.append(address)
        if address not in self.answers:
            raise LookupFailure(f"Could not geocode address: {address}")
        return self.answers[address]


class FakeRouter:
    def __init__(
        self,
        points: Sequence[GeoPoint] = (),
        encoded: Optional[str] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.encoded = encode_polyline(points) if encoded is None else encoded
        self.error = error
        self.calls: List[Tuple[GeoPoint, GeoPoint]] = []

    def route(self, origin: GeoPoint, destination: GeoPoint) -> RouteResponse:
        self.calls.append((origin, destination))
        if self.error is not None:
            raise self.error
        return RouteResponse(code="Ok", encoded_polyline=self.encoded)


class FakeImagery:
    """Serves fixture images inside the requested box; thread safe call log."""

    def __init__(
        self,
        images: Sequence[CandidateImage],
        failing_lats: Sequence[float] = (),
        delays: Optional[Dict[int, float]] = None,
    ) -> None:
        self.images = list(images)
        self.failing_lats: Set[float] = {round(lat, 6) for lat in failing_lats}
        self.delays = delays or {}
        self.calls: List[GeoPoint] = []
        self._lock = threading.Lock()

    def search_around(
        self,
        point: GeoPoint,
        radius_degrees: float = SEARCH_RADIUS_DEGREES,
    ) -> List[CandidateImage]:
        with self._lock:
            call_index = len(self.calls)
            self.calls.append(point)

        delay = self.delays.get(call_index)
        if delay:
            time.sleep(delay)

        if round(point.lat, 6) in self.failing_lats:
            raise ImageryProviderError("Mapillary API error: 500 Server Error")

        return [
            image
            for image in self.images
            if abs(image.lat - point.lat) <= radius_degrees
            and abs(image.lon - point.lon) <= radius_degrees
        ]


@pytest.fixture
def straight_route():
    return list(STRAIGHT_ROUTE)


@pytest.fixture
def fixture_imagery():
    return FakeImagery(STRAIGHT_ROUTE_IMAGES)
