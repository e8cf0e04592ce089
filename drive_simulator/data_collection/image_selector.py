"""Pick the street-level image that best matches a waypoint's position and heading."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Protocol

import requests

from drive_simulator.config import (
    DISTANCE_SCORE_WEIGHT,
    HEADING_SCORE_WEIGHT,
    MAX_HEADING_DIFFERENCE,
    SEARCH_RADIUS_DEGREES,
)
from drive_simulator.geometry.geodesy import heading_difference
from drive_simulator.utils.data_models import CandidateImage, GeoPoint, Waypoint
from drive_simulator.utils.errors import ImageryProviderError
from drive_simulator.utils.logging import get_logger

logger = get_logger(__name__)


class ImageryProvider(Protocol):
    def search_around(self, point: GeoPoint, radius_degrees: float = ...) -> List[CandidateImage]:
        ...


def planar_distance_degrees(a: GeoPoint, b: GeoPoint) -> float:
    """
    Euclidean distance in raw degree space.

    Only meaningful inside the ~20 m search box, where it ranks candidates the
    same way haversine would. Scores are calibrated against this value, so do
    not swap in a great-circle distance here.
    """
    return math.hypot(a.lat - b.lat, a.lon - b.lon)


def score_candidate(heading_diff: float, planar_distance: float) -> float:
    """Lower is better; heading alignment dominates residual distance."""
    return heading_diff * HEADING_SCORE_WEIGHT + planar_distance * DISTANCE_SCORE_WEIGHT


def select_best_image(
    target: GeoPoint,
    desired_heading: float,
    candidates: Iterable[CandidateImage],
    max_distance_degrees: float = SEARCH_RADIUS_DEGREES,
    max_heading_difference: float = MAX_HEADING_DIFFERENCE,
) -> Optional[CandidateImage]:
    """
    Choose the candidate best aligned with a target position and heading

    Candidates are discarded if they are panoramas, have no display URL, have
    no compass angle, lie farther than ``max_distance_degrees`` or face more
    than ``max_heading_difference`` away from ``desired_heading``. The survivor
    with the lowest score wins; on equal scores the earliest candidate is kept.

    Returns:
        Best candidate, or None if none survive
    """
    best: Optional[CandidateImage] = None
    best_score = math.inf

    for candidate in candidates:
        if candidate.is_pano or not candidate.thumb_url:
            continue
        if candidate.compass_angle is None:
            continue

        distance = planar_distance_degrees(candidate.point, target)
        if distance > max_distance_degrees:
            continue

        heading_diff = heading_difference(candidate.compass_angle, desired_heading)
        if heading_diff > max_heading_difference:
            continue

        score = score_candidate(heading_diff, distance)
        if score < best_score:
            best = candidate
            best_score = score

    return best


class LookupStatus(str, Enum):
    MATCH = "match"
    NOT_FOUND = "not_found"
    LOOKUP_ERROR = "lookup_error"


@dataclass(frozen=True)
class ImageLookupResult:
    """Outcome of one waypoint's image lookup"""

    waypoint: Waypoint
    status: LookupStatus
    image: Optional[CandidateImage] = None
    error: Optional[str] = None
    candidate_count: int = 0

    @property
    def matched(self) -> bool:
        return self.status is LookupStatus.MATCH


class ImageSelector:
    """Fetch candidates for a waypoint and select the best one without ever raising."""

    def __init__(
        self,
        provider: ImageryProvider,
        search_radius_degrees: float = SEARCH_RADIUS_DEGREES,
    ) -> None:
        self.provider = provider
        self.search_radius_degrees = search_radius_degrees
        self.logger = logger

    def lookup(self, waypoint: Waypoint) -> ImageLookupResult:
        target = waypoint.point
        try:
            candidates = self.provider.search_around(target, self.search_radius_degrees)
        except (ImageryProviderError, requests.RequestException) as error:
            self.logger.warning(
                "Image lookup failed",
                waypoint_id=waypoint.sequence_id,
                lat=waypoint.lat,
                lon=waypoint.lon,
                error=str(error),
            )
            return ImageLookupResult(
                waypoint=waypoint,
                status=LookupStatus.LOOKUP_ERROR,
                error=str(error),
            )
        except Exception as error:
            # One bad response must not abort the whole drive
            self.logger.exception(
                "Unexpected error during image lookup",
                waypoint_id=waypoint.sequence_id,
                error=str(error),
            )
            return ImageLookupResult(
                waypoint=waypoint,
                status=LookupStatus.LOOKUP_ERROR,
                error=str(error),
            )

        best = select_best_image(target, waypoint.bearing, candidates)
        if best is None:
            self.logger.debug(
                "No matching image",
                waypoint_id=waypoint.sequence_id,
                candidates=len(candidates),
            )
            return ImageLookupResult(
                waypoint=waypoint,
                status=LookupStatus.NOT_FOUND,
                candidate_count=len(candidates),
            )

        return ImageLookupResult(
            waypoint=waypoint,
            status=LookupStatus.MATCH,
            image=best,
            candidate_count=len(candidates),
        )
