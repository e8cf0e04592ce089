"""Mapillary Graph API client for candidate street-level images."""

from dataclasses import dataclass
from typing import List, Optional

import requests
from pydantic import ValidationError

from drive_simulator.config import (
    MAPILLARY_IMAGE_FIELDS,
    RESULT_WINDOW_SIZE,
    SEARCH_RADIUS_DEGREES,
    THUMBNAIL_FIELD,
    settings,
)
from drive_simulator.utils.data_models import CandidateImage, GeoPoint
from drive_simulator.utils.errors import ConfigurationError, ImageryProviderError
from drive_simulator.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class BoundingBox:
    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @classmethod
    def around(cls, point: GeoPoint, radius_degrees: float = SEARCH_RADIUS_DEGREES) -> "BoundingBox":
        return cls(
            min_lon=point.lon - radius_degrees,
            min_lat=point.lat - radius_degrees,
            max_lon=point.lon + radius_degrees,
            max_lat=point.lat + radius_degrees,
        )

    def to_param(self) -> str:
        return f"{self.min_lon},{self.min_lat},{self.max_lon},{self.max_lat}"


class MapillaryClient:
    """
    Search Mapillary images inside a bounding box

    The access token and base URL are fixed at construction; callers only
    pass geometry.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        limit: int = RESULT_WINDOW_SIZE,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.logger = logger
        self.access_token = access_token or settings.mapillary_access_token
        if not self.access_token:
            raise ConfigurationError("Mapillary access token is required for image search")
        self.base_url = (base_url or settings.mapillary_api_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout
        self.limit = limit
        self.session = session or requests.Session()

    def search(
        self,
        bbox: BoundingBox,
        fields: str = MAPILLARY_IMAGE_FIELDS,
        thumb_field: str = THUMBNAIL_FIELD,
    ) -> List[CandidateImage]:
        """
        Return candidate images captured inside ``bbox``

        Only the first ``limit`` results are requested; there is no paging.

        Raises:
            ImageryProviderError: On transport errors, non-2xx status, or bad JSON
        """
        params = {
            "access_token": self.access_token,
            "fields": fields,
            "bbox": bbox.to_param(),
            "limit": str(self.limit),
        }

        try:
            response = self.session.get(
                f"{self.base_url}/images",
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as error:
            raise ImageryProviderError(f"Mapillary API error: {error}") from error
        except ValueError as error:
            raise ImageryProviderError(f"Mapillary returned invalid JSON: {error}") from error

        candidates = []
        for record in payload.get("data") or []:
            try:
                candidate = CandidateImage.from_mapillary(record, thumb_field)
            except (ValidationError, TypeError, ValueError) as error:
                self.logger.debug(
                    "Skipping malformed Mapillary record",
                    image_id=record.get("id") if isinstance(record, dict) else None,
                    error=str(error),
                )
                continue
            if candidate is not None:
                candidates.append(candidate)

        self.logger.debug(
            "Mapillary search complete",
            bbox=bbox.to_param(),
            returned=len(payload.get("data") or []),
            usable=len(candidates),
        )
        return candidates

    def search_around(
        self,
        point: GeoPoint,
        radius_degrees: float = SEARCH_RADIUS_DEGREES,
    ) -> List[CandidateImage]:
        return self.search(BoundingBox.around(point, radius_degrees))
