from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class GeoPoint(BaseModel):
    """Geographic coordinate in decimal degrees"""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90, description="Latitude")
    lon: float = Field(ge=-180, le=180, description="Longitude")

    def as_tuple(self) -> Tuple[float, float]:
        return self.lat, self.lon


class Waypoint(BaseModel):
    """Sampled route position with its direction of travel"""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90, description="Latitude")
    lon: float = Field(ge=-180, le=180, description="Longitude")
    bearing: float = Field(ge=0, lt=360, description="Direction of travel in degrees")
    sequence_id: int = Field(default=0, description="Order along the route")

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lon=self.lon)


class CandidateImage(BaseModel):
    """Geotagged street-level image returned by the imagery provider"""
    model_config = ConfigDict(frozen=True)

    image_id: str = Field(description="Provider image identifier")
    lat: float = Field(description="Capture latitude")
    lon: float = Field(description="Capture longitude")
    compass_angle: Optional[float] = Field(default=None, description="Camera heading in degrees")
    thumb_url: Optional[str] = Field(default=None, description="Displayable image URL")
    is_pano: bool = Field(default=False, description="Whether the image is a panorama")
    captured_at: Optional[int] = Field(default=None, description="Capture time, epoch milliseconds")

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lon=self.lon)

    @classmethod
    def from_mapillary(cls, record: Dict[str, Any], thumb_field: str) -> Optional["CandidateImage"]:
        """
        Build a candidate from a Mapillary Graph API image record

        Args:
            record: One entry of the ``data`` array
            thumb_field: Name of the thumbnail URL field requested

        Returns:
            CandidateImage, or None when the record has no id or geometry
        """
        image_id = record.get("id")
        geometry = record.get("geometry") or record.get("computed_geometry") or {}
        coordinates = geometry.get("coordinates") if isinstance(geometry, dict) else None
        if not image_id or not coordinates or len(coordinates) < 2:
            return None

        compass_angle = record.get("computed_compass_angle")
        if compass_angle is None:
            compass_angle = record.get("compass_angle")

        # GeoJSON order is [lon, lat]
        return cls(
            image_id=str(image_id),
            lat=float(coordinates[1]),
            lon=float(coordinates[0]),
            compass_angle=compass_angle,
            thumb_url=record.get(thumb_field),
            is_pano=bool(record.get("is_pano", False)),
            captured_at=record.get("captured_at"),
        )


class SelectedImage(BaseModel):
    """Image accepted into the drive, paired with its own capture coordinate"""
    model_config = ConfigDict(frozen=True)

    image: CandidateImage
    lat: float
    lon: float
    waypoint_id: int = Field(description="Waypoint the image was matched to")

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lon=self.lon)


class DriveSnapshot(BaseModel):
    """Read-only view of the images accepted so far"""
    model_config = ConfigDict(frozen=True)

    images: Tuple[SelectedImage, ...] = ()

    def __len__(self) -> int:
        return len(self.images)

    @property
    def image_urls(self) -> List[str]:
        return [selected.image.thumb_url or "" for selected in self.images]

    @property
    def coordinates(self) -> List[Tuple[float, float]]:
        return [(selected.lat, selected.lon) for selected in self.images]

    def to_records(self) -> List[Dict[str, Any]]:
        """Flatten the snapshot for JSON export."""
        return [
            {
                "image_id": selected.image.image_id,
                "image_url": selected.image.thumb_url,
                "lat": selected.lat,
                "lon": selected.lon,
                "compass_angle": selected.image.compass_angle,
                "waypoint_id": selected.waypoint_id,
            }
            for selected in self.images
        ]


class PipelinePhase(str, Enum):
    IDLE = "idle"
    GEOCODING_ORIGIN = "geocoding_origin"
    GEOCODING_DESTINATION = "geocoding_destination"
    FETCHING_ROUTE = "fetching_route"
    SAMPLING = "sampling"
    FETCHING_IMAGES = "fetching_images"
    COMPLETE = "complete"
    CANCELLED = "cancelled"
    FAILED = "failed"


class ProgressUpdate(BaseModel):
    """Progress notification emitted after each meaningful pipeline step"""
    model_config = ConfigDict(frozen=True)

    phase: PipelinePhase
    percent: int = Field(ge=0, le=100)
    message: str
