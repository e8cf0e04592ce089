"""Application settings management for the drive simulator."""

from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_BATCH_DELAY,
    DEFAULT_BATCH_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SAMPLING_INTERVAL,
    MIN_IMAGE_DISTANCE_KM,
    NO_IMAGES_GRACE_SECONDS,
)

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra environment variables
    )

    # API Keys
    mapillary_access_token: Optional[str] = Field(default=None)
    google_maps_api_key: Optional[str] = Field(default=None)

    # Provider endpoints
    mapillary_api_url: str = Field(default="https://graph.mapillary.com")
    osrm_api_url: str = Field(default="http://router.project-osrm.org")
    nominatim_user_agent: str = Field(default="DriveSimulator/1.0")

    # Provider selection
    geocoder_provider: Literal["nominatim", "google"] = Field(default="nominatim")
    router_provider: Literal["osrm", "google"] = Field(default="osrm")

    # Sampling and image collection
    sampling_interval_meters: float = Field(default=DEFAULT_SAMPLING_INTERVAL, gt=0)
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    batch_delay_seconds: float = Field(default=DEFAULT_BATCH_DELAY, ge=0)
    min_image_distance_km: float = Field(default=MIN_IMAGE_DISTANCE_KM, ge=0)
    request_timeout: int = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)

    # Presentation
    no_images_grace_seconds: float = Field(default=NO_IMAGES_GRACE_SECONDS, ge=0)


# Global settings instance
settings = Settings()
