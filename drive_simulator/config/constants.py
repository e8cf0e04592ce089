"""Project-wide constants for the drive simulator."""

from typing import Final

# Earth model
EARTH_RADIUS_KM: Final[float] = 6371.0

# Polyline
DEFAULT_POLYLINE_PRECISION: Final[int] = 5

# Route Configuration
DEFAULT_SAMPLING_INTERVAL: Final[int] = 50  # meters

# Image Search
SEARCH_RADIUS_DEGREES: Final[float] = 0.0002  # ~22m at the equator
MAX_HEADING_DIFFERENCE: Final[float] = 45.0  # degrees
HEADING_SCORE_WEIGHT: Final[float] = 3.0
DISTANCE_SCORE_WEIGHT: Final[float] = 10000.0
RESULT_WINDOW_SIZE: Final[int] = 50
THUMBNAIL_FIELD: Final[str] = "thumb_2048_url"
MAPILLARY_IMAGE_FIELDS: Final[str] = (
    "id,computed_compass_angle,geometry,captured_at,is_pano," + THUMBNAIL_FIELD
)

# Batching
DEFAULT_BATCH_SIZE: Final[int] = 10
DEFAULT_BATCH_DELAY: Final[float] = 0.1  # seconds
DEFAULT_REQUEST_TIMEOUT: Final[int] = 15  # seconds

# Deduplication
MIN_IMAGE_DISTANCE_KM: Final[float] = 0.03  # 30 meters

# Presentation
NO_IMAGES_GRACE_SECONDS: Final[float] = 3.0
