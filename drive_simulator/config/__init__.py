from .constants import (
    DEFAULT_BATCH_DELAY,
    DEFAULT_BATCH_SIZE,
    DEFAULT_POLYLINE_PRECISION,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SAMPLING_INTERVAL,
    DISTANCE_SCORE_WEIGHT,
    EARTH_RADIUS_KM,
    HEADING_SCORE_WEIGHT,
    MAPILLARY_IMAGE_FIELDS,
    MAX_HEADING_DIFFERENCE,
    MIN_IMAGE_DISTANCE_KM,
    NO_IMAGES_GRACE_SECONDS,
    RESULT_WINDOW_SIZE,
    SEARCH_RADIUS_DEGREES,
    THUMBNAIL_FIELD,
)
from .settings import Settings, settings

__all__ = [
    "DEFAULT_BATCH_DELAY",
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_POLYLINE_PRECISION",
    "DEFAULT_REQUEST_TIMEOUT",
    "DEFAULT_SAMPLING_INTERVAL",
    "DISTANCE_SCORE_WEIGHT",
    "EARTH_RADIUS_KM",
    "HEADING_SCORE_WEIGHT",
    "MAPILLARY_IMAGE_FIELDS",
    "MAX_HEADING_DIFFERENCE",
    "MIN_IMAGE_DISTANCE_KM",
    "NO_IMAGES_GRACE_SECONDS",
    "RESULT_WINDOW_SIZE",
    "SEARCH_RADIUS_DEGREES",
    "THUMBNAIL_FIELD",
    "Settings",
    "settings",
]
