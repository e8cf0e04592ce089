from .data_models import (
    CandidateImage,
    DriveSnapshot,
    GeoPoint,
    PipelinePhase,
    ProgressUpdate,
    SelectedImage,
    Waypoint,
)
from .errors import (
    ConfigurationError,
    DriveSimulatorError,
    EmptyRouteError,
    ImageryProviderError,
    InputError,
    LookupFailure,
    MalformedPolylineError,
)
from .logging import get_logger, set_log_level

__all__ = [
    "CandidateImage",
    "DriveSnapshot",
    "GeoPoint",
    "PipelinePhase",
    "ProgressUpdate",
    "SelectedImage",
    "Waypoint",
    "ConfigurationError",
    "DriveSimulatorError",
    "EmptyRouteError",
    "ImageryProviderError",
    "InputError",
    "LookupFailure",
    "MalformedPolylineError",
    "get_logger",
    "set_log_level",
]
