from .geocoder import Geocoder, GoogleGeocoder, NominatimGeocoder, create_geocoder
from .image_selector import (
    ImageLookupResult,
    ImageSelector,
    LookupStatus,
    select_best_image,
)
from .imagery_client import BoundingBox, MapillaryClient
from .locations import (
    format_lon_lat,
    is_coordinate_input,
    looks_like_coordinate_pair,
    parse_coordinate_input,
    parse_lon_lat,
)
from .route_provider import (
    GoogleDirectionsRouter,
    OSRMRouter,
    RouteResponse,
    Router,
    create_router,
)

__all__ = [
    "Geocoder",
    "GoogleGeocoder",
    "NominatimGeocoder",
    "create_geocoder",
    "ImageLookupResult",
    "ImageSelector",
    "LookupStatus",
    "select_best_image",
    "BoundingBox",
    "MapillaryClient",
    "format_lon_lat",
    "is_coordinate_input",
    "looks_like_coordinate_pair",
    "parse_coordinate_input",
    "parse_lon_lat",
    "GoogleDirectionsRouter",
    "OSRMRouter",
    "RouteResponse",
    "Router",
    "create_router",
]
