"""Driving route backends returning encoded polylines."""

from dataclasses import dataclass
from typing import Any, Optional, Protocol

import googlemaps
import requests

from drive_simulator.config import settings
from drive_simulator.utils.data_models import GeoPoint
from drive_simulator.utils.errors import ConfigurationError, LookupFailure
from drive_simulator.utils.logging import get_logger

from .geocoder import GOOGLE_ERRORS
from .locations import format_lon_lat

logger = get_logger(__name__)

ROUTE_OK = "Ok"


@dataclass(frozen=True)
class RouteResponse:
    """Router answer: provider status code and the encoded route geometry"""

    code: str
    encoded_polyline: str
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.code == ROUTE_OK


class Router(Protocol):
    def route(self, origin: GeoPoint, destination: GeoPoint) -> RouteResponse:
        ...


class OSRMRouter:
    """Fetch driving routes from an OSRM ``route/v1/driving`` endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.logger = logger
        self.base_url = (base_url or settings.osrm_api_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout
        self.session = session or requests.Session()

    def build_url(self, origin: GeoPoint, destination: GeoPoint) -> str:
        return (
            f"{self.base_url}/route/v1/driving/"
            f"{format_lon_lat(origin)};{format_lon_lat(destination)}"
        )

    def route(self, origin: GeoPoint, destination: GeoPoint) -> RouteResponse:
        """
        Request the fastest driving route between two points

        Raises:
            LookupFailure: On transport errors, non-2xx status, or an OSRM error code
        """
        url = self.build_url(origin, destination)
        self.logger.info("Requesting OSRM route", url=url)

        try:
            response = self.session.get(
                url,
                params={"overview": "full", "geometries": "polyline"},
                timeout=self.timeout,
            )
        except requests.RequestException as error:
            self.logger.error("OSRM request failed", url=url, error=str(error))
            raise LookupFailure(
                f"Route request failed from {format_lon_lat(origin)} "
                f"to {format_lon_lat(destination)}: {error}"
            ) from error

        if not response.ok:
            self.logger.error(
                "OSRM returned an error status",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise LookupFailure(
                f"Route request failed from {format_lon_lat(origin)} "
                f"to {format_lon_lat(destination)}: "
                f"{response.status_code} {response.reason}. Please check coordinates format."
            )

        try:
            data = response.json()
        except ValueError as error:
            raise LookupFailure(f"OSRM returned an unreadable response: {error}") from error

        code = data.get("code", "")
        if code != ROUTE_OK:
            message = data.get("message") or "Unknown routing error"
            self.logger.error("OSRM reported an error", code=code, osrm_message=message)
            raise LookupFailure(
                f"OSRM Error: {message} (from {format_lon_lat(origin)} "
                f"to {format_lon_lat(destination)})"
            )

        routes = data.get("routes") or []
        encoded = routes[0].get("geometry", "") if routes else ""
        return RouteResponse(code=code, encoded_polyline=encoded)


class GoogleDirectionsRouter:
    """Fetch driving routes from the Google Maps Directions API."""

    def __init__(self, api_key: Optional[str] = None, client: Optional[Any] = None) -> None:
        self.logger = logger
        if client is not None:
            self.gmaps = client
            return

        key = api_key or settings.google_maps_api_key
        if not key:
            raise ConfigurationError("Google Maps API key is required for Google routing")
        self.gmaps = googlemaps.Client(key=key)

    def route(self, origin: GeoPoint, destination: GeoPoint) -> RouteResponse:
        try:
            directions = self.gmaps.directions(
                origin=f"{origin.lat},{origin.lon}",
                destination=f"{destination.lat},{destination.lon}",
                mode="driving",
            )
        except GOOGLE_ERRORS as error:
            self.logger.error(
                "Google Directions request failed",
                origin=format_lon_lat(origin),
                destination=format_lon_lat(destination),
                error=str(error),
            )
            raise LookupFailure(
                f"Route request failed from {format_lon_lat(origin)} "
                f"to {format_lon_lat(destination)}: {error}"
            ) from error

        if not directions:
            return RouteResponse(code=ROUTE_OK, encoded_polyline="")

        encoded = directions[0].get("overview_polyline", {}).get("points", "")
        return RouteResponse(code=ROUTE_OK, encoded_polyline=encoded)


def create_router(provider: Optional[str] = None) -> Router:
    """Build the router named by ``provider`` or ``settings.router_provider``."""
    provider = provider or settings.router_provider
    if provider == "google":
        return GoogleDirectionsRouter()
    if provider == "osrm":
        return OSRMRouter()
    raise ConfigurationError(f"Unknown router provider: {provider}")
