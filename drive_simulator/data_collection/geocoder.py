"""Address geocoding backends."""

from typing import Any, Optional, Protocol

import googlemaps
from googlemaps import exceptions as gmaps_exceptions
from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from drive_simulator.config import settings
from drive_simulator.utils.data_models import GeoPoint
from drive_simulator.utils.errors import ConfigurationError, LookupFailure
from drive_simulator.utils.logging import get_logger

from .locations import format_lon_lat

logger = get_logger(__name__)

GOOGLE_ERRORS = (
    gmaps_exceptions.ApiError,
    gmaps_exceptions.TransportError,
    gmaps_exceptions.Timeout,
)


class Geocoder(Protocol):
    def geocode(self, address: str) -> str:
        """Return the best match for a free-text address as a ``lon,lat`` string."""
        ...


class NominatimGeocoder:
    """Geocode addresses with OpenStreetMap Nominatim through geopy."""

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Optional[int] = None,
        geolocator: Optional[Any] = None,
    ) -> None:
        self.logger = logger
        self.geolocator = geolocator or Nominatim(
            user_agent=user_agent or settings.nominatim_user_agent,
            timeout=timeout or settings.request_timeout,
        )

    def geocode(self, address: str) -> str:
        try:
            location = self.geolocator.geocode(address, exactly_one=True)
        except GeopyError as error:
            self.logger.error("Nominatim request failed", address=address, error=str(error))
            raise LookupFailure(f"Geocoding failed for {address!r}: {error}") from error

        if location is None:
            self.logger.warning("Address not found", address=address)
            raise LookupFailure(f"Could not geocode address: {address}")

        point = GeoPoint(lat=location.latitude, lon=location.longitude)
        self.logger.info("Geocoded address", address=address, lat=point.lat, lon=point.lon)
        return format_lon_lat(point)


class GoogleGeocoder:
    """Geocode addresses with the Google Maps Geocoding API."""

    def __init__(self, api_key: Optional[str] = None, client: Optional[Any] = None) -> None:
        self.logger = logger
        if client is not None:
            self.gmaps = client
            return

        key = api_key or settings.google_maps_api_key
        if not key:
            raise ConfigurationError("Google Maps API key is required for Google geocoding")
        self.gmaps = googlemaps.Client(key=key)

    def geocode(self, address: str) -> str:
        try:
            results = self.gmaps.geocode(address)
        except GOOGLE_ERRORS as error:
            self.logger.error("Google geocoding failed", address=address, error=str(error))
            raise LookupFailure(f"Geocoding failed for {address!r}: {error}") from error

        if not results:
            self.logger.warning("Address not found", address=address)
            raise LookupFailure(f"Could not geocode address: {address}")

        location = results[0]["geometry"]["location"]
        point = GeoPoint(lat=location["lat"], lon=location["lng"])
        self.logger.info("Geocoded address", address=address, lat=point.lat, lon=point.lon)
        return format_lon_lat(point)


def create_geocoder(provider: Optional[str] = None) -> Geocoder:
    """Build the geocoder named by ``provider`` or ``settings.geocoder_provider``."""
    provider = provider or settings.geocoder_provider
    if provider == "google":
        return GoogleGeocoder()
    if provider == "nominatim":
        return NominatimGeocoder()
    raise ConfigurationError(f"Unknown geocoder provider: {provider}")
