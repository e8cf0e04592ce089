"""Main pipeline orchestrator for the drive simulator."""

from __future__ import annotations

import asyncio
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple

from drive_simulator.config import settings
from drive_simulator.data_collection.geocoder import Geocoder, create_geocoder
from drive_simulator.data_collection.image_selector import (
    ImageLookupResult,
    ImageSelector,
    ImageryProvider,
    LookupStatus,
)
from drive_simulator.data_collection.imagery_client import MapillaryClient
from drive_simulator.data_collection.locations import (
    format_lon_lat,
    looks_like_coordinate_pair,
    parse_coordinate_input,
    parse_lon_lat,
)
from drive_simulator.data_collection.route_provider import Router, create_router
from drive_simulator.geometry.geodesy import haversine_distance_km
from drive_simulator.geometry.polyline import decode_polyline
from drive_simulator.geometry.route_sampler import generate_evenly_spaced_points
from drive_simulator.utils.data_models import (
    DriveSnapshot,
    GeoPoint,
    PipelinePhase,
    ProgressUpdate,
    SelectedImage,
    Waypoint,
)
from drive_simulator.utils.errors import DriveSimulatorError, EmptyRouteError, InputError
from drive_simulator.utils.logging import get_logger

ProgressCallback = Callable[[ProgressUpdate], None]
SnapshotCallback = Callable[[DriveSnapshot], None]

logger = get_logger(__name__)


class CancellationToken:
    """Cooperative stop signal, consulted by the pipeline between image batches."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass(frozen=True)
class DedupState:
    """Images accepted so far; replaced, never mutated, by ``merge_batch``."""

    accepted: Tuple[SelectedImage, ...] = ()
    image_ids: FrozenSet[str] = frozenset()

    def snapshot(self) -> DriveSnapshot:
        return DriveSnapshot(images=self.accepted)


def merge_batch(
    state: DedupState,
    results: Sequence[ImageLookupResult],
    min_image_distance_km: float,
) -> DedupState:
    """
    Fold one batch of lookup results into the accepted set

    A matched image is accepted when its id is new and its capture point is
    at least ``min_image_distance_km`` from every accepted image. Results are
    considered in waypoint order; rejected images are dropped.
    """
    accepted = list(state.accepted)
    image_ids = set(state.image_ids)

    for result in results:
        image = result.image
        if result.status is not LookupStatus.MATCH or image is None:
            continue
        if image.image_id in image_ids:
            continue

        capture_point = image.point
        too_close = any(
            haversine_distance_km(capture_point, existing.point) < min_image_distance_km
            for existing in accepted
        )
        if too_close:
            continue

        accepted.append(
            SelectedImage(
                image=image,
                lat=image.lat,
                lon=image.lon,
                waypoint_id=result.waypoint.sequence_id,
            )
        )
        image_ids.add(image.image_id)

    return DedupState(accepted=tuple(accepted), image_ids=frozenset(image_ids))


@dataclass
class DriveResult:
    """Outcome of one pipeline run"""

    phase: PipelinePhase
    snapshot: DriveSnapshot
    origin: GeoPoint
    destination: GeoPoint
    route_point_count: int
    waypoints: List[Waypoint] = field(default_factory=list)
    lookup_errors: int = 0
    started_at: float = 0.0
    finished_at: float = 0.0

    @property
    def cancelled(self) -> bool:
        return self.phase is PipelinePhase.CANCELLED

    def no_images_notice_delay(
        self,
        now: Optional[float] = None,
        grace_seconds: Optional[float] = None,
    ) -> Optional[float]:
        """
        Seconds to wait before telling the user no images were found

        Returns None when there are images to show. Otherwise the remaining
        part of the grace period counted from the start of the run, or 0.0 if
        it has already elapsed.
        """
        if len(self.snapshot) > 0:
            return None
        grace = settings.no_images_grace_seconds if grace_seconds is None else grace_seconds
        now = time.monotonic() if now is None else now
        return max(0.0, grace - (now - self.started_at))


class DriveSimulatorPipeline:
    """
    Main pipeline orchestrator

    Turns an origin and a destination into an ordered, deduplicated sequence
    of street-level images:
    1. Geocode origin and destination (unless already coordinates)
    2. Fetch the driving route and decode its polyline
    3. Sample evenly spaced waypoints with bearings
    4. Look up images in concurrent batches, merging and deduplicating
       after each batch
    """

    def __init__(
        self,
        geocoder: Optional[Geocoder] = None,
        router: Optional[Router] = None,
        imagery: Optional[ImageryProvider] = None,
        sampling_interval_meters: Optional[float] = None,
        batch_size: Optional[int] = None,
        batch_delay_seconds: Optional[float] = None,
        min_image_distance_km: Optional[float] = None,
        progress_callback: Optional[ProgressCallback] = None,
        snapshot_callback: Optional[SnapshotCallback] = None,
    ) -> None:
        """
        Initialize pipeline orchestrator.

        Args:
            geocoder: Address geocoder; defaults to ``settings.geocoder_provider``
            router: Route provider; defaults to ``settings.router_provider``
            imagery: Image search client; defaults to a ``MapillaryClient``
            sampling_interval_meters: Spacing between waypoints
            batch_size: Number of concurrent image lookups per batch
            batch_delay_seconds: Pause between batches
            min_image_distance_km: Minimum separation between accepted images
            progress_callback: Receives a ProgressUpdate after each step
            snapshot_callback: Receives the accepted images after each batch
        """
        self._geocoder = geocoder
        self._router = router
        self._imagery = imagery
        self._selector: Optional[ImageSelector] = None

        self.sampling_interval_meters = (
            settings.sampling_interval_meters
            if sampling_interval_meters is None
            else sampling_interval_meters
        )
        self.batch_size = settings.batch_size if batch_size is None else batch_size
        self.batch_delay_seconds = (
            settings.batch_delay_seconds if batch_delay_seconds is None else batch_delay_seconds
        )
        self.min_image_distance_km = (
            settings.min_image_distance_km
            if min_image_distance_km is None
            else min_image_distance_km
        )
        if self.sampling_interval_meters <= 0:
            raise InputError(
                f"Sampling interval must be positive, got {self.sampling_interval_meters}"
            )
        if self.batch_size < 1:
            raise InputError(f"Batch size must be at least 1, got {self.batch_size}")

        self.progress_callback = progress_callback
        self.snapshot_callback = snapshot_callback

        self.phase = PipelinePhase.IDLE
        self._state = DedupState()
        self.logger = logger

    @property
    def geocoder(self) -> Geocoder:
        """Lazily instantiate the geocoder."""
        if self._geocoder is None:
            self._geocoder = create_geocoder()
        return self._geocoder

    @property
    def router(self) -> Router:
        """Lazily instantiate the router."""
        if self._router is None:
            self._router = create_router()
        return self._router

    @property
    def selector(self) -> ImageSelector:
        """Lazily instantiate the image selector."""
        if self._selector is None:
            if self._imagery is None:
                self._imagery = MapillaryClient()
            self._selector = ImageSelector(self._imagery)
        return self._selector

    @property
    def snapshot(self) -> DriveSnapshot:
        """Images accepted so far in the current or last run."""
        return self._state.snapshot()

    def _report(self, phase: PipelinePhase, percent: int, message: str) -> None:
        self.phase = phase
        self.logger.info(message, phase=phase.value, percent=percent)
        if self.progress_callback:
            self.progress_callback(ProgressUpdate(phase=phase, percent=percent, message=message))

    def validate_inputs(self, origin: str, destination: str) -> None:
        """
        Reject unusable input before any network work starts

        Raises:
            InputError: Empty input or an out-of-range coordinate pair
        """
        for label, value in (("origin", origin), ("destination", destination)):
            if not value or not value.strip():
                raise InputError(f"The {label} must not be empty")
            if looks_like_coordinate_pair(value):
                parse_coordinate_input(value)

    def resolve_location(self, text: str) -> GeoPoint:
        """Use coordinates as typed, or geocode free text."""
        if looks_like_coordinate_pair(text):
            point = parse_coordinate_input(text)
            self.logger.info("Location is coordinates", text=text, lon_lat=format_lon_lat(point))
            return point

        self.logger.info("Geocoding address", address=text)
        return parse_lon_lat(self.geocoder.geocode(text))

    def fetch_route(self, origin: GeoPoint, destination: GeoPoint) -> List[GeoPoint]:
        """
        Fetch and decode the route between two points

        Raises:
            LookupFailure: Router transport or provider error
            MalformedPolylineError: Route geometry could not be decoded
            EmptyRouteError: Route decodes to no points
        """
        response = self.router.route(origin, destination)
        route = decode_polyline(response.encoded_polyline)
        if not route:
            raise EmptyRouteError(
                "No route found between "
                f"{format_lon_lat(origin)} and {format_lon_lat(destination)}"
            )
        return route

    async def fetch_batch(self, batch: Sequence[Waypoint]) -> List[ImageLookupResult]:
        """Run one batch of lookups concurrently; results keep waypoint order."""
        loop = asyncio.get_running_loop()
        selector = self.selector
        return list(
            await asyncio.gather(
                *(loop.run_in_executor(None, selector.lookup, waypoint) for waypoint in batch)
            )
        )

    async def run_async(
        self,
        origin: str,
        destination: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> DriveResult:
        """
        Run the full pipeline

        Args:
            origin: Address or ``lat,lon`` pair
            destination: Address or ``lat,lon`` pair
            cancel_token: Checked before each image batch

        Returns:
            DriveResult in phase COMPLETE or CANCELLED

        Raises:
            InputError: Before anything starts, for unusable input
            ConfigurationError: Missing provider credentials, before any lookup
            LookupFailure, EmptyRouteError, MalformedPolylineError: Run failed
        """
        cancel_token = cancel_token or CancellationToken()
        self.validate_inputs(origin, destination)

        started_at = time.monotonic()
        self._state = DedupState()
        self.phase = PipelinePhase.IDLE

        try:
            # Missing provider credentials fail here, before any network call
            self.router
            self.selector

            self._report(PipelinePhase.GEOCODING_ORIGIN, 10, "Geocoding origin...")
            origin_point = self.resolve_location(origin)

            self._report(PipelinePhase.GEOCODING_DESTINATION, 20, "Geocoding destination...")
            destination_point = self.resolve_location(destination)

            self._report(PipelinePhase.FETCHING_ROUTE, 30, "Fetching route...")
            route = self.fetch_route(origin_point, destination_point)
        except DriveSimulatorError as error:
            self.phase = PipelinePhase.FAILED
            self.logger.error(
                "Route generation failed",
                origin=origin,
                destination=destination,
                error=str(error),
            )
            raise

        self._report(PipelinePhase.SAMPLING, 30, "Generating evenly spaced waypoints...")
        waypoints = generate_evenly_spaced_points(route, self.sampling_interval_meters)
        self.logger.info(
            "Route sampled",
            route_points=len(route),
            waypoints=len(waypoints),
            spacing_m=self.sampling_interval_meters,
        )

        self._report(PipelinePhase.FETCHING_IMAGES, 35, "Fetching images in parallel batches...")

        state = DedupState()
        lookup_errors = 0
        total = len(waypoints)
        final_phase = PipelinePhase.COMPLETE

        for start in range(0, total, self.batch_size):
            if start > 0 and self.batch_delay_seconds:
                await asyncio.sleep(self.batch_delay_seconds)

            if cancel_token.cancelled:
                final_phase = PipelinePhase.CANCELLED
                self.logger.info("Image download cancelled", completed=start, total=total)
                break

            batch = waypoints[start:start + self.batch_size]
            results = await self.fetch_batch(batch)
            lookup_errors += sum(
                1 for result in results if result.status is LookupStatus.LOOKUP_ERROR
            )

            state = merge_batch(state, results, self.min_image_distance_km)
            self._state = state
            if self.snapshot_callback:
                self.snapshot_callback(state.snapshot())

            done = start + len(batch)
            self._report(
                PipelinePhase.FETCHING_IMAGES,
                35 + (done * 65) // total,
                f"Fetched {done}/{total} images ({len(state.accepted)} unique)",
            )

        if final_phase is PipelinePhase.CANCELLED:
            self._report(PipelinePhase.CANCELLED, 100, "Cancelled")
        else:
            self._report(PipelinePhase.COMPLETE, 100, "Complete!")

        return DriveResult(
            phase=final_phase,
            snapshot=state.snapshot(),
            origin=origin_point,
            destination=destination_point,
            route_point_count=len(route),
            waypoints=waypoints,
            lookup_errors=lookup_errors,
            started_at=started_at,
            finished_at=time.monotonic(),
        )

    def run(
        self,
        origin: str,
        destination: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> DriveResult:
        """Synchronous wrapper for ``run_async``."""
        return asyncio.run(self.run_async(origin, destination, cancel_token))
