"""Command line entry point: simulate a drive and export the image sequence."""

import argparse
import json
import logging
import signal
import sys
import time
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from drive_simulator.config import settings
from drive_simulator.pipeline import CancellationToken, DriveResult, DriveSimulatorPipeline
from drive_simulator.utils.data_models import ProgressUpdate
from drive_simulator.utils.errors import DriveSimulatorError, InputError
from drive_simulator.utils.logging import set_log_level

NO_IMAGES_MESSAGE = "No images found along this route"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drive-simulator",
        description="Build a street-level image sequence along a driving route.",
    )
    parser.add_argument("origin", help="Start address or 'lat,lon' pair")
    parser.add_argument("destination", help="End address or 'lat,lon' pair")
    parser.add_argument(
        "--spacing",
        type=float,
        default=settings.sampling_interval_meters,
        help="Meters between sampled waypoints (default: %(default)s)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=settings.batch_size,
        help="Concurrent image lookups per batch (default: %(default)s)",
    )
    parser.add_argument(
        "--min-distance",
        type=float,
        default=settings.min_image_distance_km * 1000,
        help="Minimum meters between accepted images (default: %(default)s)",
    )
    parser.add_argument("--output", type=Path, help="Write the sequence to this JSON file")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    return parser


def export_result(result: DriveResult) -> dict:
    return {
        "status": result.phase.value,
        "origin": {"lat": result.origin.lat, "lon": result.origin.lon},
        "destination": {"lat": result.destination.lat, "lon": result.destination.lon},
        "route_points": result.route_point_count,
        "waypoints": len(result.waypoints),
        "failed_lookups": result.lookup_errors,
        "images": result.snapshot.to_records(),
    }


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.quiet:
        set_log_level(logging.WARNING)

    token = CancellationToken()
    progress_bar = tqdm(total=100, unit="%", leave=False)

    def on_progress(update: ProgressUpdate) -> None:
        progress_bar.set_description(update.message)
        progress_bar.n = update.percent
        progress_bar.refresh()

    def on_interrupt(signum, frame) -> None:
        # Stop after the batch in flight
        token.cancel()

    try:
        pipeline = DriveSimulatorPipeline(
            sampling_interval_meters=args.spacing,
            batch_size=args.batch_size,
            min_image_distance_km=args.min_distance / 1000,
            progress_callback=on_progress,
        )
    except InputError as error:
        progress_bar.close()
        print(f"Error: {error}", file=sys.stderr)
        return 2

    previous_handler = signal.signal(signal.SIGINT, on_interrupt)
    try:
        result = pipeline.run(args.origin, args.destination, cancel_token=token)
    except InputError as error:
        print(f"Error: {error}", file=sys.stderr)
        return 2
    except DriveSimulatorError as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    finally:
        signal.signal(signal.SIGINT, previous_handler)
        progress_bar.close()

    delay = result.no_images_notice_delay()
    if delay is not None:
        time.sleep(delay)
        print(NO_IMAGES_MESSAGE, file=sys.stderr)

    payload = json.dumps(export_result(result), indent=2)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(payload, encoding="utf-8")
        print(f"Saved {len(result.snapshot)} images to {args.output}")
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(main())
