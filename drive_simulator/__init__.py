"""Simulated street-level drives: route sampling and heading-aware image selection."""

from drive_simulator.pipeline import (
    CancellationToken,
    DedupState,
    DriveResult,
    DriveSimulatorPipeline,
    merge_batch,
)

__version__ = "0.1.0"

__all__ = [
    "CancellationToken",
    "DedupState",
    "DriveResult",
    "DriveSimulatorPipeline",
    "merge_batch",
]
