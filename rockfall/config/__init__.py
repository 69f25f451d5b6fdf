"""Configuration layer: constants and typed config dataclasses."""

from rockfall.config.constants import (
    CONFIRMATION_THRESHOLD,
    FIELD_WIDTH,
    FLUSH_THRESHOLD,
    PART_ONE_COUNT,
    PART_TWO_COUNT,
    REFERENCE_COUNTS,
    SPAWN_CLEARANCE,
    SPAWN_COLUMN,
)
from rockfall.config.types import Direction, DropConfig, SimulationResult

__all__ = [
    "CONFIRMATION_THRESHOLD",
    "Direction",
    "DropConfig",
    "FIELD_WIDTH",
    "FLUSH_THRESHOLD",
    "PART_ONE_COUNT",
    "PART_TWO_COUNT",
    "REFERENCE_COUNTS",
    "SPAWN_CLEARANCE",
    "SPAWN_COLUMN",
    "SimulationResult",
]
