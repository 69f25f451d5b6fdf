"""Configuration dataclasses and result containers for drop simulations.

All frozen dataclasses that parameterise a run, plus the push ``Direction``
enum shared by the generators and the shapes, live here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rockfall.config.constants import (
    CONFIRMATION_THRESHOLD,
    FIELD_WIDTH,
    PUSH_LEFT,
    PUSH_RIGHT,
    SPAWN_CLEARANCE,
    SPAWN_COLUMN,
)
from rockfall.errors import ConfigurationError

__all__ = [
    "Direction",
    "DropConfig",
    "SimulationResult",
]

# ---------------------------------------------------------------------------
# Movement
# ---------------------------------------------------------------------------


class Direction(Enum):
    """Unit translation applied to a falling shape."""

    LEFT = PUSH_LEFT
    RIGHT = PUSH_RIGHT
    DOWN = "v"

    @property
    def offset(self) -> tuple[int, int]:
        """Return ``(d_column, d_row)`` for this direction (rows grow upward)."""
        return _OFFSETS[self]

    @property
    def is_horizontal(self) -> bool:
        return self is not Direction.DOWN


_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, -1),
}

# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SimulationResult:
    """Field height after ``count`` settles, plus how it was obtained."""

    count: int
    height: int
    simulated: int
    """Number of shapes actually dropped before the answer was known."""
    extrapolated: bool
    period: int | None = None
    height_gain_per_period: int | None = None
    cycle_confirmed_at: int | None = None
    """Iteration index at which the extrapolation was computed."""

    def to_dict(self) -> dict[str, object]:
        return {
            "count": self.count,
            "height": self.height,
            "simulated": self.simulated,
            "extrapolated": self.extrapolated,
            "period": self.period,
            "height_gain_per_period": self.height_gain_per_period,
            "cycle_confirmed_at": self.cycle_confirmed_at,
        }


# ---------------------------------------------------------------------------
# Config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DropConfig:
    """Runtime knobs for one drop simulation."""

    width: int = FIELD_WIDTH
    spawn_column: int = SPAWN_COLUMN
    spawn_clearance: int = SPAWN_CLEARANCE
    cycle_detection: bool = True
    confirmation_threshold: int = CONFIRMATION_THRESHOLD
    """Larger values cost more simulated shapes but make a spurious period less likely."""

    def __post_init__(self) -> None:
        if self.width < 1:
            raise ConfigurationError(f"width must be >= 1, got {self.width}")
        if not 0 <= self.spawn_column < self.width:
            raise ConfigurationError(
                f"spawn_column must be in [0, {self.width}), got {self.spawn_column}"
            )
        if self.spawn_clearance < 0:
            raise ConfigurationError("spawn_clearance must be >= 0")
        if self.confirmation_threshold < 1:
            raise ConfigurationError("confirmation_threshold must be >= 1")
