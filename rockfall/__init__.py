"""Drop-simulation engine with periodic-state height extrapolation."""

from rockfall.config.types import Direction, DropConfig, SimulationResult
from rockfall.errors import ConfigurationError, InvariantViolation, RockfallError
from rockfall.simulation.engine import run_reference_counts, run_simulation

__all__ = [
    "ConfigurationError",
    "Direction",
    "DropConfig",
    "InvariantViolation",
    "RockfallError",
    "SimulationResult",
    "run_reference_counts",
    "run_simulation",
]
