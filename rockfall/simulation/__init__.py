"""Simulation engine: drop loop, cycle extrapolation, and Parquet persistence."""

from rockfall.simulation.engine import (
    DropSimulator,
    SettleEvent,
    drop_shape,
    run_reference_counts,
    run_simulation,
)
from rockfall.simulation.persistence import flush_settle_columns, new_settle_columns

__all__ = [
    "DropSimulator",
    "SettleEvent",
    "drop_shape",
    "flush_settle_columns",
    "new_settle_columns",
    "run_reference_counts",
    "run_simulation",
]
