"""Centralized domain constants for drop simulations.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

FIELD_WIDTH = 7
"""Default field width in cells."""

SPAWN_COLUMN = 2
"""Column of a spawned shape's left edge (two cells from the left wall)."""

SPAWN_CLEARANCE = 2
"""Added to the field height and shape height to get the spawn row.

Leaves three empty rows between the current peak and the shape's lowest cell.
"""

CONFIRMATION_THRESHOLD = 100
"""Consecutive repeats of the same gap required before a period is trusted."""

PART_ONE_COUNT = 2_022
"""Reference shape count answered by plain simulation."""

PART_TWO_COUNT = 1_000_000_000_000
"""Reference shape count that requires cycle extrapolation."""

REFERENCE_COUNTS: tuple[int, ...] = (PART_ONE_COUNT, PART_TWO_COUNT)
"""Counts reported by default when no explicit count is requested."""

PUSH_LEFT = "<"
"""Push-pattern symbol for a push to the left."""

PUSH_RIGHT = ">"
"""Push-pattern symbol for a push to the right."""

FILLED_CELL = "#"
"""Shape-row symbol for an occupied cell."""

EMPTY_CELL = "."
"""Shape-row symbol for a void cell."""

FLUSH_THRESHOLD = 8_192
"""Flush settle log rows to Parquet once this in-memory row count is reached."""
