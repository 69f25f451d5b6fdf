"""Sparse occupancy field: fixed width, unbounded height.

Cells are only ever added. ``height`` is one above the highest occupied row
(0 while the field is empty) and therefore never decreases.
"""

from __future__ import annotations

from rockfall.errors import ConfigurationError

Coordinate = tuple[int, int]
"""``(column, row)``; row 0 is the floor and rows grow upward."""


class OccupancyField:
    """Set of settled cells over ``[0, width) x [0, inf)``."""

    def __init__(self, width: int) -> None:
        if width < 1:
            raise ConfigurationError(f"width must be >= 1, got {width}")
        self._width = width
        self._height = 0
        self._occupied: set[Coordinate] = set()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def cell_count(self) -> int:
        return len(self._occupied)

    def is_available(self, col: int, row: int) -> bool:
        """Return True iff ``(col, row)`` is inside the field and unoccupied."""
        if col < 0 or col >= self._width or row < 0:
            return False
        return (col, row) not in self._occupied

    def is_occupied(self, col: int, row: int) -> bool:
        return (col, row) in self._occupied

    def settle(self, col: int, row: int) -> None:
        """Mark a cell occupied. Callers check availability first."""
        self._occupied.add((col, row))
        if row + 1 > self._height:
            self._height = row + 1

    def occupied_cells(self) -> frozenset[Coordinate]:
        return frozenset(self._occupied)
