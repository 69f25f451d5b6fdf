"""Immutable rigid shapes and the fixed five-entry catalog.

A shape is a rectangular boolean grid whose row 0 is the *top* row. It is
positioned by its top-left reference corner, so relative cell ``(dx, dy)``
lands on absolute ``(column + dx, row - dy)``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from rockfall.config.constants import EMPTY_CELL, FILLED_CELL
from rockfall.config.types import Direction
from rockfall.errors import ConfigurationError, InvariantViolation

if TYPE_CHECKING:
    from rockfall.domain.field import OccupancyField


@dataclass(frozen=True)
class Placement:
    """Reference-corner position of a shape during descent."""

    column: int
    row: int

    def moved(self, direction: Direction) -> Placement:
        d_col, d_row = direction.offset
        return Placement(self.column + d_col, self.row + d_row)


class Shape:
    """Fixed pattern of occupied cells inside a bounding box."""

    def __init__(self, grid: np.ndarray, name: str = "") -> None:
        mask = np.array(grid, dtype=bool)
        if mask.ndim != 2 or mask.size == 0:
            raise ConfigurationError(f"shape {name!r} must be a non-empty 2D grid")
        if not mask.any():
            raise ConfigurationError(f"shape {name!r} has no occupied cell")
        mask.setflags(write=False)
        self._grid = mask
        self.name = name
        # (dx, dy) pairs; np.argwhere yields (row, col)
        self._cells: tuple[tuple[int, int], ...] = tuple(
            (int(dx), int(dy)) for dy, dx in np.argwhere(mask)
        )
        columns = [dx for dx, _ in self._cells]
        self._min_dx = min(columns)
        self._max_dx = max(columns)
        self._max_dy = max(dy for _, dy in self._cells)

    @classmethod
    def from_rows(cls, rows: Sequence[str], name: str = "") -> Shape:
        """Build a shape from ``#``/``.`` strings, top row first."""
        if not rows:
            raise ConfigurationError(f"shape {name!r} has no rows")
        width = len(rows[0])
        grid: list[list[bool]] = []
        for index, row in enumerate(rows):
            if not row:
                raise ConfigurationError(f"shape {name!r} row {index} is empty")
            if len(row) != width:
                raise ConfigurationError(
                    f"shape {name!r} row {index} has length {len(row)}, expected {width}"
                )
            unknown = set(row) - {FILLED_CELL, EMPTY_CELL}
            if unknown:
                raise ConfigurationError(
                    f"shape {name!r} row {index} has invalid symbols: {sorted(unknown)}"
                )
            grid.append([symbol == FILLED_CELL for symbol in row])
        return cls(np.array(grid, dtype=bool), name=name)

    @property
    def grid(self) -> np.ndarray:
        return self._grid

    @property
    def width(self) -> int:
        return int(self._grid.shape[1])

    @property
    def height(self) -> int:
        return int(self._grid.shape[0])

    @property
    def cells(self) -> tuple[tuple[int, int], ...]:
        """Occupied ``(dx, dy)`` offsets from the reference corner."""
        return self._cells

    @property
    def cell_count(self) -> int:
        return len(self._cells)

    def occupies_cell(self, dx: int, dy: int) -> bool:
        if not (0 <= dx < self.width and 0 <= dy < self.height):
            return False
        return bool(self._grid[dy, dx])

    def can_move(
        self, field: OccupancyField, placement: Placement, direction: Direction
    ) -> bool:
        """Return True if every occupied cell can shift one unit in ``direction``."""
        d_col, d_row = direction.offset
        column = placement.column + d_col
        row = placement.row + d_row
        if direction.is_horizontal:
            if column + self._min_dx < 0 or column + self._max_dx >= field.width:
                return False
        elif row - self._max_dy >= field.height:
            # lowest occupied row still above the current peak
            return True
        return all(field.is_available(column + dx, row - dy) for dx, dy in self._cells)

    def settle_into(self, field: OccupancyField, placement: Placement) -> None:
        """Stamp this shape's cells into ``field``; any overlap is a bug."""
        targets = [(placement.column + dx, placement.row - dy) for dx, dy in self._cells]
        for col, row in targets:
            if not field.is_available(col, row):
                raise InvariantViolation(
                    f"Cannot settle shape {self.name!r} in unavailable location ({col}, {row})"
                )
        for col, row in targets:
            field.settle(col, row)

    def __repr__(self) -> str:
        return f"Shape({self.name!r}, {self.width}x{self.height})"


SHAPE_CATALOG: tuple[Shape, ...] = (
    Shape.from_rows(["####"], name="horizontal"),
    Shape.from_rows([".#.", "###", ".#."], name="plus"),
    Shape.from_rows(["..#", "..#", "###"], name="corner"),
    Shape.from_rows(["#", "#", "#", "#"], name="vertical"),
    Shape.from_rows(["##", "##"], name="square"),
)
"""The five shapes dropped round-robin, in drop order."""
