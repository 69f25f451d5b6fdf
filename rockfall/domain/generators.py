"""Restartable cyclic sequences driving the simulation.

Each generator is a pure function of a monotonically increasing counter:
``next()`` returns ``sequence[counter % len(sequence)]`` and advances the
counter. Nothing else is mutated, so resetting the counter replays the
exact same sequence.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Generic, TypeVar

from rockfall.config.types import Direction
from rockfall.domain.shapes import SHAPE_CATALOG, Shape
from rockfall.errors import ConfigurationError

T = TypeVar("T")

_PUSH_SYMBOLS: dict[str, Direction] = {
    Direction.LEFT.value: Direction.LEFT,
    Direction.RIGHT.value: Direction.RIGHT,
}


def parse_push_pattern(raw: str) -> tuple[Direction, ...]:
    """Parse a ``<``/``>`` pattern string into push directions.

    Surrounding whitespace (e.g. a trailing newline from a file) is ignored.
    Any other character is rejected with its index.
    """
    return validate_push_pattern([_PUSH_SYMBOLS.get(symbol, symbol) for symbol in raw.strip()])


def validate_push_pattern(items: Sequence[object]) -> tuple[Direction, ...]:
    """Check that every item is a lateral push; reject the first offender by index."""
    if len(items) == 0:
        raise ConfigurationError("push pattern must not be empty")
    directions: list[Direction] = []
    for index, item in enumerate(items):
        if not isinstance(item, Direction) or not item.is_horizontal:
            raise ConfigurationError(f"Invalid pattern at index {index}: {item!r}")
        directions.append(item)
    return tuple(directions)


class CyclicGenerator(Generic[T]):
    """Infinite index-modulo lookup over a fixed, non-empty sequence."""

    def __init__(self, sequence: Sequence[T]) -> None:
        if len(sequence) == 0:
            raise ConfigurationError("cyclic sequence must not be empty")
        self._sequence = tuple(sequence)
        self._counter = 0

    def __len__(self) -> int:
        return len(self._sequence)

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        item = self._sequence[self._counter % len(self._sequence)]
        self._counter += 1
        return item

    def next(self) -> T:
        return next(self)

    @property
    def counter(self) -> int:
        """Total number of items drawn since construction or the last reset."""
        return self._counter

    @property
    def phase(self) -> int:
        """Index of the item the next draw will return."""
        return self._counter % len(self._sequence)

    def reset(self) -> None:
        self._counter = 0


class PushPatternGenerator(CyclicGenerator[Direction]):
    """Cycle over the lateral pushes read from input."""

    def __init__(self, sequence: Sequence[Direction]) -> None:
        super().__init__(validate_push_pattern(sequence))

    @classmethod
    def from_string(cls, raw: str) -> PushPatternGenerator:
        return cls(parse_push_pattern(raw))


class ShapeGenerator(CyclicGenerator[Shape]):
    """Round-robin over the shape catalog."""

    def __init__(self, catalog: Sequence[Shape] | None = None) -> None:
        super().__init__(SHAPE_CATALOG if catalog is None else catalog)

