"""Core drop engine: per-shape descent, run loop, and cycle extrapolation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

import pyarrow.parquet as pq

from rockfall.config.constants import (
    FLUSH_THRESHOLD,
    REFERENCE_COUNTS,
    SPAWN_CLEARANCE,
    SPAWN_COLUMN,
)
from rockfall.config.types import Direction, DropConfig, SimulationResult
from rockfall.domain.cycle import CycleDetector, encode_fingerprint
from rockfall.domain.field import OccupancyField
from rockfall.domain.generators import (
    PushPatternGenerator,
    ShapeGenerator,
    parse_push_pattern,
    validate_push_pattern,
)
from rockfall.domain.shapes import SHAPE_CATALOG, Placement, Shape
from rockfall.errors import ConfigurationError
from rockfall.io.paths import logs_dir, settle_log_path
from rockfall.simulation.persistence import flush_settle_columns, new_settle_columns

logger = logging.getLogger(__name__)

PushPattern = str | Sequence[Direction]


def _push_directions(pattern: PushPattern) -> tuple[Direction, ...]:
    if isinstance(pattern, str):
        return parse_push_pattern(pattern)
    return validate_push_pattern(pattern)


@dataclass(frozen=True)
class SettleEvent:
    """Outcome of one shape's descent."""

    iteration: int
    shape_index: int
    placement: Placement
    push_phase: int
    """Push-pattern phase right after the shape settled."""
    height: int


def drop_shape(
    field: OccupancyField,
    shape: Shape,
    pushes: Iterator[Direction],
    spawn_column: int = SPAWN_COLUMN,
    spawn_clearance: int = SPAWN_CLEARANCE,
) -> Placement:
    """Drop ``shape`` until it rests, stamp it into ``field``, return where it landed.

    Each tick consumes one push (applied only if unobstructed) and then tries
    to fall one row. The first blocked fall settles the shape.
    """
    placement = Placement(spawn_column, field.height + shape.height + spawn_clearance)
    while True:
        direction = next(pushes)
        if shape.can_move(field, placement, direction):
            placement = placement.moved(direction)
        if not shape.can_move(field, placement, Direction.DOWN):
            shape.settle_into(field, placement)
            return placement
        placement = placement.moved(Direction.DOWN)


class DropSimulator:
    """Own one field and both generators; drop shapes one at a time."""

    def __init__(
        self,
        pattern: PushPattern,
        config: DropConfig | None = None,
        catalog: Sequence[Shape] | None = None,
    ) -> None:
        self.config = config or DropConfig()
        directions = _push_directions(pattern)
        self.pushes = PushPatternGenerator(directions)
        self.shapes = ShapeGenerator(catalog)
        widest = max(shape.width for shape in (catalog or SHAPE_CATALOG))
        if self.config.spawn_column + widest > self.config.width:
            raise ConfigurationError(
                f"width {self.config.width} cannot hold a {widest}-wide shape "
                f"spawned at column {self.config.spawn_column}"
            )
        self.field = OccupancyField(self.config.width)
        self.iteration = 0

    @property
    def height(self) -> int:
        return self.field.height

    def fingerprint(self) -> int:
        """Encode the phase the next drop starts from."""
        return encode_fingerprint(self.shapes.phase, self.pushes.phase, len(self.pushes))

    def step(self) -> SettleEvent:
        shape_index = self.shapes.phase
        shape = next(self.shapes)
        placement = drop_shape(
            self.field,
            shape,
            self.pushes,
            spawn_column=self.config.spawn_column,
            spawn_clearance=self.config.spawn_clearance,
        )
        event = SettleEvent(
            iteration=self.iteration,
            shape_index=shape_index,
            placement=placement,
            push_phase=self.pushes.phase,
            height=self.field.height,
        )
        self.iteration += 1
        return event


def _deterministic_run_id(ordinal: int, count: int, config: DropConfig) -> str:
    """Build reproducible run ID stable across runs for identical inputs.

    The ordinal keeps repeated counts within one log apart.
    """
    mode = f"t{config.confirmation_threshold}" if config.cycle_detection else "full"
    return f"run{ordinal}_count{count}_w{config.width}_{mode}"


def _simulate(
    pattern: PushPattern,
    ordinal: int,
    count: int,
    config: DropConfig,
    catalog: Sequence[Shape] | None,
    log_path: Path | None,
    settle_writer: pq.ParquetWriter | None,
) -> tuple[SimulationResult, pq.ParquetWriter | None]:
    if count < 1:
        raise ConfigurationError(f"count must be >= 1, got {count}")

    simulator = DropSimulator(pattern, config=config, catalog=catalog)
    detector = (
        CycleDetector(target_count=count, threshold=config.confirmation_threshold)
        if config.cycle_detection
        else None
    )
    run_id = _deterministic_run_id(ordinal, count, config)
    settle_columns = new_settle_columns() if log_path is not None else None

    for _ in range(count):
        event = simulator.step()
        if settle_columns is not None and log_path is not None:
            settle_columns["run_id"].append(run_id)
            settle_columns["iteration"].append(event.iteration)
            settle_columns["shape_index"].append(event.shape_index)
            settle_columns["column"].append(event.placement.column)
            settle_columns["row"].append(event.placement.row)
            settle_columns["push_phase"].append(event.push_phase)
            settle_columns["height"].append(event.height)
            if len(settle_columns["run_id"]) >= FLUSH_THRESHOLD:
                settle_writer = flush_settle_columns(settle_columns, log_path, settle_writer)

        if detector is None:
            continue
        extrapolation = detector.observe(event.iteration, simulator.fingerprint(), event.height)
        if extrapolation is None:
            continue
        logger.info(
            "Extrapolated count=%d from iteration %d: period=%d gain=%d height=%d",
            count,
            extrapolation.iteration,
            extrapolation.period,
            extrapolation.height_gain_per_period,
            extrapolation.height,
        )
        result = SimulationResult(
            count=count,
            height=extrapolation.height,
            simulated=simulator.iteration,
            extrapolated=True,
            period=extrapolation.period,
            height_gain_per_period=extrapolation.height_gain_per_period,
            cycle_confirmed_at=extrapolation.iteration,
        )
        break
    else:
        logger.info("Simulated count=%d in full: height=%d", count, simulator.height)
        result = SimulationResult(
            count=count,
            height=simulator.height,
            simulated=simulator.iteration,
            extrapolated=False,
        )

    if settle_columns is not None and log_path is not None:
        settle_writer = flush_settle_columns(settle_columns, log_path, settle_writer)
    return result, settle_writer


def run_reference_counts(
    pattern: PushPattern,
    counts: Iterable[int] = REFERENCE_COUNTS,
    config: DropConfig | None = None,
    out_dir: Path | None = None,
    catalog: Sequence[Shape] | None = None,
) -> list[SimulationResult]:
    """Run one fresh simulation per count and optionally persist the settle log.

    When ``out_dir`` is given, every simulated settle of every run is written
    to ``<out_dir>/logs/settle_log.parquet``.
    """
    drop_config = config or DropConfig()
    directions = _push_directions(pattern)

    log_path: Path | None = None
    if out_dir is not None:
        out_dir = Path(out_dir)
        logs_dir(out_dir).mkdir(parents=True, exist_ok=True)
        log_path = settle_log_path(out_dir)

    settle_writer: pq.ParquetWriter | None = None
    results: list[SimulationResult] = []
    try:
        for ordinal, count in enumerate(counts):
            result, settle_writer = _simulate(
                directions, ordinal, count, drop_config, catalog, log_path, settle_writer
            )
            results.append(result)
    finally:
        if settle_writer is not None:
            settle_writer.close()
    return results


def run_simulation(
    pattern: PushPattern,
    count: int,
    config: DropConfig | None = None,
    out_dir: Path | None = None,
    catalog: Sequence[Shape] | None = None,
) -> SimulationResult:
    """Return the field height after ``count`` shapes have settled.

    Small counts are simulated outright. With cycle detection enabled, large
    counts are answered by extrapolation as soon as a trusted period lines up
    with the target, so only the pre-cycle prefix is ever simulated.
    """
    return run_reference_counts(
        pattern, counts=(count,), config=config, out_dir=out_dir, catalog=catalog
    )[0]
