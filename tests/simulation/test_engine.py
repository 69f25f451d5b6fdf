"""Tests for the drop engine and cycle extrapolation."""

from __future__ import annotations

import pytest

from rockfall.config.types import Direction, DropConfig
from rockfall.domain.field import OccupancyField
from rockfall.domain.generators import PushPatternGenerator
from rockfall.domain.shapes import SHAPE_CATALOG, Placement
from rockfall.errors import ConfigurationError
from rockfall.simulation.engine import (
    DropSimulator,
    drop_shape,
    run_reference_counts,
    run_simulation,
)

SAMPLE_PATTERN = ">>><<><>><<<>><>>><<<>>><<<><<<>><>><<>>"
BRUTE_FORCE = DropConfig(cycle_detection=False)


@pytest.fixture(scope="module")
def brute_force_heights() -> list[int]:
    """Heights after each of the first 10,000 settles, by plain simulation."""
    simulator = DropSimulator(SAMPLE_PATTERN, config=BRUTE_FORCE)
    return [simulator.step().height for _ in range(10_000)]


class TestDropShape:
    def test_first_shape_lands_on_floor(self) -> None:
        field = OccupancyField(7)
        pushes = PushPatternGenerator.from_string(SAMPLE_PATTERN)
        placement = drop_shape(field, SHAPE_CATALOG[0], pushes)
        assert placement == Placement(2, 0)
        assert field.occupied_cells() == frozenset({(2, 0), (3, 0), (4, 0), (5, 0)})
        # three ticks of falling plus the blocked one
        assert pushes.counter == 4

    def test_push_consumed_even_when_blocked(self) -> None:
        field = OccupancyField(7)
        pushes = PushPatternGenerator([Direction.LEFT])
        placement = drop_shape(field, SHAPE_CATALOG[3], pushes)
        assert placement == Placement(0, 3)
        assert pushes.counter == 4


class TestDropSimulator:
    def test_first_heights_match_reference(self) -> None:
        simulator = DropSimulator(SAMPLE_PATTERN)
        heights = [simulator.step().height for _ in range(12)]
        assert heights == [1, 4, 6, 7, 9, 10, 13, 15, 17, 17, 18, 21]

    def test_settle_events(self) -> None:
        simulator = DropSimulator(SAMPLE_PATTERN)
        events = [simulator.step() for _ in range(3)]
        assert [e.iteration for e in events] == [0, 1, 2]
        assert [e.shape_index for e in events] == [0, 1, 2]
        assert [(e.placement.column, e.placement.row) for e in events] == [
            (2, 0),
            (2, 3),
            (0, 5),
        ]
        assert [e.push_phase for e in events] == [4, 8, 13]

    def test_fingerprint_tracks_next_phase(self) -> None:
        simulator = DropSimulator(SAMPLE_PATTERN)
        assert simulator.fingerprint() == 0
        simulator.step()
        assert simulator.fingerprint() == 1 * len(SAMPLE_PATTERN) + 4

    def test_deterministic(self) -> None:
        first = DropSimulator(SAMPLE_PATTERN)
        second = DropSimulator(SAMPLE_PATTERN)
        assert [first.step() for _ in range(500)] == [second.step() for _ in range(500)]
        assert first.field.occupied_cells() == second.field.occupied_cells()

    def test_height_monotone_and_bounded_by_shape_height(self) -> None:
        simulator = DropSimulator(SAMPLE_PATTERN)
        previous = 0
        for _ in range(1_000):
            shape = SHAPE_CATALOG[simulator.shapes.phase]
            height = simulator.step().height
            assert previous <= height <= previous + shape.height
            previous = height

    def test_no_two_shapes_share_a_cell(self) -> None:
        simulator = DropSimulator(SAMPLE_PATTERN)
        expected_cells = 0
        for _ in range(1_000):
            expected_cells += SHAPE_CATALOG[simulator.shapes.phase].cell_count
            simulator.step()
        assert simulator.field.cell_count == expected_cells

    def test_accepts_parsed_directions(self) -> None:
        simulator = DropSimulator((Direction.RIGHT, Direction.LEFT))
        assert simulator.step().height == 1

    def test_invalid_pattern_fails_before_simulation(self) -> None:
        with pytest.raises(ConfigurationError, match="index 2"):
            DropSimulator("<>x")

    def test_rejects_downward_push_in_parsed_pattern(self) -> None:
        with pytest.raises(ConfigurationError, match="index 1: <Direction.DOWN"):
            DropSimulator((Direction.LEFT, Direction.DOWN))

    def test_rejects_raw_symbols_in_sequence(self) -> None:
        with pytest.raises(ConfigurationError, match="index 0: '<'"):
            DropSimulator(["<", ">"])  # type: ignore[list-item]

    def test_width_too_narrow_for_catalog(self) -> None:
        with pytest.raises(ConfigurationError, match="cannot hold"):
            DropSimulator(SAMPLE_PATTERN, config=DropConfig(width=5))


class TestRunSimulation:
    def test_single_shape_is_simulated(self) -> None:
        result = run_simulation(SAMPLE_PATTERN, 1)
        assert result.height == 1
        assert result.simulated == 1
        assert not result.extrapolated

    def test_part_one_by_brute_force(self) -> None:
        result = run_simulation(SAMPLE_PATTERN, 2022, config=BRUTE_FORCE)
        assert result.height == 3068
        assert result.simulated == 2022
        assert not result.extrapolated

    def test_part_one_with_cycle_detection(self) -> None:
        result = run_simulation(SAMPLE_PATTERN, 2022)
        assert result.height == 3068
        assert result.simulated < 2022

    def test_part_two_extrapolated(self) -> None:
        result = run_simulation(SAMPLE_PATTERN, 1_000_000_000_000)
        assert result.height == 1_514_285_714_288
        assert result.extrapolated
        assert result.period == 35
        assert result.height_gain_per_period == 53
        assert result.cycle_confirmed_at == result.simulated - 1
        assert result.simulated < 1_000

    @pytest.mark.parametrize("threshold", [1, 5, 25, 100])
    @pytest.mark.parametrize("count", [500, 3_001, 10_000])
    def test_extrapolation_matches_brute_force(
        self, brute_force_heights: list[int], threshold: int, count: int
    ) -> None:
        config = DropConfig(confirmation_threshold=threshold)
        result = run_simulation(SAMPLE_PATTERN, count, config=config)
        assert result.extrapolated
        assert result.height == brute_force_heights[count - 1]

    @pytest.mark.parametrize("pattern", [(Direction.DOWN,), ["<", ">"], ()])
    def test_rejects_invalid_sequence_before_any_run(self, pattern: object) -> None:
        with pytest.raises(ConfigurationError, match="pattern"):
            run_simulation(pattern, 3)  # type: ignore[arg-type]

    def test_rejects_non_positive_count(self) -> None:
        with pytest.raises(ConfigurationError, match="count"):
            run_simulation(SAMPLE_PATTERN, 0)


def test_run_reference_counts_defaults_to_both_parts() -> None:
    results = run_reference_counts(SAMPLE_PATTERN)
    assert [r.count for r in results] == [2022, 1_000_000_000_000]
    assert [r.height for r in results] == [3068, 1_514_285_714_288]


@pytest.mark.parametrize(
    ("count", "expected"),
    [(2022, 3155), (1_000_000_000_000, 1_560_000_000_003)],
)
def test_short_pattern_golden_heights(count: int, expected: int) -> None:
    assert run_simulation(">>><<><>><<<>><>>><<<>><>><>><<<>>", count).height == expected
