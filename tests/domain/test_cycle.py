"""Tests for rockfall.domain.cycle module."""

from __future__ import annotations

import pytest

from rockfall.domain.cycle import CycleDetector, encode_fingerprint
from rockfall.errors import ConfigurationError, InvariantViolation


def test_encode_fingerprint_is_unique_per_phase_pair() -> None:
    keys = {encode_fingerprint(s, p, 40) for s in range(5) for p in range(40)}
    assert len(keys) == 5 * 40


class TestCycleDetectorLedger:
    def test_first_sighting_continues(self) -> None:
        detector = CycleDetector(target_count=100, threshold=3)
        assert detector.observe(0, fingerprint=7, height=1) is None
        sighting = detector.sighting(7)
        assert sighting is not None
        assert (sighting.iteration, sighting.height) == (0, 1)
        assert detector.candidate_period is None

    def test_repeat_adopts_candidate_and_refreshes_ledger(self) -> None:
        detector = CycleDetector(target_count=100, threshold=3)
        detector.observe(0, 7, 1)
        detector.observe(4, 7, 6)
        assert detector.candidate_period == 4
        assert detector.confirmations == 1
        sighting = detector.sighting(7)
        assert sighting is not None
        assert sighting.iteration == 4

    def test_unseen_fingerprint_resets_confirmations(self) -> None:
        detector = CycleDetector(target_count=100, threshold=5)
        detector.observe(0, 0, 1)
        detector.observe(1, 0, 2)
        assert detector.confirmations == 1
        detector.observe(2, 1, 3)
        assert detector.candidate_period is None
        assert detector.confirmations == 0

    def test_different_gap_discards_candidate(self) -> None:
        detector = CycleDetector(target_count=100, threshold=5)
        detector.observe(0, 0, 1)
        detector.observe(1, 1, 2)
        detector.observe(2, 0, 3)  # gap 2
        detector.observe(3, 1, 4)  # gap 2
        assert detector.confirmations == 2
        detector.observe(6, 0, 7)  # gap 4
        assert detector.candidate_period is None
        assert detector.confirmations == 0
        detector.observe(7, 1, 8)  # gap 4 adopted afresh
        assert detector.candidate_period == 4
        assert detector.confirmations == 1


class TestCycleDetectorExtrapolation:
    def test_extrapolates_linear_growth(self) -> None:
        # height == iteration + 1, fingerprints alternate with period 2
        detector = CycleDetector(target_count=10, threshold=2)
        answers = [detector.observe(i, i % 2, i + 1) for i in range(4)]
        assert answers[:3] == [None, None, None]
        result = answers[3]
        assert result is not None
        assert result.height == 10
        assert detector.confirmed
        assert detector.result is result
        assert (result.period, result.height_gain_per_period, result.iteration) == (2, 2, 3)

    def test_waits_for_congruent_phase(self) -> None:
        detector = CycleDetector(target_count=4, threshold=1)
        assert detector.observe(0, 0, 1) is None
        assert detector.observe(1, 1, 2) is None
        # period trusted here, but iteration 2 is not congruent with target 3
        assert detector.observe(2, 0, 3) is None
        result = detector.observe(3, 1, 4)
        assert result is not None
        assert result.height == 4

    def test_huge_target_is_exact(self) -> None:
        detector = CycleDetector(target_count=10**12, threshold=1)
        detector.observe(0, 0, 0)
        detector.observe(1, 1, 3)
        answer = detector.observe(2, 0, 6)  # even iteration, odd target iteration
        assert answer is None
        result = detector.observe(3, 1, 9)
        assert result is not None
        assert result.height == 9 + (10**12 - 1 - 3) // 2 * 6

    def test_rejects_observations_after_confirmation(self) -> None:
        detector = CycleDetector(target_count=2, threshold=1)
        detector.observe(0, 0, 1)
        result = detector.observe(1, 0, 2)
        assert result is not None
        assert result.height == 2
        with pytest.raises(InvariantViolation, match="already confirmed"):
            detector.observe(2, 0, 3)

    @pytest.mark.parametrize(
        ("target_count", "threshold"),
        [(0, 1), (1, 0)],
    )
    def test_rejects_invalid_arguments(self, target_count: int, threshold: int) -> None:
        with pytest.raises(ConfigurationError):
            CycleDetector(target_count=target_count, threshold=threshold)
