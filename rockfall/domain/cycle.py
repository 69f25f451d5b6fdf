"""Online period detection and height extrapolation.

The detector is fed one ``(iteration, fingerprint, height)`` observation per
settled shape. A fingerprint only summarises the generator phases, not the
field surface, so a repeated fingerprint proposes a period without proving
one. The period is trusted only after the same gap has been measured
``threshold`` times in a row; a single differing gap discards it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rockfall.errors import ConfigurationError, InvariantViolation

logger = logging.getLogger(__name__)


def encode_fingerprint(shape_index: int, push_phase: int, pattern_length: int) -> int:
    """Pack the next shape index and the push phase into one integer key."""
    return shape_index * pattern_length + push_phase


@dataclass(frozen=True)
class Sighting:
    """Iteration and field height at the latest sighting of a fingerprint."""

    iteration: int
    height: int


@dataclass(frozen=True)
class Extrapolation:
    """Answer produced once a trusted period reaches the target's phase."""

    height: int
    period: int
    height_gain_per_period: int
    iteration: int


class CycleDetector:
    """Detect a repeating phase and extrapolate the height at ``target_count``."""

    def __init__(self, target_count: int, threshold: int) -> None:
        if target_count < 1:
            raise ConfigurationError("target_count must be >= 1")
        if threshold < 1:
            raise ConfigurationError("threshold must be >= 1")
        self.target_count = target_count
        self.threshold = threshold
        self._ledger: dict[int, Sighting] = {}
        self._candidate_period: int | None = None
        self._confirmations = 0
        self._result: Extrapolation | None = None

    @property
    def target_iteration(self) -> int:
        """0-indexed iteration of the final shape."""
        return self.target_count - 1

    @property
    def candidate_period(self) -> int | None:
        return self._candidate_period

    @property
    def confirmations(self) -> int:
        return self._confirmations

    @property
    def confirmed(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> Extrapolation | None:
        return self._result

    def sighting(self, fingerprint: int) -> Sighting | None:
        return self._ledger.get(fingerprint)

    def observe(self, iteration: int, fingerprint: int, height: int) -> Extrapolation | None:
        """Record one settle; return the extrapolation once the target phase is reached."""
        if self._result is not None:
            raise InvariantViolation("cycle already confirmed; detector no longer observes")

        previous = self._ledger.get(fingerprint)
        self._ledger[fingerprint] = Sighting(iteration=iteration, height=height)
        if previous is None:
            self._candidate_period = None
            self._confirmations = 0
            return None

        gap = iteration - previous.iteration
        gain = height - previous.height
        if self._candidate_period is None:
            self._candidate_period = gap
            self._confirmations = 1
        elif gap == self._candidate_period:
            self._confirmations += 1
        else:
            self._candidate_period = None
            self._confirmations = 0
            return None

        if self._confirmations < self.threshold:
            return None
        if self._confirmations == self.threshold:
            logger.debug(
                "Trusting period %d (gain %d) at iteration %d", gap, gain, iteration
            )

        if iteration % gap != self.target_iteration % gap:
            return None
        remaining, remainder = divmod(self.target_iteration - iteration, gap)
        if remainder != 0 or remaining < 0:
            raise InvariantViolation(
                f"period {gap} does not reach target iteration {self.target_iteration} "
                f"from iteration {iteration}"
            )
        self._result = Extrapolation(
            height=height + remaining * gain,
            period=gap,
            height_gain_per_period=gain,
            iteration=iteration,
        )
        return self._result
