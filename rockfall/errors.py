"""Exception hierarchy for drop simulations.

Configuration errors are data problems caught before a run starts.
Invariant violations are logic bugs detected while a run is in progress.
Neither is retryable.
"""

from __future__ import annotations


class RockfallError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(RockfallError, ValueError):
    """Invalid input: push pattern, shape row, width, count or threshold."""


class InvariantViolation(RockfallError, RuntimeError):
    """Internal consistency check failed; indicates a bug, not bad input."""
