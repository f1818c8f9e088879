"""
Run Limits and Statistics
=========================

Semi-decidable search may never terminate when no witness exists, and the
optimizer can run for a long time at high precision. Callers bound both with
``Limits`` (iteration count, wall time) and may stop a run from outside with
a ``CancellationToken``. Every run reports a ``RunStats`` record instead of
printing progress.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from ternary_boehm.utils.helpers import Timer


class StopReason(Enum):
    """Why a run stopped before reaching a terminal state."""
    BUDGET = auto()          # Iteration or time limit reached
    CANCELLED = auto()       # Token cancelled by the caller


@dataclass(frozen=True)
class Limits:
    """Upper bounds for one run; ``None`` means unbounded."""
    max_iterations: Optional[int] = None
    timeout_seconds: Optional[float] = None

    def __post_init__(self):
        if self.max_iterations is not None and self.max_iterations < 0:
            raise ValueError("max_iterations must be non-negative")
        if self.timeout_seconds is not None and self.timeout_seconds < 0:
            raise ValueError("timeout_seconds must be non-negative")


UNBOUNDED = Limits()


class CancellationToken:
    """Cooperative cancellation flag checked once per iteration."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


@dataclass
class RunStats:
    """Counters collected during one search or optimization run."""
    iterations: int = 0
    intervals_checked: int = 0
    pruned: int = 0
    peak_frontier: int = 0
    wall_time_seconds: float = 0.0

    def observe_frontier(self, size: int) -> None:
        if size > self.peak_frontier:
            self.peak_frontier = size


class Budget:
    """Checks ``Limits`` and a token against a running timer."""

    def __init__(self, limits: Limits, token: Optional[CancellationToken] = None):
        self.limits = limits
        self.token = token
        self.timer = Timer().start()

    def check(self, iterations: int) -> Optional[StopReason]:
        if self.token is not None and self.token.cancelled:
            return StopReason.CANCELLED
        if self.limits.max_iterations is not None and iterations >= self.limits.max_iterations:
            return StopReason.BUDGET
        if self.limits.timeout_seconds is not None and self.timer.elapsed_s >= self.limits.timeout_seconds:
            return StopReason.BUDGET
        return None
