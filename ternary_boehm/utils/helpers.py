"""Timing and formatting helpers for search runs and benchmarks."""

import time


class Timer:
    """High-resolution timer; readable while still running."""

    def __init__(self):
        self.start_ns = 0
        self.end_ns = 0

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc):
        self.stop()

    def start(self) -> 'Timer':
        self.start_ns = time.perf_counter_ns()
        self.end_ns = 0
        return self

    def stop(self) -> None:
        self.end_ns = time.perf_counter_ns()

    @property
    def elapsed_ns(self) -> int:
        end = self.end_ns or time.perf_counter_ns()
        return end - self.start_ns

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_ns / 1_000_000.0

    @property
    def elapsed_s(self) -> float:
        return self.elapsed_ns / 1_000_000_000.0


def format_ns(ns: float) -> str:
    """Format nanoseconds into a human-readable string."""
    if ns < 1_000:
        return f"{ns:.0f} ns"
    elif ns < 1_000_000:
        return f"{ns / 1_000:.1f} µs"
    elif ns < 1_000_000_000:
        return f"{ns / 1_000_000:.2f} ms"
    else:
        return f"{ns / 1_000_000_000:.3f} s"


def format_ratio(baseline_ns: float, other_ns: float) -> str:
    """Format how ``other`` compares to ``baseline``."""
    if other_ns <= 0:
        return "∞x"
    ratio = baseline_ns / other_ns
    if ratio >= 1:
        return f"{ratio:.2f}x faster"
    else:
        return f"{1/ratio:.2f}x slower"
