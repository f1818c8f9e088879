"""
Search and Optimization Strategy Benchmarks
===========================================

Compares ordering and initialization policies of the eclipse-pruning
optimizer against the grid baseline on the same objectives, reporting wall
time, iterations, images computed and pruned candidates.

Usage:
    python -m benchmarks.bench_strategies
"""

import gc
import statistics
import time
from fractions import Fraction
from typing import Callable, Dict, List, Tuple

import numpy as np
from tabulate import tabulate

from ternary_boehm import (
    GeneralInterval,
    NaiveOptimizer,
    Optimizer,
    SearchEngine,
    eq,
    identity,
    image_intersects,
    unary_polynomial,
)
from ternary_boehm.search.policies import (
    FirstInFrontier,
    GridInitialization,
    ShuffleOnce,
    UniformRandom,
    WidestImage,
)
from ternary_boehm.utils.helpers import format_ns, format_ratio


REPEATS = 5          # Timed runs per configuration
SEED = 20240611      # Seed for randomized orderings


def time_run(func: Callable, repeats: int = REPEATS) -> Tuple[List[int], object]:
    """Time ``func()`` over several runs, returning ns times and the last result."""
    times = []
    result = None
    for _ in range(repeats):
        gc.disable()
        start = time.perf_counter_ns()
        result = func()
        end = time.perf_counter_ns()
        gc.enable()
        times.append(end - start)
    return times, result


def objectives() -> List[Tuple[str, object, GeneralInterval]]:
    x = identity()
    return [
        ("x^2 on [-1,1]", x * x, GeneralInterval(-1, 1, 0)),
        ("x^6+x^5-x^4+x^2 on [-4,4]",
         unary_polynomial([(1, 6), (1, 5), (-1, 4), (1, 2)]),
         GeneralInterval(-4, 4, 0)),
        ("(x-5/4)^2 on [-4,4]",
         (x - Fraction(5, 4)) * (x - Fraction(5, 4)),
         GeneralInterval(-4, 4, 0)),
    ]


def strategies() -> Dict[str, Callable[[], Optimizer]]:
    return {
        "first": lambda: Optimizer(ordering=FirstInFrontier()),
        "shuffle-once": lambda: Optimizer(ordering=ShuffleOnce(np.random.default_rng(SEED))),
        "uniform-random": lambda: Optimizer(ordering=UniformRandom(np.random.default_rng(SEED))),
        "widest-image": lambda: Optimizer(ordering=WidestImage()),
        "grid-init(6)": lambda: Optimizer(initialization=GridInitialization(precision=6)),
    }


def bench_optimizers(precision: int) -> None:
    print("┌──────────────────────────────────────────────────────────────┐")
    print(f"│  BENCHMARK 1: Minimization strategies (precision {precision:<3})        │")
    print("└──────────────────────────────────────────────────────────────┘")

    for label, function, domain in objectives():
        rows = []
        baseline = None
        for name, make in strategies().items():
            times, result = time_run(lambda: make().minimize(function, domain, precision))
            median = statistics.median(times)
            if baseline is None:
                baseline = median
            stats = result.stats
            rows.append([
                name,
                result.status.name,
                f"{result.argument.to_float():.6f}" if result.argument is not None else "-",
                format_ns(median),
                format_ratio(baseline, median),
                stats.iterations,
                stats.intervals_checked,
                stats.pruned,
                stats.peak_frontier,
            ])
        print(f"\n  {label}")
        print(tabulate(
            rows,
            headers=["strategy", "status", "argument", "median", "vs first",
                     "iterations", "images", "pruned", "peak frontier"],
            tablefmt="github",
        ))
    print()


def bench_naive_baseline(precision: int) -> None:
    print("┌──────────────────────────────────────────────────────────────┐")
    print(f"│  BENCHMARK 2: Pruning vs grid baseline (precision {precision:<3})       │")
    print("└──────────────────────────────────────────────────────────────┘")

    rows = []
    for label, function, domain in objectives():
        pruned_times, pruned = time_run(lambda: Optimizer().minimize(function, domain, precision))
        try:
            naive_times, naive = time_run(
                lambda: NaiveOptimizer().minimize(function, domain, precision), repeats=1
            )
        except ValueError as exc:
            rows.append([label, format_ns(statistics.median(pruned_times)), "-", str(exc), "-"])
            continue
        pruned_ns = statistics.median(pruned_times)
        naive_ns = statistics.median(naive_times)
        rows.append([
            label,
            format_ns(pruned_ns),
            format_ns(naive_ns),
            format_ratio(naive_ns, pruned_ns),
            f"{pruned.stats.intervals_checked} / {naive.stats.intervals_checked}",
        ])
    print(tabulate(
        rows,
        headers=["objective", "pruning", "grid", "pruning vs grid", "images (pruning / grid)"],
        tablefmt="github",
    ))
    print()


def bench_search(precision: int) -> None:
    print("┌──────────────────────────────────────────────────────────────┐")
    print(f"│  BENCHMARK 3: Grid vs semi-decidable search (precision {precision:<3})  │")
    print("└──────────────────────────────────────────────────────────────┘")

    x = identity()
    f = Fraction(1, 2) * x
    domain = GeneralInterval(-1, 1, 0)
    target = Fraction(1, 2)
    engine = SearchEngine()

    grid_times, grid = time_run(lambda: engine.search(eq(target, precision), f, domain))
    semi_times, semi = time_run(
        lambda: engine.semidecidable_search(
            eq(target, precision), f, domain, image_intersects(f, target)
        )
    )
    rows = [
        ["grid", grid.status.name, grid.precision, grid.stats.intervals_checked,
         format_ns(statistics.median(grid_times))],
        ["semi-decidable", semi.status.name, semi.precision, semi.stats.intervals_checked,
         format_ns(statistics.median(semi_times))],
    ]
    print(tabulate(
        rows,
        headers=["search", "status", "node precision", "nodes checked", "median"],
        tablefmt="github",
    ))
    print()


def run_benchmarks():
    print("=" * 64)
    print("  TERNARY BOEHM SEARCH AND OPTIMIZATION BENCHMARKS")
    print("=" * 64)
    print()
    bench_optimizers(precision=24)
    bench_naive_baseline(precision=8)
    bench_search(precision=8)


if __name__ == "__main__":
    run_benchmarks()
