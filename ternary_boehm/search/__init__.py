"""
Search and Optimization
=======================

Frontier-based engines over a compact one-dimensional domain: grid and
semi-decidable search for witnesses of a predicate, and eclipse-pruning
minimization/maximization. Candidate order and initial frontiers are
pluggable policies; runs are bounded by ``Limits`` and report ``RunStats``.
"""

from ternary_boehm.search.limits import CancellationToken, Limits, RunStats
from ternary_boehm.search.frontier import Frontier
from ternary_boehm.search.policies import (
    Candidate,
    FirstInFrontier,
    GridInitialization,
    RootInitialization,
    ShuffleOnce,
    UniformRandom,
    WidestImage,
    ordering_by_name,
)
from ternary_boehm.search.search_engine import (
    SearchEngine,
    SearchResult,
    SearchStatus,
    image_intersects,
    search,
)
from ternary_boehm.search.optimizer import (
    NaiveOptimizer,
    OptimizationResult,
    OptimizationStatus,
    Optimizer,
    maximize,
    minimize,
)

__all__ = [
    'CancellationToken',
    'Limits',
    'RunStats',
    'Frontier',
    'Candidate',
    'FirstInFrontier',
    'GridInitialization',
    'RootInitialization',
    'ShuffleOnce',
    'UniformRandom',
    'WidestImage',
    'ordering_by_name',
    'SearchEngine',
    'SearchResult',
    'SearchStatus',
    'image_intersects',
    'search',
    'NaiveOptimizer',
    'OptimizationResult',
    'OptimizationStatus',
    'Optimizer',
    'maximize',
    'minimize',
]
