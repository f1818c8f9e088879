"""
Ordering and Initialization Policies
====================================

The search and optimization loops are single loops; what varies between the
classic variants is only

    which frontier entry to refine next   (OrderingPolicy)
    which nodes the frontier starts with  (InitializationPolicy)

Randomized orderings draw from an injected ``numpy.random.Generator`` so runs
are reproducible from a seed.

Usage:
    >>> ordering = UniformRandom(rng=42)
    >>> optimizer = Optimizer(ordering=ordering)
"""

from dataclasses import dataclass
from typing import List, Optional, Union

import numpy as np

from ternary_boehm.codes.interval import CanonicalNode, GeneralInterval
from ternary_boehm.search.frontier import Frontier

RandomSource = Union[np.random.Generator, int, None]


def make_rng(rng: RandomSource) -> np.random.Generator:
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


@dataclass
class Candidate:
    """A frontier entry: an input node and its function image (if known)."""
    node: CanonicalNode
    image: Optional[GeneralInterval] = None


# ═══════════════════════════════════════════════════════════════════
#  Ordering
# ═══════════════════════════════════════════════════════════════════

class OrderingPolicy:
    """Chooses the index of the next frontier entry."""

    name = "ordering"
    needs_images = False
    sequential = False     # Always takes the front entry and never reorders

    def prepare(self, frontier: Frontier) -> None:
        """Called once with the initial frontier."""

    def select(self, frontier: Frontier) -> int:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class FirstInFrontier(OrderingPolicy):
    """Refine entries in the order they were added."""

    name = "first"
    sequential = True

    def select(self, frontier: Frontier) -> int:
        return 0


class ShuffleOnce(OrderingPolicy):
    """Shuffle the initial frontier once, then go in order."""

    name = "shuffle-once"

    def __init__(self, rng: RandomSource = None):
        self.rng = make_rng(rng)

    def prepare(self, frontier: Frontier) -> None:
        frontier.reorder([int(i) for i in self.rng.permutation(len(frontier))])

    def select(self, frontier: Frontier) -> int:
        return 0


class UniformRandom(OrderingPolicy):
    """Pick an entry uniformly at random at every step."""

    name = "uniform-random"

    def __init__(self, rng: RandomSource = None):
        self.rng = make_rng(rng)

    def select(self, frontier: Frontier) -> int:
        return int(self.rng.integers(len(frontier)))


class WidestImage(OrderingPolicy):
    """Refine the entry whose image is widest (most uncertain) first."""

    name = "widest-image"
    needs_images = True

    def select(self, frontier: Frontier) -> int:
        best = 0
        best_width = None
        for i, candidate in enumerate(frontier):
            width = candidate.image.width
            if best_width is None or width > best_width:
                best, best_width = i, width
        return best


# ═══════════════════════════════════════════════════════════════════
#  Initialization
# ═══════════════════════════════════════════════════════════════════

class InitializationPolicy:
    """Produces the starting nodes for a domain."""

    name = "initialization"

    def initial_nodes(self, domain: CanonicalNode, delta: int) -> List[CanonicalNode]:
        raise NotImplementedError


class RootInitialization(InitializationPolicy):
    """Start from the domain node itself."""

    name = "root"

    def initial_nodes(self, domain: CanonicalNode, delta: int) -> List[CanonicalNode]:
        return [domain]


class GridInitialization(InitializationPolicy):
    """Start from the flat grid of nodes at ``precision`` (default: ``delta``)."""

    name = "grid"

    def __init__(self, precision: Optional[int] = None):
        self.precision = precision

    def initial_nodes(self, domain: CanonicalNode, delta: int) -> List[CanonicalNode]:
        precision = delta if self.precision is None else self.precision
        if precision <= domain.scale:
            return [domain]
        return domain.discretize(precision)


ORDERINGS = {
    'first': FirstInFrontier,
    'shuffle-once': ShuffleOnce,
    'uniform-random': UniformRandom,
    'widest-image': WidestImage,
}


def ordering_by_name(name: str, rng: RandomSource = None) -> OrderingPolicy:
    try:
        cls = ORDERINGS[name]
    except KeyError:
        raise ValueError(f"unknown ordering {name!r}; choose from {sorted(ORDERINGS)}") from None
    if cls in (ShuffleOnce, UniformRandom):
        return cls(rng)
    return cls()
