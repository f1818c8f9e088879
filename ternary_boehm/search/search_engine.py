"""
Search Engine
=============

Finds a real ``x`` in a compact domain with ``P(F(x))``.

The domain is the caller's interval. The ternary tree is rooted at the
canonical node containing it, but every node is clipped to the interval
before anything is evaluated on it, nodes outside it are skipped, and
witnesses are taken at the left end of the clipped node.

Grid search (a state machine):

    Initial     -> Discretized   the uniform continuity oracle of F over the
                                 domain turns P's precision into a node
                                 precision delta; the domain is tiled by the
                                 nodes of precision delta
    Discretized -> Scanning      the ordering policy picks nodes one by one;
                                 P o F is tested at each node's left endpoint
    Scanning    -> Found         first node passing the test
    Scanning    -> Exhausted     no node passed; the result carries no witness

A sequential ordering scans the grid as it is generated, so grids of any size
can be searched and ``Limits`` decides how much of one is visited. Orderings
that reshuffle need the whole grid in memory, up to ``MAX_GRID_NODES``.

Semi-decidable search walks the ternary tree instead. A caller-supplied
semi-predicate (allowed false positives, never false negatives) marks a node
as promising; children of promising nodes go to the front of the frontier,
children of the others to the back. Nodes are never refined beyond delta.
If a witness exists the search finds it; if none exists the search may run
forever, so bounding it with ``Limits`` or a ``CancellationToken`` is the
caller's responsibility.

Usage:
    >>> x = identity()
    >>> engine = SearchEngine()
    >>> result = engine.search(eq(1, 4), 2 * x, GeneralInterval(-1, 1, 0))
    >>> result.found
    True
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Iterator, Optional, Set, Union

from ternary_boehm.codes.interval import CanonicalNode, GeneralInterval
from ternary_boehm.reals.function import ComputableFunction
from ternary_boehm.reals.predicate import Predicate
from ternary_boehm.reals.real import ComputableReal
from ternary_boehm.search.frontier import Frontier
from ternary_boehm.search.limits import (
    UNBOUNDED,
    Budget,
    CancellationToken,
    Limits,
    RunStats,
    StopReason,
)
from ternary_boehm.search.policies import FirstInFrontier, OrderingPolicy

logger = logging.getLogger(__name__)

Domain = Union[CanonicalNode, GeneralInterval]
SemiPredicate = Callable[[CanonicalNode], bool]


def domain_bound(domain: Domain) -> GeneralInterval:
    """The compact interval a search or optimization is restricted to."""
    if isinstance(domain, CanonicalNode):
        return domain.interval
    if isinstance(domain, GeneralInterval):
        return domain
    if isinstance(domain, tuple) and len(domain) == 2:
        return GeneralInterval.from_dyadics(*domain)
    raise TypeError(f"cannot use {domain!r} as a search domain")


def resolve_domain(domain: Domain) -> CanonicalNode:
    """The canonical node used as the root of the tree (the node containing an interval)."""
    if isinstance(domain, CanonicalNode):
        return domain
    return domain_bound(domain).canonicalize()


def clip(node: CanonicalNode, bound: GeneralInterval) -> Optional[GeneralInterval]:
    """The part of ``node`` inside ``bound``; ``None`` when they are disjoint."""
    return node.interval.intersection(bound)


class SearchStatus(Enum):
    """Terminal state of a search."""
    FOUND = auto()             # A witness satisfied the predicate
    EXHAUSTED = auto()         # Frontier emptied without a witness
    BUDGET_EXCEEDED = auto()   # Iteration or time limit reached first
    CANCELLED = auto()         # Stopped through the cancellation token


_STOP_STATUS = {
    StopReason.BUDGET: SearchStatus.BUDGET_EXCEEDED,
    StopReason.CANCELLED: SearchStatus.CANCELLED,
}


@dataclass
class SearchResult:
    """Outcome of a search: a witness or an explicit absence of one."""
    status: SearchStatus
    witness: Optional[ComputableReal]
    node: Optional[CanonicalNode]
    precision: int
    stats: RunStats = field(default_factory=RunStats)

    @property
    def found(self) -> bool:
        return self.status is SearchStatus.FOUND


def image_intersects(function: ComputableFunction, target, domain: Optional[Domain] = None) -> SemiPredicate:
    """Semi-predicate for ``F(x) = target``: the image of the node meets target's node.

    A node containing a solution always passes, so no solution is ever
    demoted to the back of the frontier. With a ``domain`` the image is
    taken over the part of the node inside it.
    """
    target = ComputableReal.coerce(target)
    bound = domain_bound(domain) if domain is not None else None

    def promising(node: CanonicalNode) -> bool:
        region = node.interval if bound is None else clip(node, bound)
        if region is None:
            return False
        return function.image(region).intersects(target.interval(max(node.scale, 0)))

    return promising


class SearchEngine:
    """Grid and semi-decidable search over a compact one-dimensional domain."""

    MAX_GRID_NODES = 1 << 20    # Largest grid a reshuffling ordering will materialize

    def __init__(
        self,
        ordering: Optional[OrderingPolicy] = None,
        limits: Limits = UNBOUNDED,
        token: Optional[CancellationToken] = None,
        max_grid_nodes: Optional[int] = None,
        enable_logging: bool = False,
    ):
        self.ordering = ordering or FirstInFrontier()
        if self.ordering.needs_images:
            raise ValueError(f"{self.ordering.name} ordering needs function images")
        self.limits = limits
        self.token = token
        if max_grid_nodes is not None:
            self.MAX_GRID_NODES = max_grid_nodes

        if enable_logging:
            logging.basicConfig(level=logging.DEBUG)

    def _grid(self, nodes: Iterator[CanonicalNode], size: int, delta: int, stats: RunStats) -> Iterator[CanonicalNode]:
        """Grid nodes in the order the ordering policy visits them."""
        if self.ordering.sequential:
            stats.peak_frontier = 1
            return nodes
        if size > self.MAX_GRID_NODES:
            raise ValueError(
                f"{self.ordering.name} ordering needs the whole grid of {size} nodes at "
                f"precision {delta}, more than {self.MAX_GRID_NODES}; use the first "
                f"ordering or semidecidable_search"
            )
        frontier = Frontier(nodes)
        self.ordering.prepare(frontier)
        stats.peak_frontier = len(frontier)

        def ordered() -> Iterator[CanonicalNode]:
            while frontier:
                yield frontier.take(self.ordering.select(frontier))

        return ordered()

    def search(
        self,
        predicate: Predicate,
        function: ComputableFunction,
        domain: Domain,
        precision: Optional[int] = None,
    ) -> SearchResult:
        """Grid search for ``x`` with ``predicate(function(x))``.

        ``precision`` overrides the grid precision derived from the
        continuity oracle.
        """
        function.require_unary("search")
        root = resolve_domain(domain)
        bound = domain_bound(domain)
        composite = predicate.through(function, bound)
        delta = composite.required_precision if precision is None else precision
        delta = max(delta, root.scale)
        size = root.grid_size(delta)

        stats = RunStats()
        nodes = (node for node in root.iter_discretize(delta) if clip(node, bound) is not None)
        grid = self._grid(nodes, size, delta, stats)
        logger.debug(f"Discretized {root} into {size} nodes at precision {delta}")

        budget = Budget(self.limits, self.token)
        status = SearchStatus.EXHAUSTED
        witness = None
        hit = None
        for node in grid:
            stop = budget.check(stats.iterations)
            if stop is not None:
                status = _STOP_STATUS[stop]
                break
            stats.iterations += 1
            stats.intervals_checked += 1
            x = ComputableReal.from_dyadic(clip(node, bound).left_endpoint)
            if composite.test(x):
                status, witness, hit = SearchStatus.FOUND, x, node
                break

        stats.wall_time_seconds = budget.timer.elapsed_s
        logger.debug(f"Grid search {status.name} after {stats.intervals_checked} nodes")
        return SearchResult(status, witness, hit, delta, stats)

    def semidecidable_search(
        self,
        predicate: Predicate,
        function: ComputableFunction,
        domain: Domain,
        semipredicate: SemiPredicate,
        precision: Optional[int] = None,
    ) -> SearchResult:
        """Ternary-tree search guided by ``semipredicate``; see the module notes on termination."""
        function.require_unary("semidecidable_search")
        root = resolve_domain(domain)
        bound = domain_bound(domain)
        composite = predicate.through(function, bound)
        delta = composite.required_precision if precision is None else precision
        delta = max(delta, root.scale)

        frontier: Frontier[CanonicalNode] = Frontier([root])
        history: Set[CanonicalNode] = set()
        stats = RunStats(peak_frontier=1)
        budget = Budget(self.limits, self.token)
        status = SearchStatus.EXHAUSTED
        witness = None
        hit = None
        while frontier:
            stop = budget.check(stats.iterations)
            if stop is not None:
                status = _STOP_STATUS[stop]
                break
            stats.iterations += 1
            node = frontier.take(0)
            if node in history:
                continue
            history.add(node)
            region = clip(node, bound)
            if region is None:
                continue
            stats.intervals_checked += 1

            if node.scale >= delta:
                x = ComputableReal.from_dyadic(region.left_endpoint)
                if composite.test(x):
                    status, witness, hit = SearchStatus.FOUND, x, node
                    break
                continue

            children = node.children()
            if semipredicate(node):
                frontier.extend_front(children)
            else:
                frontier.extend_back(children)
            stats.observe_frontier(len(frontier))

        stats.wall_time_seconds = budget.timer.elapsed_s
        logger.debug(
            f"Semi-decidable search {status.name} after {stats.intervals_checked} nodes "
            f"(peak frontier {stats.peak_frontier})"
        )
        return SearchResult(status, witness, hit, delta, stats)


def search(
    predicate: Predicate,
    function: ComputableFunction,
    domain: Domain,
    precision: Optional[int] = None,
    **kwargs,
) -> SearchResult:
    """Grid search with a default ``SearchEngine`` configured by ``kwargs``."""
    return SearchEngine(**kwargs).search(predicate, function, domain, precision)
