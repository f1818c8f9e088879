"""
Optimization Engine
===================

Encloses the minimum of a unary computable function over a compact domain
and returns an argument attaining it to the requested accuracy.

Each frontier entry is a candidate node together with an enclosure of the
function's image over it. One iteration:

    1. take a candidate (ordering policy) and compute the images of its left
       and right children
    2. drop every frontier entry and answer whose image is eclipsed by
       either child's image
    3. keep each child that is not eclipsed by its sibling or by a surviving
       entry; it becomes an answer once its node reaches the argument
       precision delta or its image is narrower than 2^-epsilon, otherwise
       it goes back on the frontier

``A.eclipses(B)`` means no value over B is below any value over A, so an
eclipsed entry can only tie the minimum and is safe to discard. A candidate
containing a minimizer can only be eclipsed by one that also attains the
minimum, so the surviving answers always contain a minimizer.

Candidates are nodes of the ternary tree rooted at the canonical node that
contains the domain. Images are taken over the part of each node inside the
domain, nodes outside it are dropped, and the argument is the left end of
that part, so results never leave the caller's interval.

Maximization negates the function, minimizes, and negates the value back.

Usage:
    >>> x = identity()
    >>> result = minimize(x * x, GeneralInterval(-1, 1, 0), 20)
    >>> result.status
    <OptimizationStatus.CONVERGED: 1>
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from itertools import chain
from typing import List, Optional, Set

from ternary_boehm.codes.dyadic import DyadicValue
from ternary_boehm.codes.interval import CanonicalNode, GeneralInterval
from ternary_boehm.reals.function import ComputableFunction, compose, negate
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
from ternary_boehm.search.policies import (
    Candidate,
    FirstInFrontier,
    InitializationPolicy,
    OrderingPolicy,
    RootInitialization,
)
from ternary_boehm.search.search_engine import Domain, clip, domain_bound, resolve_domain

logger = logging.getLogger(__name__)


class OptimizationStatus(Enum):
    """Terminal state of an optimization run."""
    CONVERGED = auto()         # Frontier emptied with certified answers
    BASE_CASE = auto()         # The domain itself already met the tolerance
    FAILED = auto()            # Frontier emptied without any answer
    BUDGET_EXCEEDED = auto()   # Iteration or time limit reached first
    CANCELLED = auto()         # Stopped through the cancellation token


_STOP_STATUS = {
    StopReason.BUDGET: OptimizationStatus.BUDGET_EXCEEDED,
    StopReason.CANCELLED: OptimizationStatus.CANCELLED,
}


@dataclass
class OptimizationResult:
    """Outcome of minimize/maximize.

    ``value`` encloses the extremum; ``argument`` is the left endpoint of the
    best answer node inside the domain (the answer with the tightest bound
    on the extremum).
    """
    status: OptimizationStatus
    argument: Optional[ComputableReal]
    node: Optional[CanonicalNode]
    image: Optional[GeneralInterval]
    value: Optional[GeneralInterval]
    answers: List[Candidate]
    precision: int
    argument_precision: int
    stats: RunStats = field(default_factory=RunStats)

    @property
    def succeeded(self) -> bool:
        return self.status in (OptimizationStatus.CONVERGED, OptimizationStatus.BASE_CASE)

    @property
    def extremum(self) -> Optional[ComputableReal]:
        """Midpoint of ``value``, within half its width of the extremum."""
        if self.value is None:
            return None
        return ComputableReal.from_dyadic(self.value.midpoint)

    def negated(self) -> 'OptimizationResult':
        def flip(c: Candidate) -> Candidate:
            return Candidate(c.node, -c.image if c.image is not None else None)
        return OptimizationResult(
            status=self.status,
            argument=self.argument,
            node=self.node,
            image=-self.image if self.image is not None else None,
            value=-self.value if self.value is not None else None,
            answers=[flip(c) for c in self.answers],
            precision=self.precision,
            argument_precision=self.argument_precision,
            stats=self.stats,
        )


def _summarize(answers: List[Candidate]) -> tuple:
    best = min(answers, key=lambda c: c.image.right_endpoint)
    low = min(c.image.left_endpoint for c in answers)
    value = GeneralInterval.from_dyadics(low, best.image.right_endpoint)
    return best, value


def _anchor(node: CanonicalNode, bound: GeneralInterval) -> ComputableReal:
    return ComputableReal.from_dyadic(clip(node, bound).left_endpoint)


class Optimizer:
    """Eclipse-pruning minimization with pluggable ordering and initialization."""

    def __init__(
        self,
        ordering: Optional[OrderingPolicy] = None,
        initialization: Optional[InitializationPolicy] = None,
        limits: Limits = UNBOUNDED,
        token: Optional[CancellationToken] = None,
        enable_logging: bool = False,
    ):
        self.ordering = ordering or FirstInFrontier()
        self.initialization = initialization or RootInitialization()
        self.limits = limits
        self.token = token

        if enable_logging:
            logging.basicConfig(level=logging.DEBUG)

    def minimize(
        self,
        function: ComputableFunction,
        domain: Domain,
        precision: int,
        argument_precision: Optional[int] = None,
    ) -> OptimizationResult:
        """Enclose ``min function`` over ``domain`` to width ``2^-precision``."""
        function.require_unary("minimize")
        root = resolve_domain(domain)
        bound = domain_bound(domain)
        epsilon = precision
        if argument_precision is None:
            delta = function.uniform(bound).required_precision(epsilon)
        else:
            delta = argument_precision
        tolerance = DyadicValue(1, epsilon)

        def resolved(candidate: Candidate) -> bool:
            return candidate.node.scale >= delta or candidate.image.width <= tolerance

        def evaluate(node: CanonicalNode) -> Optional[Candidate]:
            region = clip(node, bound)
            if region is None:
                return None
            return Candidate(node, function.image(region))

        stats = RunStats()
        budget = Budget(self.limits, self.token)

        base = evaluate(root)
        stats.intervals_checked += 1
        if resolved(base):
            logger.debug(f"Base case: {bound} already meets precision {epsilon}")
            stats.wall_time_seconds = budget.timer.elapsed_s
            return OptimizationResult(
                OptimizationStatus.BASE_CASE, _anchor(root, bound), root,
                base.image, base.image, [base], epsilon, delta, stats,
            )

        initial = [evaluate(n) for n in self.initialization.initial_nodes(root, delta)]
        initial = [c for c in initial if c is not None]
        stats.intervals_checked += len(initial)
        frontier: Frontier[Candidate] = Frontier()
        answers: List[Candidate] = []
        for candidate in initial:
            if resolved(candidate):
                answers.append(candidate)
            else:
                frontier.push_back(candidate)
        history: Set[CanonicalNode] = {c.node for c in initial}
        self.ordering.prepare(frontier)
        stats.observe_frontier(len(frontier))
        logger.debug(
            f"Minimizing {function.name} over {root}: epsilon={epsilon}, delta={delta}, "
            f"{len(frontier)} initial candidates"
        )

        status = None
        while frontier:
            stop = budget.check(stats.iterations)
            if stop is not None:
                status = _STOP_STATUS[stop]
                break
            stats.iterations += 1
            parent = frontier.take(self.ordering.select(frontier))
            children = [
                c for c in (evaluate(parent.node.refine_left()), evaluate(parent.node.refine_right()))
                if c is not None
            ]
            stats.intervals_checked += len(children)

            def dominated(c: Candidate) -> bool:
                return any(child.image.eclipses(c.image) for child in children)

            stats.pruned += frontier.remove_if(dominated)
            survivors = [a for a in answers if not dominated(a)]
            stats.pruned += len(answers) - len(survivors)
            answers = survivors

            kept = children
            if len(children) == 2:
                left, right = children
                if left.image.eclipses(right.image):
                    kept = [left]
                elif right.image.eclipses(left.image):
                    kept = [right]

            for child in kept:
                if child.node in history:
                    continue
                if any(e.image.eclipses(child.image) for e in chain(frontier, answers)):
                    stats.pruned += 1
                    continue
                history.add(child.node)
                if resolved(child):
                    answers.append(child)
                else:
                    frontier.push_back(child)
            stats.observe_frontier(len(frontier))

        stats.wall_time_seconds = budget.timer.elapsed_s
        if status is None:
            status = OptimizationStatus.CONVERGED if answers else OptimizationStatus.FAILED
        logger.debug(
            f"{status.name}: {len(answers)} answers after {stats.iterations} iterations, "
            f"{stats.pruned} pruned"
        )
        if status is not OptimizationStatus.CONVERGED:
            return OptimizationResult(
                status, None, None, None, None, answers, epsilon, delta, stats,
            )
        best, value = _summarize(answers)
        return OptimizationResult(
            status, _anchor(best.node, bound), best.node,
            best.image, value, answers, epsilon, delta, stats,
        )

    def maximize(
        self,
        function: ComputableFunction,
        domain: Domain,
        precision: int,
        argument_precision: Optional[int] = None,
    ) -> OptimizationResult:
        """Enclose ``max function`` over ``domain`` by minimizing ``-function``."""
        return self.minimize(
            compose(negate(), function), domain, precision, argument_precision
        ).negated()


class NaiveOptimizer:
    """Evaluate every node of the grid at delta and keep the best ones.

    The baseline the pruning optimizer is measured against; it visits
    ``2^(delta - scale)`` nodes regardless of the function.
    """

    MAX_GRID_NODES = 1 << 16

    def __init__(self, limits: Limits = UNBOUNDED, token: Optional[CancellationToken] = None):
        self.limits = limits
        self.token = token

    def minimize(
        self,
        function: ComputableFunction,
        domain: Domain,
        precision: int,
        argument_precision: Optional[int] = None,
    ) -> OptimizationResult:
        function.require_unary("minimize")
        root = resolve_domain(domain)
        bound = domain_bound(domain)
        if argument_precision is None:
            delta = function.uniform(bound).required_precision(precision)
        else:
            delta = argument_precision
        delta = max(delta, root.scale)
        size = root.grid_size(delta)
        if size > self.MAX_GRID_NODES:
            raise ValueError(
                f"grid of {size} nodes at precision {delta} exceeds {self.MAX_GRID_NODES}"
            )

        stats = RunStats(peak_frontier=size)
        budget = Budget(self.limits, self.token)
        candidates: List[Candidate] = []
        for node in root.iter_discretize(delta):
            region = clip(node, bound)
            if region is None:
                continue
            stop = budget.check(stats.iterations)
            if stop is not None:
                stats.wall_time_seconds = budget.timer.elapsed_s
                return OptimizationResult(
                    _STOP_STATUS[stop], None, None, None, None, candidates,
                    precision, delta, stats,
                )
            stats.iterations += 1
            stats.intervals_checked += 1
            candidates.append(Candidate(node, function.image(region)))

        best, _ = _summarize(candidates)
        ceiling = best.image
        answers = [c for c in candidates if not ceiling.eclipses(c.image) or c is best]
        stats.pruned = len(candidates) - len(answers)
        _, value = _summarize(answers)
        stats.wall_time_seconds = budget.timer.elapsed_s
        return OptimizationResult(
            OptimizationStatus.CONVERGED, _anchor(best.node, bound), best.node,
            best.image, value, answers, precision, delta, stats,
        )

    def maximize(self, function, domain, precision, argument_precision=None) -> OptimizationResult:
        return self.minimize(
            compose(negate(), function), domain, precision, argument_precision
        ).negated()


def minimize(function: ComputableFunction, domain: Domain, precision: int, **kwargs) -> OptimizationResult:
    """Minimize with a default ``Optimizer`` configured by ``kwargs``."""
    argument_precision = kwargs.pop('argument_precision', None)
    return Optimizer(**kwargs).minimize(function, domain, precision, argument_precision)


def maximize(function: ComputableFunction, domain: Domain, precision: int, **kwargs) -> OptimizationResult:
    """Maximize with a default ``Optimizer`` configured by ``kwargs``."""
    argument_precision = kwargs.pop('argument_precision', None)
    return Optimizer(**kwargs).maximize(function, domain, precision, argument_precision)
