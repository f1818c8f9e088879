"""
Tests for the search engine.

Validates:
  - grid search finds witnesses and reports exhaustion explicitly
  - semi-decidable search with the image semi-predicate
  - limits, cancellation and configuration errors
"""

from fractions import Fraction

import pytest

from ternary_boehm.codes.interval import CanonicalNode, GeneralInterval
from ternary_boehm.reals.function import add, inverse
from ternary_boehm.reals.predicate import eq, geq, leq
from ternary_boehm.search.limits import CancellationToken, Limits
from ternary_boehm.search.policies import ShuffleOnce, UniformRandom, WidestImage
from ternary_boehm.search.search_engine import (
    SearchEngine,
    SearchStatus,
    clip,
    domain_bound,
    image_intersects,
    resolve_domain,
    search,
)


def distance_to(real, value, n=40) -> Fraction:
    lo, hi = real.interval(n).to_fractions()
    return max(abs(lo - value), abs(hi - value))


class TestResolveDomain:
    def test_node_passes_through(self):
        node = CanonicalNode(3, 2)
        assert resolve_domain(node) is node

    def test_interval_is_canonicalized(self, unit_domain):
        node = resolve_domain(unit_domain)
        assert node.contains(unit_domain)

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            resolve_domain([0, 1])


class TestGridSearch:
    def test_solves_linear_equation(self, x, unit_domain):
        result = SearchEngine().search(eq(Fraction(1, 2), 6), x * "0.5", unit_domain)
        assert result.found
        assert result.precision == 10
        assert distance_to(result.witness, 1) <= Fraction(1, 8)
        assert result.node.scale == result.precision

    def test_exhausted(self, x, unit_domain):
        result = search(eq(5, 6), x, unit_domain)
        assert result.status is SearchStatus.EXHAUSTED
        assert result.witness is None
        assert result.node is None
        assert result.stats.intervals_checked == 2 ** (result.precision - 0)

    def test_precision_override(self, x, unit_domain):
        result = search(geq(Fraction(1, 2), 4), x, unit_domain, precision=3)
        assert result.found
        assert result.precision == 3

    def test_shuffled_order_still_finds(self, x, unit_domain, rng):
        engine = SearchEngine(ordering=ShuffleOnce(rng))
        result = engine.search(eq(Fraction(1, 2), 6), x * "0.5", unit_domain)
        assert result.found
        assert distance_to(result.witness, 1) <= Fraction(1, 8)

    def test_random_order_still_finds(self, x, unit_domain, rng):
        result = SearchEngine(ordering=UniformRandom(rng)).search(eq(0, 5), x, unit_domain)
        assert result.found

    def test_grid_too_large_for_reshuffling(self, x, unit_domain, rng):
        engine = SearchEngine(ordering=ShuffleOnce(rng), max_grid_nodes=8)
        with pytest.raises(ValueError):
            engine.search(eq(0, 5), x, unit_domain)

    def test_large_grid_is_streamed(self, x, unit_domain):
        # 2^24 nodes; the witness is the first one
        result = search(eq(Fraction(-1, 2), 20), x * Fraction(1, 2), unit_domain)
        assert result.found
        assert result.precision == 24
        assert result.stats.intervals_checked == 1
        assert result.stats.peak_frontier == 1

    def test_large_grid_bounded_by_limits(self, x, unit_domain):
        engine = SearchEngine(limits=Limits(max_iterations=100))
        result = engine.search(eq(Fraction(1, 2), 20), x * Fraction(1, 2), unit_domain)
        assert result.status is SearchStatus.BUDGET_EXCEEDED
        assert result.precision == 24
        assert result.stats.iterations == 100
        assert result.witness is None

    def test_budget(self, x, unit_domain):
        engine = SearchEngine(limits=Limits(max_iterations=3))
        result = engine.search(eq(5, 6), x, unit_domain)
        assert result.status is SearchStatus.BUDGET_EXCEEDED
        assert result.stats.iterations == 3

    def test_cancelled(self, x, unit_domain):
        token = CancellationToken()
        token.cancel()
        result = SearchEngine(token=token).search(eq(0, 5), x, unit_domain)
        assert result.status is SearchStatus.CANCELLED
        assert result.stats.iterations == 0

    def test_image_ordering_rejected(self):
        with pytest.raises(ValueError):
            SearchEngine(ordering=WidestImage())

    def test_requires_unary(self, unit_domain):
        with pytest.raises(ValueError):
            search(eq(0, 4), add(), unit_domain)


class TestSemiDecidableSearch:
    def test_solves_linear_equation(self, x, unit_domain):
        f = x * Fraction(1, 2)
        result = SearchEngine().semidecidable_search(
            eq(Fraction(1, 2), 24), f, unit_domain, image_intersects(f, Fraction(1, 2)),
        )
        assert result.found
        assert distance_to(result.witness, 1) <= Fraction(1, 2 ** 20)

    def test_visits_far_fewer_nodes_than_grid(self, x, unit_domain):
        f = x * Fraction(1, 2)
        result = SearchEngine().semidecidable_search(
            eq(Fraction(1, 2), 24), f, unit_domain, image_intersects(f, Fraction(1, 2)),
        )
        assert result.stats.intervals_checked < 2 ** 12

    def test_exhausted_when_bounded_by_precision(self, x, unit_domain):
        result = SearchEngine().semidecidable_search(
            eq(5, 6), x, unit_domain, lambda node: True, precision=2,
        )
        assert result.status is SearchStatus.EXHAUSTED

    def test_budget_bounds_unsatisfiable_search(self, x, unit_domain):
        engine = SearchEngine(limits=Limits(max_iterations=50))
        result = engine.semidecidable_search(eq(5, 30), x, unit_domain, lambda node: True)
        assert result.status is SearchStatus.BUDGET_EXCEEDED
        assert result.witness is None

    def test_image_intersects_never_rejects_solution(self, x):
        promising = image_intersects(x * 2, 1)
        assert promising(CanonicalNode(0, 1))
        assert not promising(CanonicalNode(4, 0))

    def test_node_domain(self, x):
        domain = CanonicalNode(0, 0)
        result = SearchEngine().semidecidable_search(
            geq(Fraction(3, 2), 8), x, domain, lambda node: node.right_endpoint >= 1,
        )
        assert result.found
        assert result.node.scale >= result.precision


# ═══════════════════════════════════════════════════════════════════
#  Domains that are not canonical nodes
# ═══════════════════════════════════════════════════════════════════

class TestBoundedDomain:
    def test_bound_is_the_given_interval(self):
        interval = GeneralInterval(1, 4, 2)
        assert domain_bound(interval) is interval
        assert resolve_domain(interval) == CanonicalNode(0, 1)
        assert domain_bound(CanonicalNode(0, 1)) == GeneralInterval(0, 2, 1)

    def test_clip(self):
        bound = GeneralInterval(1, 4, 2)
        assert clip(CanonicalNode(0, 2), bound).to_fractions() == (Fraction(1, 4), Fraction(1, 2))
        assert clip(CanonicalNode(-4, 3), bound) is None

    def test_grid_witness_inside_domain(self, x):
        result = search(geq(-1, 4), x, GeneralInterval(1, 4, 2))
        assert result.found
        assert result.witness.interval(10).to_fractions()[0] == Fraction(1, 4)

    def test_function_singular_outside_domain(self):
        # the enclosing node [0, 1] touches the pole of 1/x
        result = search(leq(2, 6), inverse(), GeneralInterval(1, 4, 2))
        assert result.found
        lo, _ = result.witness.interval(20).to_fractions()
        assert Fraction(1, 4) <= lo <= 1

    def test_semidecidable_witness_inside_domain(self):
        f = inverse()
        domain = GeneralInterval(1, 4, 2)
        result = SearchEngine().semidecidable_search(
            eq(2, 10), f, domain, image_intersects(f, 2, domain),
        )
        assert result.found
        assert distance_to(result.witness, Fraction(1, 2)) <= Fraction(1, 2 ** 6)

    def test_image_intersects_outside_domain(self):
        promising = image_intersects(inverse(), 2, GeneralInterval(1, 4, 2))
        assert not promising(CanonicalNode(-4, 3))
        assert promising(CanonicalNode(0, 1))
