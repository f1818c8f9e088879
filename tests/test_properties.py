"""
Property-based tests using Hypothesis.

Exact rational arithmetic (``fractions.Fraction``) is the reference model
for dyadic values, intervals and nodes; reals and functions are checked for
nesting and soundness on generated inputs.
"""

from fractions import Fraction

from hypothesis import assume, given, settings
from hypothesis.strategies import builds, fractions, integers

from ternary_boehm.codes.dyadic import DyadicValue
from ternary_boehm.codes.interval import CanonicalNode, GeneralInterval
from ternary_boehm.reals.function import unary_polynomial
from ternary_boehm.reals.real import ComputableReal


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

numerators = integers(min_value=-10 ** 6, max_value=10 ** 6)
scales = integers(min_value=-8, max_value=24)

dyadics = builds(DyadicValue, numerators, scales)
nodes = builds(CanonicalNode, numerators, scales)


def intervals():
    return builds(
        lambda a, b, s: GeneralInterval(min(a, b), max(a, b), s),
        numerators, numerators, scales,
    )


small_fractions = fractions(min_value=-4, max_value=4, max_denominator=1000)


# ---------------------------------------------------------------------------
# Dyadic values
# ---------------------------------------------------------------------------

class TestDyadicProperties:
    @given(a=dyadics, b=dyadics)
    def test_arithmetic_matches_fractions(self, a, b):
        fa, fb = a.to_fraction(), b.to_fraction()
        assert (a + b).to_fraction() == fa + fb
        assert (a - b).to_fraction() == fa - fb
        assert (a * b).to_fraction() == fa * fb

    @given(a=dyadics, b=dyadics)
    def test_ordering_matches_fractions(self, a, b):
        fa, fb = a.to_fraction(), b.to_fraction()
        assert (a < b) == (fa < fb)
        assert (a == b) == (fa == fb)
        assert a.compare(b) == (fa > fb) - (fa < fb)

    @given(a=dyadics, n=integers(min_value=0, max_value=12))
    def test_equal_values_hash_equal(self, a, n):
        b = a.refine_left(n)
        assert a == b
        assert hash(a) == hash(b)

    @given(a=dyadics, n=integers(min_value=0, max_value=12))
    def test_refine_then_coarsen(self, a, n):
        assert a.refine_left(n).coarsen(n) == a
        assert a.refine_right(n).coarsen(n) == a

    @given(a=dyadics)
    def test_floor_and_ceil(self, a):
        f = a.to_fraction()
        assert a.floor() <= f <= a.ceil()
        assert a.ceil() - a.floor() <= 1


# ---------------------------------------------------------------------------
# Intervals and nodes
# ---------------------------------------------------------------------------

class TestIntervalProperties:
    @given(x=intervals(), y=intervals())
    @settings(max_examples=200)
    def test_multiplication_contains_products(self, x, y):
        lo, hi = (x * y).to_fractions()
        for a in x.to_fractions():
            for b in y.to_fractions():
                assert lo <= a * b <= hi

    @given(x=intervals(), y=intervals())
    def test_eclipse_is_sound(self, x, y):
        if x.eclipses(y):
            assert x.to_fractions()[1] <= y.to_fractions()[0]
        else:
            assert x.to_fractions()[1] > y.to_fractions()[0]

    @given(x=intervals())
    def test_canonicalize_contains(self, x):
        node = x.canonicalize()
        assert node.contains(x)

    @given(x=intervals())
    def test_canonicalize_is_tight(self, x):
        lo, hi = x.to_fractions()
        node_lo, node_hi = x.canonicalize().interval.to_fractions()
        unit = 2 / Fraction(2) ** x.scale
        assert node_hi - node_lo <= max(4 * (hi - lo), unit)

    @given(x=intervals())
    def test_reciprocal_sound(self, x):
        lo, hi = x.to_fractions()
        assume(lo > 0 or hi < 0)
        rlo, rhi = x.reciprocal().to_fractions()
        assert rlo <= 1 / hi <= rhi
        assert rlo <= 1 / lo <= rhi


class TestNodeProperties:
    @given(node=nodes)
    def test_children_inside_parent(self, node):
        for child in node.children():
            assert node.contains(child)
            assert child.coarsen() in (node, node.next())

    @given(node=nodes, n=integers(min_value=0, max_value=6))
    def test_coarsen_contains(self, node, n):
        assert node.coarsen(n).contains(node)

    @given(node=nodes, n=integers(min_value=0, max_value=6))
    def test_discretize_covers(self, node, n):
        tiles = node.discretize(node.scale + n)
        assert len(tiles) == 2 ** n
        assert tiles[0].left_endpoint == node.left_endpoint
        assert tiles[-1].right_endpoint == node.right_endpoint
        for a, b in zip(tiles, tiles[1:]):
            assert a.right_endpoint == b.left_endpoint

    @given(node=nodes)
    def test_round_trip_through_bounds(self, node):
        assert CanonicalNode.from_bounds(node.left_endpoint, node.right_endpoint) == node


# ---------------------------------------------------------------------------
# Reals and functions
# ---------------------------------------------------------------------------

class TestRealProperties:
    @given(value=small_fractions, n=integers(min_value=-4, max_value=60))
    def test_literal_nesting(self, value, n):
        real = ComputableReal.from_fraction(value)
        assert real.node(n).contains(real.node(n + 1))
        lo, hi = real.interval(n).to_fractions()
        assert lo <= value <= hi

    @given(value=small_fractions)
    @settings(deadline=None, max_examples=50)
    def test_polynomial_evaluation_encloses(self, value):
        f = unary_polynomial([(1, 6), (1, 5), (-1, 4), (1, 2)])
        exact = value ** 6 + value ** 5 - value ** 4 + value ** 2
        result = f.evaluate(value)
        for n in (0, 12, 30):
            lo, hi = result.interval(n).to_fractions()
            assert lo <= exact <= hi
            assert result.node(n).contains(result.node(n + 1))

    @given(value=small_fractions)
    @settings(deadline=None, max_examples=50)
    def test_image_encloses_function(self, value):
        f = unary_polynomial([(1, 6), (1, 5), (-1, 4), (1, 2)])
        node = ComputableReal.from_fraction(value).node(6)
        lo, hi = f.image(node).to_fractions()
        exact = value ** 6 + value ** 5 - value ** 4 + value ** 2
        assert lo <= exact <= hi
