"""
Tests for computable reals.

Validates:
  - literal approximations (integers, dyadics, fractions)
  - nesting and idempotence, including producer-backed reals
  - decimal/float display and real arithmetic operators
"""

from fractions import Fraction

import pytest

from ternary_boehm.codes.dyadic import DyadicValue
from ternary_boehm.codes.interval import CanonicalNode
from ternary_boehm.reals.real import (
    ComputableReal,
    approximate,
    to_decimal_approximation,
)


def encloses(real, n, value) -> bool:
    lo, hi = real.interval(n).to_fractions()
    return lo <= Fraction(value) <= hi


def offset_producer(value: Fraction, extra: int = 3):
    """Nodes containing ``value`` but shifted one unit left of the floor node."""
    def produce(n: int) -> CanonicalNode:
        scale = n + extra
        code = (value * Fraction(2) ** scale).__floor__() - 1
        return CanonicalNode(code, scale)
    return produce


class TestLiterals:
    def test_int(self):
        three = ComputableReal.from_int(3)
        assert three.approximate(0) == 3
        assert three.approximate(2) == 12
        assert three.approximate(-1) == 1
        assert encloses(three, -1, 3)

    def test_dyadic(self):
        real = ComputableReal.from_dyadic(DyadicValue(-3, 1))
        assert real.approximate(0) == -2
        assert encloses(real, 0, Fraction(-3, 2))

    def test_fraction_from_string(self):
        tenth = ComputableReal.from_fraction("0.1")
        assert tenth.approximate(10) == 102

    def test_negative_fraction(self):
        assert ComputableReal.from_fraction(Fraction(-1, 3)).approximate(4) == -6

    def test_from_node(self):
        real = ComputableReal.from_node(CanonicalNode(5, 3))
        assert real.approximate(3) == 5
        assert real.approximate(10) == 5 << 7

    def test_coerce(self):
        assert ComputableReal.coerce(2).approximate(0) == 2
        assert ComputableReal.coerce(Fraction(1, 2)).approximate(1) == 1
        assert ComputableReal.coerce(0.5).approximate(1) == 1
        with pytest.raises(TypeError):
            ComputableReal.coerce(object())

    def test_dyadic_literals_are_exact(self):
        assert ComputableReal.from_int(5).exact == DyadicValue(5, 0)
        assert ComputableReal.from_fraction("0.75").exact == DyadicValue(3, 2)
        assert ComputableReal.coerce(0.5).exact == DyadicValue(1, 1)
        assert ComputableReal.from_fraction(Fraction(1, 3)).exact is None
        assert (ComputableReal.from_int(1) + 1).exact is None

    def test_from_int_rejects_float(self):
        with pytest.raises(TypeError):
            ComputableReal.from_int(1.5)

    def test_needs_exactly_one_source(self):
        with pytest.raises(ValueError):
            ComputableReal()
        with pytest.raises(ValueError):
            ComputableReal(approximator=lambda n: 0, producer=lambda n: CanonicalNode(0, n))

    @pytest.mark.parametrize("value", [0, 7, -7, Fraction(1, 3), Fraction(-22, 7)])
    def test_literal_nesting(self, value):
        real = ComputableReal.coerce(value)
        for n in range(-3, 40):
            assert real.node(n).contains(real.node(n + 1))
            assert encloses(real, n, value)


class TestProducerChain:
    def test_nesting(self):
        value = Fraction(1, 3)
        real = ComputableReal.from_producer(offset_producer(value))
        for n in range(0, 60):
            assert real.node(n).contains(real.node(n + 1))
            assert encloses(real, n, value)

    def test_out_of_order_requests(self):
        value = Fraction(-5, 7)
        real = ComputableReal.from_producer(offset_producer(value))
        fine = real.approximate(40)
        coarse = real.approximate(10)
        finer = real.approximate(60)
        assert real.node(10).contains(real.node(40))
        assert real.node(40).contains(real.node(60))
        assert (real.approximate(40), real.approximate(10), real.approximate(60)) == (fine, coarse, finer)

    def test_idempotence(self):
        real = ComputableReal.from_producer(offset_producer(Fraction(2, 9)))
        assert [real.approximate(n) for n in (5, 30, 17)] == [real.approximate(n) for n in (5, 30, 17)]

    def test_node_width(self):
        real = ComputableReal.from_producer(offset_producer(Fraction(2, 9)))
        for n in (0, 8, 33):
            assert real.interval(n).width == DyadicValue(2, n)

    def test_producer_too_coarse(self):
        real = ComputableReal.from_producer(lambda n: CanonicalNode(0, n - 1))
        with pytest.raises(ArithmeticError):
            real.approximate(5)


class TestDisplay:
    def test_to_decimal_within_precision(self):
        third = ComputableReal.from_fraction(Fraction(1, 3))
        assert abs(Fraction(third.to_decimal(30)) - Fraction(1, 3)) <= Fraction(1, 2 ** 30)

    def test_module_functions(self):
        third = ComputableReal.from_fraction(Fraction(1, 3))
        assert to_decimal_approximation(third, 30) == third.to_decimal(30)
        assert approximate(third, 12) == third.approximate(12)

    def test_to_float(self):
        assert ComputableReal.from_fraction("0.1").to_float(64) == 0.1

    def test_interval_string(self):
        assert ComputableReal.from_int(0).interval_string(0) == "[0.0, 2.0]"

    def test_repr(self):
        assert "3" in repr(ComputableReal.from_int(3))


class TestArithmetic:
    def test_one_tenth(self):
        tenth = ComputableReal.from_int(1) / ComputableReal.from_int(10)
        lo, hi = tenth.interval(50).to_fractions()
        assert lo <= Fraction(1, 10) <= hi
        assert hi - lo == Fraction(2, 2 ** 50)
        assert abs(Fraction(tenth.to_decimal(50)) - Fraction(1, 10)) <= Fraction(1, 2 ** 50)

    def test_add(self):
        assert encloses(ComputableReal.from_int(2) + 3, 30, 5)

    def test_radd_rsub(self):
        two = ComputableReal.from_int(2)
        assert encloses(1 + two, 20, 3)
        assert encloses(7 - two, 20, 5)

    def test_multiply(self):
        product = ComputableReal.from_int(2) * ComputableReal.from_fraction("1.5")
        assert encloses(product, 30, 3)

    def test_division(self):
        assert encloses(1 / ComputableReal.from_int(3), 40, Fraction(1, 3))
        assert encloses(ComputableReal.from_int(3) / 4, 40, Fraction(3, 4))

    def test_negate_abs(self):
        minus = -ComputableReal.from_fraction("2.5")
        assert encloses(minus, 20, Fraction(-5, 2))
        assert encloses(abs(minus), 20, Fraction(5, 2))

    def test_power(self):
        assert encloses(ComputableReal.from_int(-2) ** 3, 20, -8)

    def test_inverse(self):
        assert encloses(ComputableReal.from_int(4).inverse(), 30, Fraction(1, 4))

    def test_function_valued_nesting(self):
        real = ComputableReal.from_int(1) / 3 + ComputableReal.from_fraction("0.7")
        for n in range(0, 50):
            assert real.node(n).contains(real.node(n + 1))
        assert encloses(real, 50, Fraction(1, 3) + Fraction(7, 10))
