"""
Computable Reals
================

A ``ComputableReal`` is a consistent family of canonical nodes, one per
requested precision ``n``: ``approximate(n)`` is an integer ``k`` such that
the true value lies in ``[k / 2^n, (k + 2) / 2^n]``, and the node at ``n + 1``
always lies inside the node at ``n``.

Two sources of approximations:

    Literals (integers, dyadics, fractions):
        ``k = floor(v * 2^n)``. Flooring is naturally nested.

    Producers (function evaluations):
        a producer maps ``n`` to some canonical node of scale ``>= n`` that
        contains the value. Independent producer calls are not nested with
        each other, so the real keeps a refinement chain: the first node is
        the base, every coarser precision is its floor coarsening, and every
        finer precision is reached by stepping down the ternary tree, at each
        level choosing a child that contains a fresh producer enclosure.
        Repeated calls at one precision therefore return the same integer.

Usage:
    >>> tenth = ComputableReal.from_int(1) / ComputableReal.from_int(10)
    >>> tenth.to_float(64)
    0.1
"""

import math
from decimal import Decimal
from fractions import Fraction
from typing import Callable, List, Optional, Union

from ternary_boehm.codes.dyadic import DyadicValue
from ternary_boehm.codes.interval import CanonicalNode, GeneralInterval


Producer = Callable[[int], CanonicalNode]


class _RefinementChain:
    """Memoized nested nodes for a producer-backed real."""

    def __init__(self, producer: Producer):
        self._producer = producer
        self._base_scale: Optional[int] = None
        self._codes: List[int] = []

    @property
    def depth(self) -> int:
        return self._base_scale + len(self._codes) - 1

    def code(self, n: int) -> int:
        if self._base_scale is None:
            node = self._fresh(n)
            self._base_scale = node.scale
            self._codes.append(node.code)
        if n <= self._base_scale:
            return self._codes[0] >> (self._base_scale - n)
        if n > self.depth:
            self._descend(n)
        return self._codes[n - self._base_scale]

    def _fresh(self, n: int) -> CanonicalNode:
        node = self._producer(n)
        if node.scale < n:
            raise ArithmeticError(
                f"producer returned a node at scale {node.scale} for precision {n}"
            )
        return node

    def _descend(self, n: int) -> None:
        # The fresh node has width <= 2^-n, so on every level up to n its
        # overlap with the current node fits inside one of three children.
        target = self._fresh(n + 1).interval
        level = self.depth
        code = self._codes[-1]
        while level < n:
            overlap = CanonicalNode(code, level).interval.intersection(target)
            if overlap is None:
                raise ArithmeticError(
                    f"enclosure {target} left the node {CanonicalNode(code, level)}"
                )
            unit = overlap.left >> (overlap.scale - level - 1)
            code = min(max(unit, 2 * code), 2 * code + 2)
            level += 1
            self._codes.append(code)


class ComputableReal:
    """A real number approximable to any precision with nested nodes."""

    def __init__(
        self,
        approximator: Optional[Callable[[int], int]] = None,
        producer: Optional[Producer] = None,
        description: str = "",
    ):
        if (approximator is None) == (producer is None):
            raise ValueError("exactly one of approximator or producer is required")
        self._approximator = approximator
        self._chain = _RefinementChain(producer) if producer is not None else None
        self.description = description
        self.exact: Optional[DyadicValue] = None    # Set for dyadic literals

    # ---------- construction ----------

    @classmethod
    def from_fraction(cls, value) -> 'ComputableReal':
        """Exact rational literal; accepts anything ``Fraction`` does (e.g. ``"0.1"``)."""
        v = Fraction(value)
        real = cls(
            approximator=lambda n: math.floor(v * Fraction(2) ** n),
            description=str(v),
        )
        d = v.denominator
        if d & (d - 1) == 0:
            real.exact = DyadicValue(v.numerator, d.bit_length() - 1)
        return real

    @classmethod
    def from_int(cls, value: int) -> 'ComputableReal':
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected an int, got {type(value).__name__}")
        return cls.from_dyadic(DyadicValue(value, 0))

    @classmethod
    def from_dyadic(cls, value: DyadicValue) -> 'ComputableReal':
        def approximate(n: int) -> int:
            shift = n - value.scale
            if shift >= 0:
                return value.numerator << shift
            return value.numerator >> -shift
        real = cls(approximator=approximate, description=str(value))
        real.exact = value
        return real

    @classmethod
    def from_node(cls, node: CanonicalNode) -> 'ComputableReal':
        """The dyadic real at the node's left endpoint."""
        return cls.from_dyadic(node.left_endpoint)

    @classmethod
    def from_producer(cls, producer: Producer, description: str = "") -> 'ComputableReal':
        return cls(producer=producer, description=description)

    @classmethod
    def coerce(cls, value) -> 'ComputableReal':
        if isinstance(value, ComputableReal):
            return value
        if isinstance(value, DyadicValue):
            return cls.from_dyadic(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return cls.from_int(value)
        if isinstance(value, (Fraction, str, float)):
            # floats are taken at their exact binary value
            return cls.from_fraction(value)
        raise TypeError(f"cannot interpret {value!r} as a computable real")

    # ---------- approximation ----------

    def approximate(self, n: int) -> int:
        if self._chain is not None:
            return self._chain.code(n)
        return self._approximator(n)

    approx = approximate

    def node(self, n: int) -> CanonicalNode:
        return CanonicalNode(self.approximate(n), n)

    def interval(self, n: int) -> GeneralInterval:
        return self.node(n).interval

    def to_decimal(self, n: int) -> Decimal:
        """Midpoint of the node at ``n``; within ``2^-n`` of the value."""
        return self.node(n).midpoint.to_decimal()

    def to_float(self, n: int = 60) -> float:
        return self.node(n).midpoint.to_float()

    def interval_string(self, n: int) -> str:
        lo, hi = self.interval(n).to_fractions()
        return f"[{float(lo)!r}, {float(hi)!r}]"

    # ---------- arithmetic ----------

    def _binary(self, factory, other, reverse=False) -> 'ComputableReal':
        other = ComputableReal.coerce(other)
        args = (other, self) if reverse else (self, other)
        return factory().evaluate(*args)

    def __add__(self, other) -> 'ComputableReal':
        from ternary_boehm.reals.function import add
        return self._binary(add, other)

    def __radd__(self, other) -> 'ComputableReal':
        from ternary_boehm.reals.function import add
        return self._binary(add, other, reverse=True)

    def __sub__(self, other) -> 'ComputableReal':
        from ternary_boehm.reals.function import subtract
        return self._binary(subtract, other)

    def __rsub__(self, other) -> 'ComputableReal':
        from ternary_boehm.reals.function import subtract
        return self._binary(subtract, other, reverse=True)

    def __mul__(self, other) -> 'ComputableReal':
        from ternary_boehm.reals.function import multiply
        return self._binary(multiply, other)

    def __rmul__(self, other) -> 'ComputableReal':
        from ternary_boehm.reals.function import multiply
        return self._binary(multiply, other, reverse=True)

    def __truediv__(self, other) -> 'ComputableReal':
        from ternary_boehm.reals.function import divide
        return self._binary(divide, other)

    def __rtruediv__(self, other) -> 'ComputableReal':
        from ternary_boehm.reals.function import divide
        return self._binary(divide, other, reverse=True)

    def __neg__(self) -> 'ComputableReal':
        from ternary_boehm.reals.function import negate
        return negate().evaluate(self)

    def __abs__(self) -> 'ComputableReal':
        from ternary_boehm.reals.function import absolute
        return absolute().evaluate(self)

    def __pow__(self, exponent: int) -> 'ComputableReal':
        from ternary_boehm.reals.function import power
        return power(exponent).evaluate(self)

    def inverse(self) -> 'ComputableReal':
        from ternary_boehm.reals.function import inverse
        return inverse().evaluate(self)

    def __repr__(self) -> str:
        if self.description:
            return f"ComputableReal({self.description})"
        return f"ComputableReal(~{self.to_decimal(32):.10f})"


def to_decimal_approximation(real: ComputableReal, precision: int) -> Decimal:
    return real.to_decimal(precision)


def approximate(real: ComputableReal, precision: int) -> int:
    return real.approximate(precision)
