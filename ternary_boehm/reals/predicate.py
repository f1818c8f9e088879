"""
Predicates
==========

Boolean tests on computable reals, each decided at a fixed precision.

Equality and order on reals are undecidable, so every comparison here is an
approximate decision at ``required_precision``: ``eq(y, n)`` holds when the
nodes of the argument and of ``y`` at precision ``n`` overlap, which is also
the case for distinct reals closer than ``2^-n``.

Predicates combine with ``~``, ``&`` and ``|``; the combination is decided at
the largest precision of its operands.
"""

from typing import Callable, Union

from ternary_boehm.codes.interval import CanonicalNode, GeneralInterval
from ternary_boehm.reals.real import ComputableReal


class Predicate:
    """A test on a real together with the precision it needs."""

    def __init__(
        self,
        test: Callable[[ComputableReal], bool],
        required_precision: int,
        description: str = "predicate",
    ):
        self._test = test
        self.required_precision = required_precision
        self.description = description

    def test(self, real) -> bool:
        return bool(self._test(ComputableReal.coerce(real)))

    __call__ = test

    # ---------- boolean algebra ----------

    def negation(self) -> 'Predicate':
        return Predicate(
            lambda x: not self._test(x),
            self.required_precision,
            f"not {self.description}",
        )

    def conjunction(self, other: 'Predicate') -> 'Predicate':
        return Predicate(
            lambda x: self._test(x) and other._test(x),
            max(self.required_precision, other.required_precision),
            f"({self.description} and {other.description})",
        )

    def disjunction(self, other: 'Predicate') -> 'Predicate':
        return Predicate(
            lambda x: self._test(x) or other._test(x),
            max(self.required_precision, other.required_precision),
            f"({self.description} or {other.description})",
        )

    __invert__ = negation
    __and__ = conjunction
    __or__ = disjunction

    # ---------- composition with functions ----------

    def through(self, function, domain: Union[CanonicalNode, GeneralInterval]) -> 'Predicate':
        """``P o F`` on inputs drawn from ``domain``.

        The required precision becomes the node precision at which the
        uniform continuity oracle of ``F`` over ``domain`` delivers outputs
        precise enough for this predicate.
        """
        uniform = function.uniform(domain)
        return Predicate(
            lambda x: self._test(uniform.evaluate(x)),
            uniform.required_precision(self.required_precision),
            f"{self.description} o {function.name}",
        )

    def __repr__(self) -> str:
        return f"<Predicate {self.description} @ {self.required_precision}>"


def eq(y, precision: int) -> Predicate:
    y = ComputableReal.coerce(y)
    return Predicate(
        lambda x: x.node(precision).intersects(y.node(precision)),
        precision,
        f"= {y.description}",
    )


def geq(y, precision: int) -> Predicate:
    y = ComputableReal.coerce(y)
    return Predicate(
        lambda x: x.approximate(precision) >= y.approximate(precision),
        precision,
        f">= {y.description}",
    )


def leq(y, precision: int) -> Predicate:
    y = ComputableReal.coerce(y)
    return Predicate(
        lambda x: x.approximate(precision) <= y.approximate(precision),
        precision,
        f"<= {y.description}",
    )
