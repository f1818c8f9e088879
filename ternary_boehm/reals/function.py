"""
Computable Functions
====================

An n-ary function on reals given by two pieces:

    approximate(intervals) -> interval
        A sound, inclusion-monotone interval extension: the output contains
        ``f(x)`` whenever each input contains ``x_i``.

    continuity(enclosures, q) -> precisions
        An effective modulus of continuity. If every argument interval lies
        inside its enclosure, has width ``<= 2^-p_i`` and scale ``>= p_i``,
        the output of ``approximate`` has width ``<= 2^-q`` and scale
        ``>= q``. Canonicalizing such an output yields a node at precision
        ``>= q``.

Primitives supply both pieces directly; ``Composition`` builds them from its
parts. To find the precision needed from ``f(g_1(x), ..., g_k(x))`` it
first encloses each ``g_i`` over the argument enclosures, asks ``f`` what it
needs from the ``g_i``, then asks each ``g_i`` what it needs from ``x`` and
keeps the per-argument maximum.

Primitives also carry a slope rule (``approximate_with_slope``): forward-mode
interval arithmetic on generalized derivatives, used to build centered-form
images ``f(c) + S(X) * (X - c)`` that shrink quadratically with the width of
``X``.

Usage:
    >>> x = identity()
    >>> f = 8 * x ** 10 - 6 * x ** 3 - 4 * x ** 2
    >>> f.evaluate(ComputableReal.from_int(0)).approximate(40)
    -1
"""

import logging
from fractions import Fraction
from typing import Callable, List, Sequence, Tuple, Union

from ternary_boehm.codes.dyadic import DyadicValue
from ternary_boehm.codes.interval import (
    CanonicalNode,
    DegenerateIntervalError,
    GeneralInterval,
)
from ternary_boehm.reals.real import ComputableReal

logger = logging.getLogger(__name__)

SlopePair = Tuple[GeneralInterval, GeneralInterval]
RealLike = Union[ComputableReal, DyadicValue, int, Fraction, float, str]

ZERO_SLOPE = GeneralInterval(0, 0, 0)
UNIT_SLOPE = GeneralInterval(1, 1, 0)


class PrecisionError(ArithmeticError):
    """Evaluation could not reach the requested precision within its retry budget."""


def _ceil_magnitude(interval: GeneralInterval) -> int:
    return interval.magnitude.ceil()


def _enclose(value: ComputableReal, scale: int) -> GeneralInterval:
    """``value`` at ``scale``; a point when it is a dyadic literal."""
    if value.exact is None:
        return value.interval(scale)
    point = GeneralInterval.point(value.exact)
    return point.rescale(scale) if scale > point.scale else point


class ComputableFunction:
    """Base class: an approximator plus a continuity oracle of fixed arity."""

    MAX_RETRIES = 16          # Target increases before giving up
    ENCLOSURE_STEP = 8        # Precision added to argument enclosures on degeneracy

    name = "function"

    def __init__(self, arity: int):
        if arity < 1:
            raise ValueError(f"arity must be positive, got {arity}")
        self.arity = arity

    # ---------- interface ----------

    def approximate(self, intervals: Sequence[GeneralInterval]) -> GeneralInterval:
        self._check_arity(intervals)
        return self._approximate(intervals)

    def continuity(self, enclosures: Sequence[GeneralInterval], q: int) -> List[int]:
        """Per-argument precisions sufficient for an output of width ``2^-q``."""
        self._check_arity(enclosures)
        return [max(p, 0) for p in self._continuity(enclosures, q)]

    def approximate_with_slope(self, pairs: Sequence[SlopePair]) -> SlopePair:
        self._check_arity(pairs)
        return self._slope(pairs)

    @property
    def has_slope(self) -> bool:
        return True

    def _approximate(self, intervals):
        raise NotImplementedError

    def _continuity(self, enclosures, q):
        raise NotImplementedError

    def _slope(self, pairs):
        raise NotImplementedError(f"{self.name} has no slope rule")

    def _check_arity(self, args: Sequence) -> None:
        if len(args) != self.arity:
            raise ValueError(
                f"{self.name} expects {self.arity} argument(s), got {len(args)}"
            )

    def require_unary(self, operation: str) -> None:
        if self.arity != 1:
            raise ValueError(f"{operation} requires a unary function, got arity {self.arity}")

    # ---------- evaluation ----------

    def evaluate(self, *args: RealLike) -> ComputableReal:
        """``F*``: the real ``f(args)``, evaluated lazily at each requested precision."""
        reals = [ComputableReal.coerce(a) for a in args]
        self._check_arity(reals)
        return ComputableReal.from_producer(
            lambda n: self.evaluate_node(reals, n),
            description=f"{self.name}(...)",
        )

    def evaluate_node(self, reals: Sequence[ComputableReal], n: int) -> CanonicalNode:
        """One node of precision ``>= n`` containing ``f(reals)``."""
        level = 0
        target = n
        for _ in range(self.MAX_RETRIES):
            enclosures = [x.interval(level) for x in reals]
            try:
                precisions = [max(p, level) for p in self.continuity(enclosures, target)]
                node = self.approximate(
                    [x.interval(p + 1) for x, p in zip(reals, precisions)]
                ).canonicalize()
            except DegenerateIntervalError as exc:
                logger.debug(f"{self.name}: degenerate at level {level} ({exc}), refining")
                level += self.ENCLOSURE_STEP
                continue
            if node.scale >= n:
                return node
            logger.debug(f"{self.name}: reached {node.scale} < {n}, raising target")
            target += 1
        raise PrecisionError(
            f"{self.name} could not reach precision {n} after {self.MAX_RETRIES} attempts"
        )

    def __call__(self, *args):
        if args and all(isinstance(a, ComputableFunction) for a in args):
            return compose(self, *args)
        return self.evaluate(*args)

    def uniform(self, domain: Union[CanonicalNode, GeneralInterval]) -> 'UniformEvaluation':
        return UniformEvaluation(self, domain)

    def image(self, domain: Union[CanonicalNode, GeneralInterval]) -> GeneralInterval:
        """Enclosure of ``f`` over a one-dimensional domain.

        The natural interval extension, intersected with the centered form
        when the function has a slope rule.
        """
        self.require_unary("image")
        x = domain.interval if isinstance(domain, CanonicalNode) else domain
        if not self.has_slope:
            return self.approximate([x])
        natural, slope = self.approximate_with_slope([(x, UNIT_SLOPE)])
        center = GeneralInterval.point(x.midpoint)
        centered = self.approximate([center]) + slope * (x - center)
        image = natural.intersection(centered)
        if image is None:
            raise ArithmeticError(f"{self.name}: natural and centered images are disjoint")
        return image

    def divided_difference(self, x: RealLike, precision: int) -> ComputableReal:
        """``(f(x + h) - f(x)) / h`` with ``h = 2^-precision``.

        A numerical estimate of the derivative, not an exact derivative: it
        carries no guarantee beyond being the exact value of this quotient.
        """
        self.require_unary("divided_difference")
        x = ComputableReal.coerce(x)
        h = ComputableReal.from_dyadic(DyadicValue(1, precision))
        scale = ComputableReal.from_dyadic(DyadicValue(1, -precision))
        return (self.evaluate(x + h) - self.evaluate(x)) * scale

    # ---------- algebra ----------

    def _lift(self, other) -> 'ComputableFunction':
        if isinstance(other, ComputableFunction):
            if other.arity != self.arity:
                raise ValueError(
                    f"arity mismatch: {self.arity} and {other.arity}"
                )
            return other
        return constant(self.arity, other)

    def __add__(self, other) -> 'ComputableFunction':
        return compose(add(), self, self._lift(other))

    def __radd__(self, other) -> 'ComputableFunction':
        return compose(add(), self._lift(other), self)

    def __sub__(self, other) -> 'ComputableFunction':
        return compose(subtract(), self, self._lift(other))

    def __rsub__(self, other) -> 'ComputableFunction':
        return compose(subtract(), self._lift(other), self)

    def __mul__(self, other) -> 'ComputableFunction':
        if isinstance(other, ComputableFunction):
            return compose(multiply(), self, self._lift(other))
        return compose(scalar_multiply(other), self)

    def __rmul__(self, other) -> 'ComputableFunction':
        return self * other

    def __truediv__(self, other) -> 'ComputableFunction':
        return compose(divide(), self, self._lift(other))

    def __rtruediv__(self, other) -> 'ComputableFunction':
        return compose(divide(), self._lift(other), self)

    def __neg__(self) -> 'ComputableFunction':
        return compose(negate(), self)

    def __abs__(self) -> 'ComputableFunction':
        return compose(absolute(), self)

    def __pow__(self, exponent: int) -> 'ComputableFunction':
        return compose(power(exponent), self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}/{self.arity}>"


# ═══════════════════════════════════════════════════════════════════
#  Primitives
# ═══════════════════════════════════════════════════════════════════

class Projection(ComputableFunction):
    """``(x_1, ..., x_k) -> x_index``."""

    def __init__(self, arity: int, index: int):
        super().__init__(arity)
        if not 0 <= index < arity:
            raise IndexError(f"projection index {index} out of range [0, {arity})")
        self.index = index
        self.name = f"proj{index}" if arity > 1 else "x"

    def _approximate(self, intervals):
        return intervals[self.index]

    def _continuity(self, enclosures, q):
        return [q if i == self.index else 0 for i in range(self.arity)]

    def _slope(self, pairs):
        return pairs[self.index]


class Constant(ComputableFunction):
    """The constant function at a computable real."""

    def __init__(self, arity: int, value: RealLike):
        super().__init__(arity)
        self.value = ComputableReal.coerce(value)
        self.name = f"const({self.value.description or '?'})"

    def _at(self, scale: int) -> GeneralInterval:
        return _enclose(self.value, scale)

    def _approximate(self, intervals):
        return self._at(max(x.scale for x in intervals))

    def _continuity(self, enclosures, q):
        return [q + 1] * self.arity

    def _slope(self, pairs):
        return self._at(max(v.scale for v, _ in pairs)), ZERO_SLOPE


class Negate(ComputableFunction):
    name = "neg"

    def __init__(self):
        super().__init__(1)

    def _approximate(self, intervals):
        return -intervals[0]

    def _continuity(self, enclosures, q):
        return [q]

    def _slope(self, pairs):
        value, slope = pairs[0]
        return -value, -slope


class Absolute(ComputableFunction):
    name = "abs"

    def __init__(self):
        super().__init__(1)

    def _approximate(self, intervals):
        return abs(intervals[0])

    def _continuity(self, enclosures, q):
        return [q]

    def _slope(self, pairs):
        value, slope = pairs[0]
        if value.left >= 0:
            return value, slope
        if value.right <= 0:
            return -value, -slope
        return abs(value), slope.hull(-slope)


class Add(ComputableFunction):
    name = "add"

    def __init__(self):
        super().__init__(2)

    def _approximate(self, intervals):
        return intervals[0] + intervals[1]

    def _continuity(self, enclosures, q):
        return [q + 1, q + 1]

    def _slope(self, pairs):
        (u, du), (v, dv) = pairs
        return u + v, du + dv


class Multiply(ComputableFunction):
    name = "mul"

    def __init__(self):
        super().__init__(2)

    def _approximate(self, intervals):
        return intervals[0] * intervals[1]

    def _continuity(self, enclosures, q):
        # w(XY) <= |X| w(Y) + |Y| w(X)
        bound = _ceil_magnitude(enclosures[0]) + _ceil_magnitude(enclosures[1])
        p = q + bound.bit_length()
        return [p, p]

    def _slope(self, pairs):
        (u, du), (v, dv) = pairs
        return u * v, du * v + u * dv


class Inverse(ComputableFunction):
    """``x -> 1/x``; degenerate on intervals containing zero."""

    name = "inv"

    def __init__(self):
        super().__init__(1)

    def _approximate(self, intervals):
        return intervals[0].reciprocal()

    def _continuity(self, enclosures, q):
        m = enclosures[0].mignitude
        if m.numerator == 0:
            raise DegenerateIntervalError(
                f"inverse oracle on an enclosure containing zero: {enclosures[0]}"
            )
        # 1/m <= 2^log_inv; w(1/X) <= w(X)/m^2 plus two rounding units
        log_inv = m.scale - m.bit_length() + 1
        return [q + 2 + 2 * max(0, log_inv)]

    def _slope(self, pairs):
        value, slope = pairs[0]
        r = value.reciprocal()
        return r, -(slope * r * r)


class ScalarMultiply(ComputableFunction):
    """``x -> c * x`` for a computable real ``c``."""

    def __init__(self, value: RealLike):
        super().__init__(1)
        self.value = ComputableReal.coerce(value)
        self.name = f"scale({self.value.description or '?'})"

    def _approximate(self, intervals):
        x = intervals[0]
        return x * _enclose(self.value, x.scale)

    def _continuity(self, enclosures, q):
        bound = _ceil_magnitude(self.value.interval(0)) + _ceil_magnitude(enclosures[0])
        return [q + 1 + bound.bit_length()]

    def _slope(self, pairs):
        value, slope = pairs[0]
        c = _enclose(self.value, value.scale)
        return value * c, slope * c


class Composition(ComputableFunction):
    """``h(x) = f(g_1(x), ..., g_k(x))``."""

    def __init__(self, outer: ComputableFunction, inner: Sequence[ComputableFunction]):
        if len(inner) != outer.arity:
            raise ValueError(
                f"{outer.name} takes {outer.arity} argument(s), got {len(inner)} functions"
            )
        arities = {g.arity for g in inner}
        if len(arities) != 1:
            raise ValueError(f"inner functions disagree on arity: {sorted(arities)}")
        super().__init__(arities.pop())
        self.outer = outer
        self.inner = list(inner)
        self.name = f"{outer.name}({', '.join(g.name for g in self.inner)})"

    @property
    def has_slope(self) -> bool:
        return self.outer.has_slope and all(g.has_slope for g in self.inner)

    def _approximate(self, intervals):
        return self.outer.approximate([g.approximate(intervals) for g in self.inner])

    def _continuity(self, enclosures, q):
        images = [g.approximate(enclosures) for g in self.inner]
        needed = self.outer.continuity(images, q)
        precisions = [0] * self.arity
        for g, p in zip(self.inner, needed):
            precisions = [max(a, b) for a, b in zip(precisions, g.continuity(enclosures, p))]
        return precisions

    def _slope(self, pairs):
        return self.outer.approximate_with_slope(
            [g.approximate_with_slope(pairs) for g in self.inner]
        )


class CustomFunction(ComputableFunction):
    """A function from user-supplied approximator and oracle callables."""

    def __init__(
        self,
        arity: int,
        approximator: Callable[[Sequence[GeneralInterval]], GeneralInterval],
        oracle: Callable[[Sequence[GeneralInterval], int], Sequence[int]],
        name: str = "custom",
    ):
        super().__init__(arity)
        self._approximator = approximator
        self._oracle = oracle
        self.name = name

    @property
    def has_slope(self) -> bool:
        return False

    def _approximate(self, intervals):
        return self._approximator(intervals)

    def _continuity(self, enclosures, q):
        precisions = list(self._oracle(enclosures, q))
        if len(precisions) != self.arity:
            raise ValueError(
                f"{self.name} oracle returned {len(precisions)} precisions for arity {self.arity}"
            )
        return precisions


# ═══════════════════════════════════════════════════════════════════
#  Uniform evaluation over a compact domain
# ═══════════════════════════════════════════════════════════════════

class UniformEvaluation:
    """``F_cont``: a unary function evaluated over one fixed domain.

    The oracle sees only the domain, so a single answer serves every point
    of it, and it is at least as demanding as the pointwise oracle at any
    point inside.
    """

    def __init__(self, function: ComputableFunction, domain: Union[CanonicalNode, GeneralInterval]):
        function.require_unary("uniform evaluation")
        self.function = function
        self.domain = domain.interval if isinstance(domain, CanonicalNode) else domain

    def input_precision(self, q: int) -> int:
        """Arguments of width ``2^-p`` inside the domain give outputs of width ``2^-q``."""
        return max(self.function.continuity([self.domain], q)[0], self.domain.scale)

    def required_precision(self, q: int) -> int:
        """Node precision whose nodes have images of width ``<= 2^-q``."""
        return self.input_precision(q) + 1

    def evaluate_node(self, x: ComputableReal, n: int) -> CanonicalNode:
        p = self.input_precision(n)
        argument = x.interval(p + 1).intersection(self.domain)
        if argument is None:
            raise ValueError(f"argument lies outside the domain {self.domain}")
        return self.function.approximate([argument]).canonicalize()

    def evaluate(self, x: RealLike) -> ComputableReal:
        x = ComputableReal.coerce(x)
        return ComputableReal.from_producer(
            lambda n: self.evaluate_node(x, n),
            description=f"{self.function.name}(...)",
        )

    __call__ = evaluate


# ═══════════════════════════════════════════════════════════════════
#  Constructors
# ═══════════════════════════════════════════════════════════════════

def projection(arity: int, index: int) -> ComputableFunction:
    return Projection(arity, index)


def identity() -> ComputableFunction:
    return Projection(1, 0)


def constant(arity: int, value: RealLike) -> ComputableFunction:
    return Constant(arity, value)


def negate() -> ComputableFunction:
    return Negate()


def absolute() -> ComputableFunction:
    return Absolute()


def add() -> ComputableFunction:
    return Add()


def multiply() -> ComputableFunction:
    return Multiply()


def inverse() -> ComputableFunction:
    return Inverse()


def scalar_multiply(value: RealLike) -> ComputableFunction:
    return ScalarMultiply(value)


def compose(outer: ComputableFunction, *inner: ComputableFunction) -> ComputableFunction:
    return Composition(outer, inner)


def subtract() -> ComputableFunction:
    """``(x, y) -> x - y`` as ``add(x, negate(y))``."""
    return compose(add(), projection(2, 0), compose(negate(), projection(2, 1)))


def divide() -> ComputableFunction:
    """``(x, y) -> x / y`` as ``multiply(x, inverse(y))``."""
    return compose(multiply(), projection(2, 0), compose(inverse(), projection(2, 1)))


def power(exponent: int) -> ComputableFunction:
    """``x -> x^n`` by binary splitting ``x^n = x^(n//2) * x^(n - n//2)``."""
    if exponent < 0:
        raise ValueError(f"exponent must be non-negative, got {exponent}")
    if exponent == 0:
        return constant(1, 1)
    if exponent == 1:
        return identity()
    half = exponent // 2
    return compose(multiply(), power(half), power(exponent - half))


def sum_of(functions: Sequence[ComputableFunction]) -> ComputableFunction:
    """Balanced sum of functions of equal arity."""
    if not functions:
        raise ValueError("sum of no functions")
    if len(functions) == 1:
        return functions[0]
    mid = len(functions) // 2
    return compose(add(), sum_of(functions[:mid]), sum_of(functions[mid:]))


def poly_term(arity: int, coefficient: RealLike, index: int, exponent: int) -> ComputableFunction:
    """``a * x_index^n``."""
    return compose(
        scalar_multiply(coefficient),
        compose(power(exponent), projection(arity, index)),
    )


def polynomial(arity: int, terms: Sequence[Tuple[RealLike, int, int]]) -> ComputableFunction:
    """Sum of ``(coefficient, index, exponent)`` terms."""
    return sum_of([poly_term(arity, a, i, n) for a, i, n in terms])


def unary_polynomial(terms: Sequence[Tuple[RealLike, int]]) -> ComputableFunction:
    """Sum of ``(coefficient, exponent)`` terms in one variable."""
    return polynomial(1, [(a, 0, n) for a, n in terms])
