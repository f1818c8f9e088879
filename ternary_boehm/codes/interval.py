"""
Interval Codes
==============

Two views of a binary interval.

GeneralInterval:
    ``[left / 2^scale, right / 2^scale]`` of arbitrary width. This is what
    approximators consume and produce.

CanonicalNode:
    ``[code / 2^scale, (code + 2) / 2^scale]``, a vertex of the ternary
    refinement tree. Its three children at ``scale + 1`` are

        refine_left   2k      [k,       k + 1]
        refine_mid    2k + 1  [k + 1/2, k + 3/2]
        refine_right  2k + 2  [k + 1,   k + 2]

    (in parent units). The middle child overlaps both halves, so every real
    has a node at every precision without deciding its sign at a boundary.

Interval multiplication takes the min/max of the four corner products and the
product scale is the sum of the operand scales. ``eclipses`` is the pruning
relation of the optimizer: ``A.eclipses(B)`` iff ``right(A) <= left(B)``
after both are aligned to a common scale, i.e. nothing in A exceeds anything
in B.
"""

from dataclasses import dataclass
from fractions import Fraction
from typing import Iterator, List, Optional, Tuple, Union

from ternary_boehm.codes.dyadic import DyadicValue


class DegenerateIntervalError(ArithmeticError):
    """An interval operation is undefined on this input (e.g. 1/x around 0)."""


def _shift_floor_div(exponent: int, divisor: int) -> int:
    """floor(2^exponent / divisor) for any integer exponent."""
    if exponent >= 0:
        return (1 << exponent) // divisor
    return 1 // (divisor << -exponent)


def _shift_ceil_div(exponent: int, divisor: int) -> int:
    """ceil(2^exponent / divisor) for any integer exponent."""
    if exponent >= 0:
        return -(-(1 << exponent) // divisor)
    return -(-1 // (divisor << -exponent))


@dataclass(frozen=True)
class GeneralInterval:
    """The dyadic interval ``[left / 2^scale, right / 2^scale]``."""
    left: int
    right: int
    scale: int

    def __post_init__(self):
        if self.left > self.right:
            raise ValueError(
                f"left endpoint {self.left} exceeds right endpoint {self.right}"
            )

    @classmethod
    def point(cls, value: Union[DyadicValue, int]) -> 'GeneralInterval':
        value = DyadicValue.coerce(value)
        return cls(value.numerator, value.numerator, value.scale)

    @classmethod
    def from_dyadics(cls, lo, hi) -> 'GeneralInterval':
        lo_num, hi_num, scale = DyadicValue.align(
            DyadicValue.coerce(lo), DyadicValue.coerce(hi)
        )
        return cls(lo_num, hi_num, scale)

    # ---------- endpoints ----------

    @property
    def left_endpoint(self) -> DyadicValue:
        return DyadicValue(self.left, self.scale)

    @property
    def right_endpoint(self) -> DyadicValue:
        return DyadicValue(self.right, self.scale)

    @property
    def width(self) -> DyadicValue:
        return DyadicValue(self.right - self.left, self.scale)

    @property
    def midpoint(self) -> DyadicValue:
        return DyadicValue(self.left + self.right, self.scale + 1)

    @property
    def magnitude(self) -> DyadicValue:
        """sup |x| over the interval."""
        return DyadicValue(max(abs(self.left), abs(self.right)), self.scale)

    @property
    def mignitude(self) -> DyadicValue:
        """inf |x| over the interval."""
        if self.left <= 0 <= self.right:
            return DyadicValue(0, self.scale)
        return DyadicValue(min(abs(self.left), abs(self.right)), self.scale)

    def to_fractions(self) -> Tuple[Fraction, Fraction]:
        return self.left_endpoint.to_fraction(), self.right_endpoint.to_fraction()

    # ---------- scale alignment ----------

    def rescale(self, scale: int) -> 'GeneralInterval':
        if scale < self.scale:
            raise ValueError(
                f"cannot rescale from {self.scale} down to {scale} exactly"
            )
        shift = scale - self.scale
        return GeneralInterval(self.left << shift, self.right << shift, scale)

    @staticmethod
    def align(a: 'GeneralInterval', b: 'GeneralInterval') -> Tuple['GeneralInterval', 'GeneralInterval']:
        scale = max(a.scale, b.scale)
        return a.rescale(scale), b.rescale(scale)

    # ---------- arithmetic ----------

    def __neg__(self) -> 'GeneralInterval':
        return GeneralInterval(-self.right, -self.left, self.scale)

    def negate(self) -> 'GeneralInterval':
        return -self

    def __abs__(self) -> 'GeneralInterval':
        if self.left >= 0:
            return self
        if self.right <= 0:
            return -self
        return GeneralInterval(0, max(-self.left, self.right), self.scale)

    def abs(self) -> 'GeneralInterval':
        return abs(self)

    def __add__(self, other: 'GeneralInterval') -> 'GeneralInterval':
        a, b = self.align(self, other)
        return GeneralInterval(a.left + b.left, a.right + b.right, a.scale)

    def add(self, other: 'GeneralInterval') -> 'GeneralInterval':
        return self + other

    def __sub__(self, other: 'GeneralInterval') -> 'GeneralInterval':
        return self + (-other)

    def subtract(self, other: 'GeneralInterval') -> 'GeneralInterval':
        return self - other

    def __mul__(self, other: 'GeneralInterval') -> 'GeneralInterval':
        corners = (
            self.left * other.left,
            self.left * other.right,
            self.right * other.left,
            self.right * other.right,
        )
        return GeneralInterval(min(corners), max(corners), self.scale + other.scale)

    def multiply(self, other: 'GeneralInterval') -> 'GeneralInterval':
        return self * other

    def scale_by(self, value: Union[DyadicValue, int]) -> 'GeneralInterval':
        return self * GeneralInterval.point(value)

    def reciprocal(self) -> 'GeneralInterval':
        """Outward-rounded ``1/x`` at scale ``max(scale, 0)``."""
        if self.left <= 0 <= self.right:
            raise DegenerateIntervalError(
                f"reciprocal of an interval containing zero: {self}"
            )
        out = max(self.scale, 0)
        exponent = self.scale + out
        return GeneralInterval(
            _shift_floor_div(exponent, self.right),
            _shift_ceil_div(exponent, self.left),
            out,
        )

    # ---------- set relations ----------

    def contains(self, other: Union['GeneralInterval', DyadicValue, int]) -> bool:
        if not isinstance(other, GeneralInterval):
            other = GeneralInterval.point(other)
        a, b = self.align(self, other)
        return a.left <= b.left and b.right <= a.right

    def __contains__(self, other) -> bool:
        return self.contains(other)

    def intersects(self, other: 'GeneralInterval') -> bool:
        a, b = self.align(self, other)
        return a.left <= b.right and b.left <= a.right

    def intersection(self, other: 'GeneralInterval') -> Optional['GeneralInterval']:
        a, b = self.align(self, other)
        left, right = max(a.left, b.left), min(a.right, b.right)
        if left > right:
            return None
        return GeneralInterval(left, right, a.scale)

    def hull(self, other: 'GeneralInterval') -> 'GeneralInterval':
        a, b = self.align(self, other)
        return GeneralInterval(min(a.left, b.left), max(a.right, b.right), a.scale)

    def eclipses(self, other: 'GeneralInterval') -> bool:
        """Every value of ``self`` is <= every value of ``other``."""
        a, b = self.align(self, other)
        return a.right <= b.left

    # ---------- canonical form ----------

    def canonicalize(self) -> 'CanonicalNode':
        """The canonical node, coarsest-first from the width estimate, containing this interval."""
        k = max(0, (self.right - self.left).bit_length() - 2)
        while True:
            code = self.left >> k
            if self.right <= (code + 2) << k:
                return CanonicalNode(code, self.scale - k)
            k += 1

    def __str__(self) -> str:
        return f"[{self.left}, {self.right}]/2^{self.scale}"


@dataclass(frozen=True)
class CanonicalNode:
    """The width-2 node ``[code / 2^scale, (code + 2) / 2^scale]``."""
    code: int
    scale: int

    @classmethod
    def from_bounds(cls, lo, hi) -> 'CanonicalNode':
        return GeneralInterval.from_dyadics(lo, hi).canonicalize()

    @property
    def interval(self) -> GeneralInterval:
        return GeneralInterval(self.code, self.code + 2, self.scale)

    @property
    def left_endpoint(self) -> DyadicValue:
        return DyadicValue(self.code, self.scale)

    @property
    def right_endpoint(self) -> DyadicValue:
        return DyadicValue(self.code + 2, self.scale)

    @property
    def midpoint(self) -> DyadicValue:
        return DyadicValue(self.code + 1, self.scale)

    # ---------- tree navigation ----------

    def refine_left(self) -> 'CanonicalNode':
        return CanonicalNode(2 * self.code, self.scale + 1)

    def refine_mid(self) -> 'CanonicalNode':
        return CanonicalNode(2 * self.code + 1, self.scale + 1)

    def refine_right(self) -> 'CanonicalNode':
        return CanonicalNode(2 * self.code + 2, self.scale + 1)

    def children(self) -> Tuple['CanonicalNode', 'CanonicalNode', 'CanonicalNode']:
        return self.refine_left(), self.refine_mid(), self.refine_right()

    def coarsen(self, n: int = 1) -> 'CanonicalNode':
        """The ancestor ``n`` levels up whose interval contains this node."""
        if n < 0:
            raise ValueError("coarsening count must be non-negative")
        return CanonicalNode(self.code >> n, self.scale - n)

    def lowest_left(self, n: int) -> 'CanonicalNode':
        """Leftmost descendant ``n`` levels down."""
        return CanonicalNode(self.code << n, self.scale + n)

    def lowest_right(self, n: int) -> 'CanonicalNode':
        """Rightmost descendant ``n`` levels down."""
        return CanonicalNode(((self.code + 2) << n) - 2, self.scale + n)

    def next(self) -> 'CanonicalNode':
        return CanonicalNode(self.code + 2, self.scale)

    def prev(self) -> 'CanonicalNode':
        return CanonicalNode(self.code - 2, self.scale)

    def grid_size(self, precision: int) -> int:
        if precision < self.scale:
            raise ValueError(
                f"precision {precision} is coarser than the node scale {self.scale}"
            )
        return 1 << (precision - self.scale)

    def iter_discretize(self, precision: int) -> Iterator['CanonicalNode']:
        """Adjacent nodes at ``precision`` tiling this node, left to right."""
        self.grid_size(precision)
        n = precision - self.scale
        first = self.lowest_left(n).code
        last = self.lowest_right(n).code
        for code in range(first, last + 1, 2):
            yield CanonicalNode(code, precision)

    def discretize(self, precision: int) -> List['CanonicalNode']:
        return list(self.iter_discretize(precision))

    # ---------- relations ----------

    def contains(self, other) -> bool:
        if isinstance(other, CanonicalNode):
            other = other.interval
        return self.interval.contains(other)

    def __contains__(self, other) -> bool:
        return self.contains(other)

    def intersects(self, other) -> bool:
        if isinstance(other, CanonicalNode):
            other = other.interval
        return self.interval.intersects(other)

    def eclipses(self, other) -> bool:
        if isinstance(other, CanonicalNode):
            other = other.interval
        return self.interval.eclipses(other)

    def __str__(self) -> str:
        return f"node({self.code} @ {self.scale})"
