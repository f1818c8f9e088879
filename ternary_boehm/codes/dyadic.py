"""
Dyadic Values
=============

Exact binary rationals ``numerator / 2**scale``.

Every arithmetic operation works on the (numerator, scale) pair directly, so
nothing is ever rounded. Scales are aligned by shifting the coarser operand
left, which is exact.

Tree navigation:
    refine_left   (n, s) -> (2n, s + 1)        same value, finer scale
    refine_right  (n, s) -> (2n + 1, s + 1)    half a unit to the right
    coarsen       (n, s) -> (n >> 1, s - 1)    floor at the coarser scale

Coarsening is floor division. Because ``>>`` floors for negative integers as
well, ``coarsen(refine_left(x)) == x`` and ``coarsen(refine_right(x)) == x``
hold for every ``x``, odd negative numerators included.

Usage:
    >>> half = DyadicValue(1, 1)
    >>> half + DyadicValue(1, 2)
    DyadicValue(numerator=3, scale=2)
"""

from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from functools import total_ordering
from typing import Tuple, Union


@total_ordering
@dataclass(frozen=True, eq=False)
class DyadicValue:
    """The binary rational ``numerator / 2**scale``."""
    numerator: int
    scale: int

    @classmethod
    def from_int(cls, value: int) -> 'DyadicValue':
        return cls(int(value), 0)

    @classmethod
    def coerce(cls, value: Union['DyadicValue', int]) -> 'DyadicValue':
        if isinstance(value, DyadicValue):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value, 0)
        raise TypeError(f"cannot interpret {value!r} as a dyadic value")

    # ---------- alignment ----------

    def rescale(self, scale: int) -> 'DyadicValue':
        """Express the same value at a finer (or equal) scale."""
        if scale < self.scale:
            raise ValueError(
                f"cannot rescale from {self.scale} down to {scale} exactly"
            )
        return DyadicValue(self.numerator << (scale - self.scale), scale)

    @staticmethod
    def align(a: 'DyadicValue', b: 'DyadicValue') -> Tuple[int, int, int]:
        """Numerators of ``a`` and ``b`` at their common (finer) scale."""
        scale = max(a.scale, b.scale)
        return (
            a.numerator << (scale - a.scale),
            b.numerator << (scale - b.scale),
            scale,
        )

    # ---------- arithmetic ----------

    def __neg__(self) -> 'DyadicValue':
        return DyadicValue(-self.numerator, self.scale)

    def negate(self) -> 'DyadicValue':
        return -self

    def __add__(self, other) -> 'DyadicValue':
        other = self.coerce(other)
        a, b, scale = self.align(self, other)
        return DyadicValue(a + b, scale)

    __radd__ = __add__

    def add(self, other) -> 'DyadicValue':
        return self + other

    def __sub__(self, other) -> 'DyadicValue':
        return self + (-self.coerce(other))

    def __rsub__(self, other) -> 'DyadicValue':
        return self.coerce(other) - self

    def subtract(self, other) -> 'DyadicValue':
        return self - other

    def __mul__(self, other) -> 'DyadicValue':
        other = self.coerce(other)
        return DyadicValue(self.numerator * other.numerator, self.scale + other.scale)

    __rmul__ = __mul__

    def multiply(self, other) -> 'DyadicValue':
        return self * other

    def __abs__(self) -> 'DyadicValue':
        return DyadicValue(abs(self.numerator), self.scale)

    def min(self, other) -> 'DyadicValue':
        other = self.coerce(other)
        return self if self.compare(other) <= 0 else other

    def max(self, other) -> 'DyadicValue':
        other = self.coerce(other)
        return self if self.compare(other) >= 0 else other

    # ---------- comparison ----------

    def compare(self, other) -> int:
        """Return -1, 0 or 1 as ``self`` is below, equal to or above ``other``."""
        a, b, _ = self.align(self, self.coerce(other))
        return (a > b) - (a < b)

    def __eq__(self, other) -> bool:
        if not isinstance(other, (DyadicValue, int)) or isinstance(other, bool):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other) -> bool:
        if not isinstance(other, (DyadicValue, int)) or isinstance(other, bool):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash(self.to_fraction())

    def sign(self) -> int:
        return (self.numerator > 0) - (self.numerator < 0)

    def bit_length(self) -> int:
        """Bits in the numerator; with ``scale`` this bounds ``|x| < 2^(bits - scale)``."""
        return self.numerator.bit_length()

    # ---------- tree navigation ----------

    def refine_left(self, n: int = 1) -> 'DyadicValue':
        if n < 0:
            raise ValueError("refinement count must be non-negative")
        return DyadicValue(self.numerator << n, self.scale + n)

    def refine_right(self, n: int = 1) -> 'DyadicValue':
        if n < 0:
            raise ValueError("refinement count must be non-negative")
        # n-fold (2k + 1): k * 2^n + (2^n - 1)
        return DyadicValue(
            (self.numerator << n) + (1 << n) - 1, self.scale + n
        )

    def refine(self, n: int = 1) -> 'DyadicValue':
        return self.refine_left(n)

    def coarsen(self, n: int = 1) -> 'DyadicValue':
        if n < 0:
            raise ValueError("coarsening count must be non-negative")
        return DyadicValue(self.numerator >> n, self.scale - n)

    @property
    def is_intermediary(self) -> bool:
        """Odd numerator: the value sits between two codes of the coarser scale."""
        return self.numerator & 1 == 1

    # ---------- conversion ----------

    def to_fraction(self) -> Fraction:
        if self.scale >= 0:
            return Fraction(self.numerator, 1 << self.scale)
        return Fraction(self.numerator << -self.scale)

    def to_float(self) -> float:
        return float(self.to_fraction())

    def to_decimal(self) -> Decimal:
        """Exact decimal expansion (``k / 2^s == k * 5^s / 10^s``)."""
        if self.scale <= 0:
            return Decimal(self.numerator << -self.scale)
        return Decimal(f"{self.numerator * 5 ** self.scale}E-{self.scale}")

    def floor(self) -> int:
        if self.scale <= 0:
            return self.numerator << -self.scale
        return self.numerator >> self.scale

    def ceil(self) -> int:
        return -((-self).floor())

    def __float__(self) -> float:
        return self.to_float()

    def __str__(self) -> str:
        return f"{self.numerator}/2^{self.scale}"


ZERO = DyadicValue(0, 0)
ONE = DyadicValue(1, 0)
