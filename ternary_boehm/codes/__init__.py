"""
Interval Codes
==============

Exact dyadic values and the two interval views built on them: general
intervals for arithmetic and canonical width-2 nodes of the ternary
refinement tree.
"""

from ternary_boehm.codes.dyadic import DyadicValue, ONE, ZERO
from ternary_boehm.codes.interval import (
    CanonicalNode,
    DegenerateIntervalError,
    GeneralInterval,
)

__all__ = [
    'DyadicValue',
    'ONE',
    'ZERO',
    'CanonicalNode',
    'DegenerateIntervalError',
    'GeneralInterval',
]
