"""
ternary_boehm: Exact Real Computation over Ternary Boehm Codes
==============================================================

Every real is a nested family of dyadic intervals, one per requested
precision, so arithmetic and function evaluation reach any caller-specified
accuracy with a proven error bound.

Core Components:
    - codes: dyadic values, general intervals and canonical tree nodes
    - reals: computable reals, computable functions with continuity oracles,
      predicates
    - search: grid and semi-decidable search, eclipse-pruning optimization

Usage:
    >>> from ternary_boehm import ComputableReal, identity, minimize, GeneralInterval
    >>> tenth = ComputableReal.from_int(1) / 10
    >>> x = identity()
    >>> result = minimize(x ** 6 + x ** 5 - x ** 4 + x ** 2, GeneralInterval(-4, 4, 0), 30)
    >>> round(result.argument.to_float(), 3)
    -1.196
"""

__version__ = "1.0.0"
__author__ = "ternary-boehm developers"

from ternary_boehm.codes import (
    CanonicalNode,
    DegenerateIntervalError,
    DyadicValue,
    GeneralInterval,
)
from ternary_boehm.reals import (
    ComputableFunction,
    ComputableReal,
    CustomFunction,
    PrecisionError,
    Predicate,
    absolute,
    add,
    approximate,
    compose,
    constant,
    divide,
    eq,
    geq,
    identity,
    inverse,
    leq,
    multiply,
    negate,
    poly_term,
    polynomial,
    power,
    projection,
    scalar_multiply,
    subtract,
    sum_of,
    to_decimal_approximation,
    unary_polynomial,
)
from ternary_boehm.search import (
    CancellationToken,
    Limits,
    NaiveOptimizer,
    OptimizationResult,
    OptimizationStatus,
    Optimizer,
    SearchEngine,
    SearchResult,
    SearchStatus,
    image_intersects,
    maximize,
    minimize,
    search,
)

__all__ = [
    'CanonicalNode',
    'DegenerateIntervalError',
    'DyadicValue',
    'GeneralInterval',
    'ComputableFunction',
    'ComputableReal',
    'CustomFunction',
    'PrecisionError',
    'Predicate',
    'absolute',
    'add',
    'approximate',
    'compose',
    'constant',
    'divide',
    'eq',
    'geq',
    'identity',
    'inverse',
    'leq',
    'multiply',
    'negate',
    'poly_term',
    'polynomial',
    'power',
    'projection',
    'scalar_multiply',
    'subtract',
    'sum_of',
    'to_decimal_approximation',
    'unary_polynomial',
    'CancellationToken',
    'Limits',
    'NaiveOptimizer',
    'OptimizationResult',
    'OptimizationStatus',
    'Optimizer',
    'SearchEngine',
    'SearchResult',
    'SearchStatus',
    'image_intersects',
    'maximize',
    'minimize',
    'search',
]
