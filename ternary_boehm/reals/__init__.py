"""
Computable Reals, Functions and Predicates
==========================================

Reals are nested families of canonical nodes. Functions pair an interval
approximator with a continuity oracle so that compositions can be evaluated
to any requested precision. Predicates decide comparisons at a fixed
precision.
"""

from ternary_boehm.reals.real import (
    ComputableReal,
    approximate,
    to_decimal_approximation,
)
from ternary_boehm.reals.function import (
    ComputableFunction,
    Composition,
    CustomFunction,
    PrecisionError,
    UniformEvaluation,
    absolute,
    add,
    compose,
    constant,
    divide,
    identity,
    inverse,
    multiply,
    negate,
    poly_term,
    polynomial,
    power,
    projection,
    scalar_multiply,
    subtract,
    sum_of,
    unary_polynomial,
)
from ternary_boehm.reals.predicate import Predicate, eq, geq, leq

__all__ = [
    'ComputableReal',
    'approximate',
    'to_decimal_approximation',
    'ComputableFunction',
    'Composition',
    'CustomFunction',
    'PrecisionError',
    'UniformEvaluation',
    'absolute',
    'add',
    'compose',
    'constant',
    'divide',
    'identity',
    'inverse',
    'multiply',
    'negate',
    'poly_term',
    'polynomial',
    'power',
    'projection',
    'scalar_multiply',
    'subtract',
    'sum_of',
    'unary_polynomial',
    'Predicate',
    'eq',
    'geq',
    'leq',
]
