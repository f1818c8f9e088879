"""Shared fixtures for the ternary_boehm test suite."""

import numpy as np
import pytest

from ternary_boehm.codes.interval import GeneralInterval
from ternary_boehm.reals.function import identity, unary_polynomial


@pytest.fixture
def rng():
    return np.random.default_rng(20240611)


@pytest.fixture
def x():
    return identity()


@pytest.fixture
def unit_domain():
    """[-1, 1]"""
    return GeneralInterval(-1, 1, 0)


@pytest.fixture
def wide_domain():
    """[-4, 4]"""
    return GeneralInterval(-4, 4, 0)


@pytest.fixture
def poly3():
    """x^6 + x^5 - x^4 + x^2: global minimum near -1.1959, local minimum at 0."""
    return unary_polynomial([(1, 6), (1, 5), (-1, 4), (1, 2)])


@pytest.fixture
def poly3_exact():
    return lambda v: v ** 6 + v ** 5 - v ** 4 + v ** 2
