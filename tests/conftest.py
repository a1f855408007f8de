"""Pytest configuration for tiletracer tests.

Provides a seeded random source, since every sampling routine takes the
generator as an argument instead of using global state.
"""

import random

import pytest


@pytest.fixture
def rng():
    """A fresh, deterministically seeded generator for each test."""
    return random.Random(42)


def approx_vec(v, expected, abs_tol=1e-9):
    """Compare a Vector3 with an (x, y, z) tuple component-wise."""
    return tuple(v) == pytest.approx(tuple(expected), abs=abs_tol)
