"""Tests for random source helpers."""
from __future__ import annotations

import numpy as np
import pytest

from boxaug.seed import create_rng, spawn_rngs


def test_create_rng_reproducible():
    """Test that the same seed gives the same sequence."""
    arr1 = create_rng(42).uniform(size=5)
    arr2 = create_rng(42).uniform(size=5)
    np.testing.assert_array_equal(arr1, arr2)


def test_create_rng_different_seeds():
    """Test that different seeds produce different results."""
    arr1 = create_rng(42).uniform(size=5)
    arr2 = create_rng(123).uniform(size=5)
    assert not np.allclose(arr1, arr2)


def test_spawn_rngs_independent_streams():
    """Test that worker generators differ from each other."""
    rngs = spawn_rngs(42, 3)
    assert len(rngs) == 3

    draws = [r.uniform(size=4) for r in rngs]
    assert not np.allclose(draws[0], draws[1])
    assert not np.allclose(draws[1], draws[2])


def test_spawn_rngs_reproducible():
    """Test that spawning with the same seed replays every worker stream."""
    first = [r.integers(0, 1000, size=5) for r in spawn_rngs(7, 2)]
    second = [r.integers(0, 1000, size=5) for r in spawn_rngs(7, 2)]
    for a, b in zip(first, second):
        np.testing.assert_array_equal(a, b)


def test_spawn_rngs_rejects_negative_count():
    with pytest.raises(ValueError):
        spawn_rngs(0, -1)
