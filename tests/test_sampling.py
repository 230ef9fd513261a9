"""Tests for weighted random selection."""
from __future__ import annotations

import numpy as np
import pytest
from hypothesis import given, strategies as st

from boxaug.errors import InvalidProbabilityError
from boxaug.sampling import (
    bernoulli,
    binary_probs,
    choose_uniform,
    coin_flip,
    roll_weighted_die,
)


@pytest.mark.parametrize("probs", [
    [1.0],
    [0.2, 0.8],
    [3, 1, 1, 5],
    [0.0, 0.0, 2.0],
])
def test_roll_weighted_die_returns_valid_index(probs):
    """Test that every draw is a valid index."""
    rng = np.random.default_rng(0)
    for _ in range(500):
        idx = roll_weighted_die(probs, rng)
        assert 0 <= idx < len(probs)


def test_roll_weighted_die_frequencies_converge():
    """Test empirical frequencies approach p[i] / sum(p)."""
    rng = np.random.default_rng(123)
    probs = [1.0, 2.0, 7.0]
    n = 20000

    counts = np.bincount(
        [roll_weighted_die(probs, rng) for _ in range(n)],
        minlength=len(probs),
    )

    np.testing.assert_allclose(counts / n, np.array(probs) / sum(probs), atol=0.02)


def test_roll_weighted_die_never_picks_zero_weight():
    """Test that zero-weight outcomes are never selected."""
    rng = np.random.default_rng(7)
    draws = {roll_weighted_die([0.0, 1.0, 0.0], rng) for _ in range(1000)}
    assert draws == {1}


def test_roll_weighted_die_is_reproducible():
    """Test that a seeded generator replays the same outcomes."""
    probs = [0.1, 0.3, 0.6]
    rng1 = np.random.default_rng(42)
    rng2 = np.random.default_rng(42)

    seq1 = [roll_weighted_die(probs, rng1) for _ in range(50)]
    seq2 = [roll_weighted_die(probs, rng2) for _ in range(50)]

    assert seq1 == seq2


@pytest.mark.parametrize("probs", [
    [],
    [0.0, 0.0],
    [-0.5, 1.0],
    [float('nan'), 1.0],
    [[0.5, 0.5]],
])
def test_roll_weighted_die_rejects_degenerate_vectors(probs):
    """Test that degenerate probability vectors are configuration errors."""
    with pytest.raises(InvalidProbabilityError):
        roll_weighted_die(probs, np.random.default_rng(0))


def test_invalid_probability_is_value_error():
    """Test that config errors can be caught as ValueError."""
    with pytest.raises(ValueError):
        roll_weighted_die([], np.random.default_rng(0))


def test_binary_probs():
    """Test gate vector layout: index 1 means apply."""
    assert binary_probs(0.25) == (0.75, 0.25)
    with pytest.raises(InvalidProbabilityError):
        binary_probs(1.5)


def test_bernoulli_extremes():
    """Test that prob 0 never fires and prob 1 always fires."""
    rng = np.random.default_rng(0)
    assert not any(bernoulli(0.0, rng) for _ in range(500))
    assert all(bernoulli(1.0, rng) for _ in range(500))


def test_coin_flip_is_fair():
    """Test that coin_flip is roughly balanced."""
    rng = np.random.default_rng(5)
    heads = sum(coin_flip(rng) for _ in range(10000))
    assert 4700 < heads < 5300


def test_choose_uniform():
    """Test uniform choice returns members and rejects empty input."""
    rng = np.random.default_rng(1)
    options = ('a', 'b', 'c')
    picks = {choose_uniform(options, rng) for _ in range(300)}
    assert picks == set(options)

    with pytest.raises(InvalidProbabilityError):
        choose_uniform((), rng)


def test_roll_weighted_die_consumes_one_draw():
    """Test that each roll consumes exactly one uniform draw."""
    rng = np.random.default_rng(9)
    reference = np.random.default_rng(9)

    roll_weighted_die([0.5, 0.5], rng)
    reference.uniform(0.0, 1.0)

    assert rng.uniform() == reference.uniform()


class _FixedDraw:
    """Generator stand-in whose uniform() always returns the same value."""

    def __init__(self, value: float):
        self.value = value

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        return self.value


@pytest.mark.parametrize("probs, draw, expected", [
    ([0.5, 0.5], 0.5, 0),  # exact boundary goes to the lower index
    ([0.5, 0.5], 0.5000001, 1),
    ([1.0, 2.0, 7.0], 3.0, 1),
    ([0.0, 0.0, 2.0], 0.0, 2),  # zero draw skips leading zero weights
    ([1.0, 0.0, 0.0], 1.0, 0),  # draw at the total stays on the last positive weight
    ([0.0, 1.0], 0.0, 1),
])
def test_roll_weighted_die_boundaries(probs, draw, expected):
    """Test that the draw picks the smallest index with cumulative sum >= draw."""
    assert roll_weighted_die(probs, _FixedDraw(draw)) == expected


# Property-based tests


@given(
    probs=st.lists(
        st.floats(min_value=0.0, max_value=10.0, allow_subnormal=False),
        min_size=1,
        max_size=8,
    ).filter(lambda p: sum(p) > 0),
    seed=st.integers(min_value=0, max_value=2**32 - 1),
)
def test_roll_lands_on_positive_weight(probs: list[float], seed: int):
    """Property: Every draw is a valid index with positive weight."""
    idx = roll_weighted_die(probs, np.random.default_rng(seed))
    assert 0 <= idx < len(probs)
    assert probs[idx] > 0
