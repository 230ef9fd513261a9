"""Weighted random selection shared by every stochastic transform."""
from __future__ import annotations

from typing import Optional, Sequence, TypeVar

import numpy as np

from .errors import InvalidProbabilityError

T = TypeVar('T')


def roll_weighted_die(
    probabilities: Sequence[float],
    rng: Optional[np.random.Generator] = None,
) -> int:
    """
    Draw an outcome index from a (not necessarily normalized) weight vector.

    One uniform draw in [0, total) selects the smallest index whose running
    cumulative sum is >= the draw (binary search). Zero-weight outcomes are
    never returned.

    Args:
        probabilities: Non-negative weights with positive total
        rng: Random generator (default: fresh unseeded generator)

    Returns:
        Index in [0, len(probabilities))

    Raises:
        InvalidProbabilityError: If the vector is empty, has negative or
            non-finite entries, or sums to zero
    """
    if rng is None:
        rng = np.random.default_rng()

    weights = np.asarray(probabilities, dtype=np.float64)
    if weights.ndim != 1 or weights.size == 0:
        raise InvalidProbabilityError("Probability vector must be a non-empty 1-D sequence")
    if not np.all(np.isfinite(weights)) or np.any(weights < 0):
        raise InvalidProbabilityError(
            f"Probabilities must be finite and non-negative, got {list(probabilities)}"
        )

    cumulative = np.cumsum(weights)
    total = cumulative[-1]
    if total <= 0:
        raise InvalidProbabilityError(
            f"Probabilities must sum to a positive value, got {list(probabilities)}"
        )

    val = rng.uniform(0.0, total)
    index = int(np.searchsorted(cumulative, val, side='left'))
    # A zero draw can land on leading zero weights; move to the first positive one
    positive = np.flatnonzero(weights)
    return int(positive[np.searchsorted(positive, index, side='left')])


def binary_probs(prob: float) -> tuple[float, float]:
    """Gate vector [1 - prob, prob] where index 1 means apply."""
    if not 0.0 <= prob <= 1.0:
        raise InvalidProbabilityError(f"prob must be in [0, 1], got {prob}")
    return (1.0 - prob, prob)


def bernoulli(prob: float, rng: Optional[np.random.Generator] = None) -> bool:
    """Yes/no decision that fires with probability ``prob``."""
    return roll_weighted_die(binary_probs(prob), rng) == 1


def coin_flip(rng: Optional[np.random.Generator] = None) -> bool:
    """Fair choice between two mutually exclusive variants."""
    return roll_weighted_die((0.5, 0.5), rng) == 1


def choose_uniform(options: Sequence[T], rng: Optional[np.random.Generator] = None) -> T:
    """Pick one option with equal weight through the weighted die."""
    if not options:
        raise InvalidProbabilityError("Cannot choose from an empty sequence")
    n = len(options)
    return options[roll_weighted_die([1.0 / n] * n, rng)]
