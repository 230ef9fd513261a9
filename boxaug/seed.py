from __future__ import annotations

import numpy as np


def create_rng(seed: int | None = None) -> np.random.Generator:
    """
    Create the random source consumed by every stochastic transform.

    For a fixed seed and a fixed configuration, the full sequence of
    decisions (effect gates, ordering draws, magnitudes) is reproducible.

    Args:
        seed: Random seed value (None = nondeterministic)

    Returns:
        NumPy random generator

    Example:
        >>> from boxaug import create_rng, apply_noise, NoiseConfig
        >>>
        >>> rng = create_rng(42)
        >>> out = apply_noise(img, NoiseConfig(gauss_blur=True, prob=0.5), rng=rng)
    """
    return np.random.default_rng(seed)


def spawn_rngs(seed: int | None, n: int) -> list[np.random.Generator]:
    """
    Derive independent generators for parallel workers.

    Each worker owns one generator, so no locking is needed. Streams are
    derived with SeedSequence.spawn and do not overlap.

    Args:
        seed: Root seed shared by all workers
        n: Number of workers

    Returns:
        List of n generators

    Example:
        >>> rngs = spawn_rngs(42, num_workers)
        >>> # worker i uses rngs[i] for all of its images
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    children = np.random.SeedSequence(seed).spawn(n)
    return [np.random.default_rng(child) for child in children]
