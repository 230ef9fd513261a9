"""
Ordered gate-then-apply effect chains.

An effect chain is a list of GatedEffect entries evaluated in sequence.
Draws are consumed in list order, so a seeded generator replays the same
decisions for the same configuration.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np

from .sampling import bernoulli

logger = logging.getLogger(__name__)

EffectFn = Callable[[np.ndarray, np.random.Generator], np.ndarray]


@dataclass(frozen=True)
class GatedEffect:
    """One chain entry (immutable).

    Attributes:
        name: Effect name used in log messages
        enabled: Whether the effect takes part at all (disabled entries consume no draws)
        apply: Function (image, rng) -> image
        gated: Whether a Bernoulli gate decides each application
    """
    name: str
    enabled: bool
    apply: EffectFn
    gated: bool = True


def run_chain(
    image: np.ndarray,
    effects: Sequence[GatedEffect],
    prob: float,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    Run effects in order, gating each enabled entry with probability ``prob``.

    Args:
        image: Input image
        effects: Ordered chain entries
        prob: Trigger probability shared by all gated entries
        rng: Random generator (default: fresh unseeded generator)

    Returns:
        Image after every fired effect
    """
    if rng is None:
        rng = np.random.default_rng()

    out = image
    for effect in effects:
        if not effect.enabled:
            continue
        if effect.gated and not bernoulli(prob, rng):
            logger.debug("Skipping %s (gate closed)", effect.name)
            continue
        logger.debug("Applying %s", effect.name)
        out = effect.apply(out, rng)
    return out
