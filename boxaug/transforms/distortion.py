"""
Photometric distortion: brightness, contrast, saturation, hue and channel order.

Each random_* effect draws its magnitude from the generator and delegates to
the deterministic adjust_* function. apply_distortion runs the enabled
effects through a gated chain in one of two fixed orders.
"""
from __future__ import annotations

import logging
from typing import Optional

import cv2
import numpy as np

from ..chain import GatedEffect, run_chain
from ..config import DistortionConfig
from ..types import DistortOrder, coerce_enum, num_channels
from .common import is_color, saturate_cast

logger = logging.getLogger(__name__)


def adjust_brightness(image: np.ndarray, delta: float) -> np.ndarray:
    """Add delta to every channel, saturating to the uint8 range."""
    if abs(delta) > 0:
        return saturate_cast(image.astype(np.float32) + delta, image.dtype)
    return image


def adjust_contrast(image: np.ndarray, scale: float) -> np.ndarray:
    """Multiply every channel by scale, saturating to the uint8 range."""
    if abs(scale - 1.0) > 1e-3:
        return saturate_cast(image.astype(np.float32) * scale, image.dtype)
    return image


def adjust_saturation(image: np.ndarray, scale: float) -> np.ndarray:
    """Scale the HSV saturation channel of a BGR image."""
    if not is_color(image):
        logger.debug("Saturation skipped for single-channel image")
        return image
    if abs(scale - 1.0) <= 1e-3:
        return image

    hsv = cv2.cvtColor(image, cv2.COLOR_BGR2HSV)
    hsv[:, :, 1] = saturate_cast(hsv[:, :, 1].astype(np.float32) * scale)
    return cv2.cvtColor(hsv, cv2.COLOR_HSV2BGR)


def adjust_hue(image: np.ndarray, delta: float) -> np.ndarray:
    """Shift the HSV hue channel of a BGR image by delta."""
    if not is_color(image):
        logger.debug("Hue skipped for single-channel image")
        return image
    if abs(delta) == 0:
        return image

    hsv = cv2.cvtColor(image, cv2.COLOR_BGR2HSV)
    hsv[:, :, 0] = saturate_cast(hsv[:, :, 0].astype(np.float32) + delta)
    return cv2.cvtColor(hsv, cv2.COLOR_HSV2BGR)


def random_brightness(
    image: np.ndarray,
    delta: float,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    if rng is None:
        rng = np.random.default_rng()
    return adjust_brightness(image, rng.uniform(-delta, delta))


def random_contrast(
    image: np.ndarray,
    lower: float,
    upper: float,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    if rng is None:
        rng = np.random.default_rng()
    return adjust_contrast(image, rng.uniform(lower, upper))


def random_saturation(
    image: np.ndarray,
    lower: float,
    upper: float,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    # Draw even for gray images so the draw sequence depends only on config
    if rng is None:
        rng = np.random.default_rng()
    return adjust_saturation(image, rng.uniform(lower, upper))


def random_hue(
    image: np.ndarray,
    delta: float,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    if rng is None:
        rng = np.random.default_rng()
    return adjust_hue(image, rng.uniform(-delta, delta))


def random_order_channels(
    image: np.ndarray,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Shuffle the three channel planes; other channel counts pass through."""
    if num_channels(image) != 3:
        logger.debug("Channel reorder skipped for %d-channel image", num_channels(image))
        return image
    if rng is None:
        rng = np.random.default_rng()
    return image[:, :, rng.permutation(3)]


def distortion_effects(config: DistortionConfig) -> dict[str, GatedEffect]:
    """Chain entries for every distortion effect, keyed by DistortOrder name."""
    everything = config.all_effects
    return {
        'brightness': GatedEffect(
            'brightness',
            config.brightness or everything,
            lambda img, rng: random_brightness(img, config.brightness_delta, rng),
        ),
        'contrast': GatedEffect(
            'contrast',
            config.contrast or everything,
            lambda img, rng: random_contrast(
                img, config.contrast_lower, config.contrast_upper, rng),
        ),
        'saturation': GatedEffect(
            'saturation',
            config.saturation or everything,
            lambda img, rng: random_saturation(
                img, config.saturation_lower, config.saturation_upper, rng),
        ),
        'hue': GatedEffect(
            'hue',
            config.hue or everything,
            lambda img, rng: random_hue(img, config.hue_delta, rng),
        ),
        'random_order': GatedEffect(
            'random_order',
            config.random_order or everything,
            random_order_channels,
        ),
    }


def apply_distortion(
    image: np.ndarray,
    config: DistortionConfig,
    rng: Optional[np.random.Generator] = None,
    order: DistortOrder | str | None = None,
) -> np.ndarray:
    """
    Apply random photometric distortions in one of two fixed orders.

    Args:
        image: (H, W) or (H, W, 3) uint8 BGR image
        config: Distortion configuration
        rng: Random generator (default: fresh unseeded generator)
        order: Force an ordering; None draws it (one uniform draw,
            above 0.5 selects BRIGHTNESS_CONTRAST_FIRST)

    Returns:
        Distorted image (the input itself if nothing fired)
    """
    if rng is None:
        rng = np.random.default_rng()

    if order is None:
        order = (
            DistortOrder.BRIGHTNESS_CONTRAST_FIRST
            if rng.uniform(0.0, 1.0) > 0.5
            else DistortOrder.CONTRAST_LAST
        )
    else:
        order = coerce_enum(DistortOrder, order)

    if config.prob <= 0.0:
        return image

    effects = distortion_effects(config)
    logger.debug("Distortion order %s", order.name)
    return run_chain(image, [effects[name] for name in order.effects], config.prob, rng)
