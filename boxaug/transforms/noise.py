"""
Noise, quality-degradation and colorspace effects.

apply_noise runs the enabled effects through a gated chain in a fixed
order. The JPEG round-trip is the only un-gated entry: it runs whenever a
positive quality is configured and the image is color.

Both colorspace conversions may fire on the same call; Lab then operates
on HSV data.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence

import cv2
import numpy as np

from ..chain import GatedEffect, run_chain
from ..config import NoiseConfig
from ..errors import SaltPepperValueMismatchError
from ..types import num_channels
from .common import expand_channel_values, is_color, restore_channels, saturate_cast

BLUR_KERNEL = (7, 7)
BLUR_SIGMA = 1.5
CLAHE_CLIP_LIMIT = 4.0
POSTERIZE_DIV = 64


def decolorize(image: np.ndarray) -> np.ndarray:
    """Drop color information while keeping three channels."""
    if not is_color(image):
        return image
    gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)


def gaussian_blur(image: np.ndarray) -> np.ndarray:
    return restore_channels(cv2.GaussianBlur(image, BLUR_KERNEL, BLUR_SIGMA), image)


def _apply_to_luma(image: np.ndarray, fn) -> np.ndarray:
    # Color images are edited on the Y plane of YCrCb only
    if not is_color(image):
        return restore_channels(fn(np.ascontiguousarray(image.reshape(image.shape[:2]))), image)
    ycrcb = cv2.cvtColor(image, cv2.COLOR_BGR2YCrCb)
    ycrcb[:, :, 0] = fn(np.ascontiguousarray(ycrcb[:, :, 0]))
    return cv2.cvtColor(ycrcb, cv2.COLOR_YCrCb2BGR)


def equalize_histogram(image: np.ndarray) -> np.ndarray:
    """Histogram-equalize the luma (or gray) channel."""
    return _apply_to_luma(image, cv2.equalizeHist)


def apply_clahe(image: np.ndarray, clip_limit: float = CLAHE_CLIP_LIMIT) -> np.ndarray:
    """Contrast-limited adaptive histogram equalization on the luma channel."""
    clahe = cv2.createCLAHE(clipLimit=clip_limit)
    return _apply_to_luma(image, clahe.apply)


def jpeg_compress(image: np.ndarray, quality: int) -> np.ndarray:
    """Lossy JPEG encode/decode round-trip of a color image."""
    ok, buf = cv2.imencode('.jpg', image, [cv2.IMWRITE_JPEG_QUALITY, int(quality)])
    if not ok:
        raise RuntimeError("JPEG encoding failed")
    return cv2.imdecode(buf, cv2.IMREAD_COLOR)


def erode(image: np.ndarray) -> np.ndarray:
    """One erosion pass with a 3x3 elliptical structuring element."""
    element = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (3, 3), (1, 1))
    return restore_channels(cv2.erode(image, element), image)


def color_reduce(image: np.ndarray, div: int = POSTERIZE_DIV) -> np.ndarray:
    """
    Posterize: map each value to the center of its div-wide bucket.

    Applying it twice with the same div gives the same result as once.
    """
    if div <= 0:
        raise ValueError(f"div must be positive, got {div}")
    table = np.arange(256, dtype=np.int32) // div * div + div // 2
    return saturate_cast(table, np.uint8)[image]


def invert(image: np.ndarray) -> np.ndarray:
    return restore_channels(cv2.bitwise_not(image), image)


def constant_noise(
    image: np.ndarray,
    n: int,
    values: Sequence[float],
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    Overwrite n distinct random pixel locations with fixed values.

    Args:
        image: (H, W) or (H, W, C) image
        n: Number of pixels to overwrite (clipped to the pixel count)
        values: One value per channel
        rng: Random generator

    Returns:
        Copy of image with the noise applied
    """
    if rng is None:
        rng = np.random.default_rng()

    h, w = image.shape[:2]
    n = min(max(n, 0), h * w)
    out = image.copy()
    if n == 0:
        return out

    flat = rng.choice(h * w, size=n, replace=False)
    rows, cols = np.unravel_index(flat, (h, w))
    fill = np.asarray(values, dtype=image.dtype)
    if image.ndim == 2:
        out[rows, cols] = fill[0]
    else:
        out[rows, cols] = fill
    return out


def to_hsv(image: np.ndarray) -> np.ndarray:
    if not is_color(image):
        return image
    return cv2.cvtColor(image, cv2.COLOR_BGR2HSV)


def to_lab(image: np.ndarray) -> np.ndarray:
    """Convert to Lab on float data in [0, 1], then back to the input depth."""
    if not is_color(image):
        return image
    lab = cv2.cvtColor(image.astype(np.float32) / 255.0, cv2.COLOR_BGR2Lab)
    return saturate_cast(lab, image.dtype)


def noise_effects(config: NoiseConfig, channels: int) -> list[GatedEffect]:
    """
    Chain entries in application order.

    Raises:
        SaltPepperValueMismatchError: If the fill values do not match channels
    """
    everything = config.all_effects
    saltpepper = config.saltpepper or everything
    fill = ()
    if saltpepper:
        fill = expand_channel_values(
            config.saltpepper_value,
            channels,
            SaltPepperValueMismatchError,
            'saltpepper_value',
        )

    def salt_and_pepper(img: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        h, w = img.shape[:2]
        count = math.floor(config.saltpepper_fraction * w * h)
        return constant_noise(img, count, fill, rng)

    def jpeg(img: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        if not is_color(img):
            return img
        return jpeg_compress(img, config.jpeg_quality)

    return [
        GatedEffect('decolorize', config.decolorize or everything,
                    lambda img, rng: decolorize(img)),
        GatedEffect('gauss_blur', config.gauss_blur or everything,
                    lambda img, rng: gaussian_blur(img)),
        GatedEffect('hist_eq', config.hist_eq or everything,
                    lambda img, rng: equalize_histogram(img)),
        GatedEffect('clahe', config.clahe or everything,
                    lambda img, rng: apply_clahe(img)),
        GatedEffect('jpeg', config.jpeg_quality > 0, jpeg, gated=False),
        GatedEffect('erode', config.erode or everything,
                    lambda img, rng: erode(img)),
        GatedEffect('posterize', config.posterize or everything,
                    lambda img, rng: color_reduce(img)),
        GatedEffect('inverse', config.inverse or everything,
                    lambda img, rng: invert(img)),
        GatedEffect('saltpepper', saltpepper, salt_and_pepper),
        GatedEffect('convert_to_hsv', config.convert_to_hsv or everything,
                    lambda img, rng: to_hsv(img)),
        GatedEffect('convert_to_lab', config.convert_to_lab or everything,
                    lambda img, rng: to_lab(img)),
    ]


def apply_noise(
    image: np.ndarray,
    config: NoiseConfig,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    Apply the noise effect chain.

    Args:
        image: (H, W) or (H, W, 3) uint8 BGR image
        config: Noise configuration
        rng: Random generator (default: fresh unseeded generator)

    Returns:
        Processed image (the input itself if nothing fired)

    Raises:
        SaltPepperValueMismatchError: Raised before any pixel work
    """
    if config.prob == 0.0:
        return image

    effects = noise_effects(config, num_channels(image))
    return run_chain(image, effects, config.prob, rng)
