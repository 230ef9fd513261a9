"""
Resize policies that transform pixels and bounding boxes consistently.

The pixel path (resize_image) and the annotation path (update_bbox) share
the same layout helpers, so a box drawn on the input lands on the same
pixels after resizing.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

import cv2
import numpy as np

from ..config import ResizeConfig
from ..errors import UnsupportedResizeModeError
from ..sampling import choose_uniform
from ..types import InterpMode, NormalizedBBox, ResizeMode, num_channels
from .common import border_flag, expand_channel_values, interp_flag, restore_channels

logger = logging.getLogger(__name__)


def fit_large_layout(
    old_width: int,
    old_height: int,
    new_width: int,
    new_height: int,
) -> tuple[int, int, int, int]:
    """
    Layout of an aspect-preserving fit inside a (new_width, new_height) box.

    Args:
        old_width, old_height: Source size
        new_width, new_height: Target box

    Returns:
        (scaled_width, scaled_height, pad_x, pad_y) where pad_x/pad_y is the
        leading border on the padded axis (the other one is 0)
    """
    orig_aspect = old_width / old_height
    new_aspect = new_width / new_height

    if orig_aspect > new_aspect:
        scaled_height = min(new_height, max(1, math.floor(new_width / orig_aspect)))
        pad_y = (new_height - scaled_height) // 2
        return new_width, scaled_height, 0, pad_y

    scaled_width = min(new_width, max(1, math.floor(orig_aspect * new_height)))
    pad_x = (new_width - scaled_width) // 2
    return scaled_width, new_height, pad_x, 0


def fit_small_size(
    old_width: int,
    old_height: int,
    new_width: int,
    new_height: int,
) -> tuple[int, int]:
    """Aspect-preserving size covering the target box on both axes."""
    orig_aspect = old_width / old_height
    new_aspect = new_width / new_height

    if orig_aspect < new_aspect:
        return new_width, max(new_height, math.floor(new_width / orig_aspect))
    return max(new_width, math.floor(orig_aspect * new_height)), new_height


def infer_size(old_width: int, old_height: int, config: ResizeConfig) -> tuple[int, int]:
    """
    Output size of resize_image for a given input size.

    Args:
        old_width, old_height: Input size
        config: Resize policy

    Returns:
        (new_width, new_height)

    Raises:
        UnsupportedResizeModeError: If the mode is unknown
    """
    if config.mode in (ResizeMode.WARP, ResizeMode.FIT_LARGE_SIZE_AND_PAD):
        return config.width, config.height
    if config.mode == ResizeMode.FIT_SMALL_SIZE:
        return fit_small_size(old_width, old_height, config.width, config.height)
    raise UnsupportedResizeModeError(f"Unknown resize mode: {config.mode}")


def aspect_keeping_resize_and_pad(
    image: np.ndarray,
    new_width: int,
    new_height: int,
    pad_type: int = cv2.BORDER_CONSTANT,
    pad_value: tuple[float, ...] = (0.0, 0.0, 0.0),
    interpolation: int = cv2.INTER_LINEAR,
) -> np.ndarray:
    """Fit inside the box preserving aspect, then center with a border."""
    h, w = image.shape[:2]
    scaled_w, scaled_h, pad_x, pad_y = fit_large_layout(w, h, new_width, new_height)

    resized = cv2.resize(image, (scaled_w, scaled_h), interpolation=interpolation)
    out = cv2.copyMakeBorder(
        resized,
        pad_y, new_height - scaled_h - pad_y,
        pad_x, new_width - scaled_w - pad_x,
        pad_type,
        value=list(pad_value),
    )
    return restore_channels(out, image)


def aspect_keeping_resize_by_small(
    image: np.ndarray,
    new_width: int,
    new_height: int,
    interpolation: int = cv2.INTER_LINEAR,
) -> np.ndarray:
    """Scale preserving aspect so the result covers the box; no padding."""
    h, w = image.shape[:2]
    size = fit_small_size(w, h, new_width, new_height)
    return restore_channels(cv2.resize(image, size, interpolation=interpolation), image)


def sample_interpolation(
    interp_modes: tuple[InterpMode, ...],
    rng: Optional[np.random.Generator] = None,
) -> int:
    """Uniformly pick one configured interpolation (LINEAR when none)."""
    if not interp_modes:
        return cv2.INTER_LINEAR
    return interp_flag(choose_uniform(interp_modes, rng))


def resize_image(
    image: np.ndarray,
    config: ResizeConfig,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    Resize an image according to the configured policy.

    Args:
        image: (H, W), (H, W, 1) or (H, W, 3) uint8 image
        config: Resize policy
        rng: Random generator used to pick the interpolation

    Returns:
        Resized image of size infer_size(W, H, config)

    Raises:
        UnsupportedResizeModeError: If the mode is unknown
        PadValueMismatchError: If pad_value has neither 1 nor channel-count entries
    """
    if not isinstance(config.mode, ResizeMode):
        raise UnsupportedResizeModeError(f"Unknown resize mode: {config.mode}")

    pad_type = border_flag(config.pad_mode)
    pad_value = expand_channel_values(config.pad_value, num_channels(image))
    interpolation = sample_interpolation(config.interp_modes, rng)
    logger.debug(
        "Resizing %dx%d with %s to %dx%d",
        image.shape[1], image.shape[0], config.mode.name, config.width, config.height,
    )

    if config.mode == ResizeMode.WARP:
        out = cv2.resize(image, (config.width, config.height), interpolation=interpolation)
        return restore_channels(out, image)

    if config.mode == ResizeMode.FIT_LARGE_SIZE_AND_PAD:
        return aspect_keeping_resize_and_pad(
            image, config.width, config.height, pad_type, pad_value, interpolation,
        )

    return aspect_keeping_resize_by_small(image, config.width, config.height, interpolation)


def update_bbox(
    config: ResizeConfig,
    old_width: int,
    old_height: int,
    bbox: NormalizedBBox,
) -> NormalizedBBox:
    """
    Remap a normalized box in place to match resize_image's pixel mapping.

    Args:
        config: Resize policy used for the pixels
        old_width, old_height: Size of the image before resizing
        bbox: Box to update (modified in place)

    Returns:
        The same bbox object, for chaining

    Raises:
        UnsupportedResizeModeError: If the mode is unknown
    """
    x_min = bbox.xmin * old_width
    y_min = bbox.ymin * old_height
    x_max = bbox.xmax * old_width
    y_max = bbox.ymax * old_height

    if config.mode == ResizeMode.WARP or config.mode == ResizeMode.FIT_SMALL_SIZE:
        new_width, new_height = infer_size(old_width, old_height, config)
        sx = new_width / old_width
        sy = new_height / old_height
        x_min, x_max = (float(np.clip(v * sx, 0, new_width)) for v in (x_min, x_max))
        y_min, y_max = (float(np.clip(v * sy, 0, new_height)) for v in (y_min, y_max))
    elif config.mode == ResizeMode.FIT_LARGE_SIZE_AND_PAD:
        new_width, new_height = config.width, config.height
        scaled_w, scaled_h, pad_x, pad_y = fit_large_layout(
            old_width, old_height, new_width, new_height,
        )
        sx = scaled_w / old_width
        sy = scaled_h / old_height
        x_min, x_max = (pad_x + float(np.clip(v * sx, 0, scaled_w)) for v in (x_min, x_max))
        y_min, y_max = (pad_y + float(np.clip(v * sy, 0, scaled_h)) for v in (y_min, y_max))
    else:
        raise UnsupportedResizeModeError(f"Unknown resize mode: {config.mode}")

    bbox.xmin = x_min / new_width
    bbox.ymin = y_min / new_height
    bbox.xmax = x_max / new_width
    bbox.ymax = y_max / new_height
    return bbox


def update_bboxes(
    config: ResizeConfig,
    old_width: int,
    old_height: int,
    bboxes: Iterable[NormalizedBBox],
) -> list[NormalizedBBox]:
    """Remap every box in place; returns them as a list."""
    return [update_bbox(config, old_width, old_height, b) for b in bboxes]
