"""Random zoom and perspective augmentation via cv2.warpPerspective.

Bounding boxes are not remapped by this stage: pipelines that run it on
annotated samples must account for the pixel/box mismatch themselves.
"""
from __future__ import annotations

import logging
from typing import Optional

import cv2
import numpy as np

from ..config import GeometryConfig
from ..sampling import bernoulli, coin_flip
from .common import border_flag, restore_channels

logger = logging.getLogger(__name__)


def _input_quad(
    width: int,
    height: int,
    config: GeometryConfig,
    rng: np.random.Generator,
) -> np.ndarray:
    # Padded canvas is 3x the image; the original sits at (width, height).
    x0, x1 = float(width), float(2 * width - 1)
    y0, y1 = float(height), float(2 * height - 1)

    zoom_in = config.zoom_in or config.all_effects
    zoom_out = config.zoom_out or config.all_effects
    if zoom_in or zoom_out:
        if zoom_in and zoom_out:
            if coin_flip(rng):
                zoom_out = False
            else:
                zoom_in = False

        x0_min = width - width * config.zoom_factor if zoom_out else x0
        x0_max = width + width * config.zoom_factor if zoom_in else x0
        y0_min = height - height * config.zoom_factor if zoom_out else y0
        y0_max = height + height * config.zoom_factor if zoom_in else y0

        x0 = rng.uniform(x0_min, x0_max)
        x1 = 3 * width - x0
        y0 = rng.uniform(y0_min, y0_max)
        y1 = 3 * height - y0

    return np.array([[x0, y0], [x1, y0], [x1, y1], [x0, y1]], dtype=np.float32)


def _output_quad(
    width: int,
    height: int,
    config: GeometryConfig,
    rng: np.random.Generator,
) -> np.ndarray:
    quad = np.array(
        [[0, 0], [width - 1, 0], [width - 1, height - 1], [0, height - 1]],
        dtype=np.float32,
    )

    if config.persp_horizontal or config.all_effects:
        if coin_flip(rng):
            # seen from the right
            offset = rng.uniform(0.0, height * config.persp_factor)
            quad[0, 1] = offset
            quad[3, 1] = height - offset
        else:
            # seen from the left
            offset = rng.uniform(0.0, height * config.persp_factor)
            quad[1, 1] = offset
            quad[2, 1] = height - offset

    if config.persp_vertical or config.all_effects:
        if coin_flip(rng):
            # seen from above
            offset = rng.uniform(0.0, width * config.persp_factor)
            quad[3, 0] = offset
            quad[2, 0] = width - offset
        else:
            # seen from below
            offset = rng.uniform(0.0, width * config.persp_factor)
            quad[0, 0] = offset
            quad[1, 0] = width - offset

    return quad


def perspective_quads(
    width: int,
    height: int,
    config: GeometryConfig,
    rng: Optional[np.random.Generator] = None,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Draw the input and output quadrilaterals of one geometric augmentation.

    The input quad lives in the 3x padded canvas, the output quad in the
    output image. Corners run clockwise from top-left.

    Args:
        width, height: Size of the un-padded image
        config: Geometry configuration
        rng: Random generator

    Returns:
        (input_quad, output_quad), each a (4, 2) float32 array
    """
    if rng is None:
        rng = np.random.default_rng()
    src = _input_quad(width, height, config, rng)
    dst = _output_quad(width, height, config, rng)
    return src, dst


def apply_geometry(
    image: np.ndarray,
    config: GeometryConfig,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    Randomly zoom and tilt an image with a perspective warp.

    With probability config.prob the image is padded on every side by its
    own size, a random input quad is mapped onto a randomly tilted output
    quad, and the padded image is warped back to the original size.

    Args:
        image: (H, W), (H, W, 1) or (H, W, 3) uint8 image
        config: Geometry configuration
        rng: Random generator (default: fresh unseeded generator)

    Returns:
        Warped image of the same size, or the input itself when not applied
    """
    if config.prob == 0.0:
        return image
    if rng is None:
        rng = np.random.default_rng()

    pad_type = border_flag(config.pad_mode)
    if not bernoulli(config.prob, rng):
        return image

    h, w = image.shape[:2]
    enlarged = cv2.copyMakeBorder(image, h, h, w, w, pad_type, value=0)

    src, dst = perspective_quads(w, h, config, rng)
    matrix = cv2.getPerspectiveTransform(src, dst)
    logger.debug("Perspective warp src=%s dst=%s", src.tolist(), dst.tolist())

    out = cv2.warpPerspective(enlarged, matrix, (w, h))
    return restore_channels(out, image)
