"""
Foreground cropping for objects photographed on a uniform background.

The image is binarized with Otsu's threshold; if the binary mask has a
uniform border, rows and columns of that border are peeled off until the
foreground is reached.
"""
from __future__ import annotations

import logging

import cv2
import numpy as np

from ..types import CropWindow, NormalizedBBox
from .common import is_color

logger = logging.getLogger(__name__)


def is_border(edge: np.ndarray, color: int) -> bool:
    """True if every pixel of the edge equals color (empty edges count)."""
    return bool(np.all(edge == color))


def detect_crop_window(
    mask: np.ndarray,
    seed_point: tuple[int, int] = (0, 0),
    padding: int = 2,
) -> CropWindow:
    """
    Find the window left after peeling the uniform border of a mask.

    Args:
        mask: Single-channel (H, W) mask
        seed_point: (x, y) pixel whose value is taken as the border color
        padding: Pixels added back on each side, clamped to the mask

    Returns:
        Crop window; the full mask bounds when any of the four outer edges
        is not uniform or the whole mask is uniform
    """
    mask = mask.reshape(mask.shape[:2])
    rows, cols = mask.shape
    full = CropWindow(0, 0, cols, rows)
    color = mask[seed_point[1], seed_point[0]]

    edges = (mask[0, :], mask[:, cols - 1], mask[rows - 1, :], mask[:, 0])
    if not all(is_border(edge, color) for edge in edges):
        logger.debug("Border not uniform, keeping full %dx%d window", cols, rows)
        return full

    x, y, width, height = 0, 0, cols, rows

    # bottom
    while height > 0 and is_border(mask[y + height - 1, x:x + width], color):
        height -= 1
    # right
    while width > 0 and is_border(mask[y:y + height, x + width - 1], color):
        width -= 1
    # top
    while height > 0 and is_border(mask[y, x:x + width], color):
        y += 1
        height -= 1
    # left
    while width > 0 and is_border(mask[y:y + height, x], color):
        x += 1
        width -= 1

    if width == 0 or height == 0:
        logger.debug("Mask is uniform, keeping full %dx%d window", cols, rows)
        return full

    x0 = max(0, x - padding)
    y0 = max(0, y - padding)
    x1 = min(cols, x + width + padding)
    y1 = min(rows, y + height + padding)
    return CropWindow(x0, y0, x1 - x0, y1 - y0)


def fill_edge_image(mask: np.ndarray) -> np.ndarray:
    """
    Fill the holes enclosed by the foreground of a binary mask.

    The exterior is flood-filled from all four corners; whatever is still
    unset afterwards is an interior hole and is added to the mask.
    """
    rows, cols = mask.shape[:2]
    exterior = mask.reshape(rows, cols).copy()
    for corner in ((0, 0), (cols - 1, rows - 1), (0, rows - 1), (cols - 1, 0)):
        cv2.floodFill(exterior, None, corner, 255)
    holes = cv2.bitwise_not(exterior)
    return cv2.bitwise_or(holes, mask.reshape(rows, cols))


def foreground_mask(image: np.ndarray) -> np.ndarray:
    """Otsu inverse binarization: dark foreground on light background -> 255."""
    gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY) if is_color(image) else image
    gray = np.ascontiguousarray(gray.reshape(gray.shape[:2]))
    _, mask = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY_INV | cv2.THRESH_OTSU)
    return mask


def detect_foreground_window(image: np.ndarray, padding: int = 2) -> CropWindow:
    """Crop window around the foreground object of an image."""
    return detect_crop_window(foreground_mask(image), (0, 0), padding)


def crop_foreground_with_window(
    image: np.ndarray,
    fill_background: bool = False,
    padding: int = 2,
) -> tuple[np.ndarray, CropWindow]:
    """
    Crop an image to its foreground object and report the window used.

    Args:
        image: (H, W) or (H, W, 3) uint8 image
        fill_background: Zero every pixel outside the (hole-filled) foreground
        padding: Pixels kept around the detected object

    Returns:
        (cropped image as a new array, crop window in input pixels)
    """
    mask = foreground_mask(image)
    window = detect_crop_window(mask, (0, 0), padding)
    region = image[window.slices()]

    if not fill_background:
        return region.copy(), window

    crop_mask = fill_edge_image(mask)[window.slices()]
    out = np.zeros_like(region)
    out[crop_mask > 0] = region[crop_mask > 0]
    return out, window


def crop_foreground(
    image: np.ndarray,
    fill_background: bool = False,
    padding: int = 2,
) -> np.ndarray:
    """Crop an image to its foreground object (see crop_foreground_with_window)."""
    return crop_foreground_with_window(image, fill_background, padding)[0]


def crop_bbox(
    window: CropWindow,
    old_width: int,
    old_height: int,
    bbox: NormalizedBBox,
) -> NormalizedBBox:
    """
    Remap a normalized box in place to the coordinates of a crop window.

    Parts of the box outside the window are clamped to its edges.

    Args:
        window: Crop window in pixels of the uncropped image
        old_width, old_height: Size of the uncropped image
        bbox: Box to update (modified in place)

    Returns:
        The same bbox object, for chaining
    """
    def remap(v: float, size: int, offset: int, extent: int) -> float:
        return float(np.clip(v * size - offset, 0, extent)) / extent

    bbox.xmin = remap(bbox.xmin, old_width, window.x, window.width)
    bbox.xmax = remap(bbox.xmax, old_width, window.x, window.width)
    bbox.ymin = remap(bbox.ymin, old_height, window.y, window.height)
    bbox.ymax = remap(bbox.ymax, old_height, window.y, window.height)
    return bbox
