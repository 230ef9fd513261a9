"""Tests for foreground cropping."""
from __future__ import annotations

import numpy as np
import pytest

from boxaug.transforms.crop import (
    crop_bbox,
    crop_foreground,
    crop_foreground_with_window,
    detect_foreground_window,
    detect_crop_window,
    fill_edge_image,
    foreground_mask,
    is_border,
)
from boxaug.types import CropWindow, NormalizedBBox


@pytest.fixture
def block_mask():
    mask = np.zeros((20, 30), dtype=np.uint8)
    mask[5:10, 8:15] = 255
    return mask


def test_is_border():
    assert is_border(np.array([3, 3, 3]), 3)
    assert not is_border(np.array([3, 4, 3]), 3)
    assert is_border(np.array([], dtype=np.uint8), 0)


def test_detect_window_tight(block_mask):
    """Test that peeling stops exactly at the foreground block."""
    window = detect_crop_window(block_mask, padding=0)
    assert window == CropWindow(8, 5, 7, 5)


def test_detect_window_padding(block_mask):
    window = detect_crop_window(block_mask, padding=2)
    assert window == CropWindow(6, 3, 11, 9)


def test_detect_window_padding_clamped():
    """Test that padding never leaves the mask."""
    mask = np.zeros((20, 30), dtype=np.uint8)
    mask[1:4, 1:29] = 255

    window = detect_crop_window(mask, padding=5)

    assert window == CropWindow(0, 0, 30, 9)


def test_non_uniform_border_keeps_full_window(block_mask):
    """Test that a foreground touching an edge disables cropping."""
    block_mask[19, 3] = 255
    assert detect_crop_window(block_mask) == CropWindow(0, 0, 30, 20)


def test_uniform_mask_keeps_full_window():
    mask = np.zeros((12, 16), dtype=np.uint8)
    assert detect_crop_window(mask) == CropWindow(0, 0, 16, 12)


def test_seed_point_selects_border_color():
    """Test that the border color is read at the seed point."""
    mask = np.full((20, 30), 255, dtype=np.uint8)
    mask[5:10, 8:15] = 0

    assert detect_crop_window(mask, seed_point=(29, 19), padding=0) == CropWindow(8, 5, 7, 5)


def test_window_slices(block_mask):
    window = detect_crop_window(block_mask, padding=0)
    assert np.all(block_mask[window.slices()] == 255)


def test_fill_edge_image_fills_holes():
    """Test that an enclosed hole is filled and the exterior is untouched."""
    mask = np.zeros((20, 20), dtype=np.uint8)
    mask[5:15, 5:15] = 255
    mask[8:12, 8:12] = 0

    filled = fill_edge_image(mask)

    assert np.all(filled[5:15, 5:15] == 255)
    assert np.all(filled[:5] == 0)
    assert np.all(filled[:, 15:] == 0)
    assert np.all(mask[8:12, 8:12] == 0)


def test_foreground_mask_marks_dark_object():
    image = np.full((20, 20), 240, dtype=np.uint8)
    image[6:12, 4:9] = 20

    mask = foreground_mask(image)

    assert np.all(mask[6:12, 4:9] == 255)
    assert np.count_nonzero(mask) == 30


@pytest.fixture
def ring_image():
    """White color image with a dark square ring whose center is light."""
    image = np.full((40, 50, 3), 230, dtype=np.uint8)
    image[10:30, 15:35] = 20
    image[15:25, 20:30] = 230
    return image


def test_crop_foreground_without_fill(ring_image):
    """Test that the crop keeps the ring plus padding and original pixels."""
    out = crop_foreground(ring_image, fill_background=False, padding=2)

    assert out.shape == (24, 24, 3)
    np.testing.assert_array_equal(out, ring_image[8:32, 13:37])


def test_crop_foreground_with_fill(ring_image):
    """Test that pixels outside the filled foreground are zeroed."""
    out = crop_foreground(ring_image, fill_background=True, padding=2)

    assert out.shape == (24, 24, 3)
    # padding ring is background
    assert np.all(out[:2] == 0)
    assert np.all(out[:, :2] == 0)
    # ring and its filled center keep their pixels
    np.testing.assert_array_equal(out[2:22, 2:22], ring_image[10:30, 15:35])


def test_crop_foreground_gray():
    image = np.full((30, 30), 250, dtype=np.uint8)
    image[10:20, 12:16] = 5

    out = crop_foreground(image, padding=0)

    assert out.shape == (10, 4)
    assert np.all(out == 5)


def test_crop_foreground_returns_copy():
    image = np.full((30, 30), 250, dtype=np.uint8)
    image[10:20, 12:16] = 5

    out = crop_foreground(image, padding=0)
    out[:] = 0

    assert np.all(image[10:20, 12:16] == 5)


def test_crop_foreground_reports_window(ring_image):
    """Test that the reported window is the one the crop was cut from."""
    out, window = crop_foreground_with_window(ring_image, padding=2)

    assert window == CropWindow(13, 8, 24, 24)
    assert window == detect_foreground_window(ring_image, padding=2)
    np.testing.assert_array_equal(out, ring_image[window.slices()])


def test_crop_bbox_maps_into_window():
    """Test that a box inside the window keeps covering the same pixels."""
    window = CropWindow(10, 20, 40, 40)
    bbox = NormalizedBBox(0.2, 0.3, 0.4, 0.5)  # pixels x 20..40, y 30..50 of 100x100

    result = crop_bbox(window, 100, 100, bbox)

    assert result is bbox
    np.testing.assert_allclose(bbox.to_tuple(), (0.25, 0.25, 0.75, 0.75), atol=1e-9)


def test_crop_bbox_clamps_to_window():
    """Test that parts of a box outside the window are clamped to its edges."""
    bbox = NormalizedBBox(0.0, 0.0, 1.0, 1.0)
    crop_bbox(CropWindow(10, 20, 40, 20), 100, 100, bbox)
    assert bbox.to_tuple() == (0.0, 0.0, 1.0, 1.0)
