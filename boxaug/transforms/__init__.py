"""
Image transforms built on OpenCV.

- resize: resize policies with matching bounding-box remapping
- geometry: random zoom and perspective warp
- distortion: photometric distortion chain
- noise: noise and colorspace effect chain
- crop: foreground cropping on uniform backgrounds
"""
from __future__ import annotations

from .resize import (
    infer_size,
    resize_image,
    update_bbox,
    update_bboxes,
    fit_large_layout,
    aspect_keeping_resize_and_pad,
    aspect_keeping_resize_by_small,
)
from .geometry import apply_geometry, perspective_quads
from .distortion import (
    apply_distortion,
    adjust_brightness,
    adjust_contrast,
    adjust_saturation,
    adjust_hue,
    random_order_channels,
)
from .noise import (
    apply_noise,
    decolorize,
    gaussian_blur,
    equalize_histogram,
    apply_clahe,
    jpeg_compress,
    erode,
    color_reduce,
    invert,
    constant_noise,
    to_hsv,
    to_lab,
)
from .crop import (
    crop_foreground,
    crop_foreground_with_window,
    crop_bbox,
    detect_foreground_window,
    detect_crop_window,
    fill_edge_image,
    is_border,
)

__all__ = [
    # Resize
    "infer_size",
    "resize_image",
    "update_bbox",
    "update_bboxes",
    "fit_large_layout",
    "aspect_keeping_resize_and_pad",
    "aspect_keeping_resize_by_small",
    # Geometry
    "apply_geometry",
    "perspective_quads",
    # Distortion
    "apply_distortion",
    "adjust_brightness",
    "adjust_contrast",
    "adjust_saturation",
    "adjust_hue",
    "random_order_channels",
    # Noise
    "apply_noise",
    "decolorize",
    "gaussian_blur",
    "equalize_histogram",
    "apply_clahe",
    "jpeg_compress",
    "erode",
    "color_reduce",
    "invert",
    "constant_noise",
    "to_hsv",
    "to_lab",
    # Crop
    "crop_foreground",
    "crop_foreground_with_window",
    "crop_bbox",
    "detect_foreground_window",
    "detect_crop_window",
    "fill_edge_image",
    "is_border",
]
