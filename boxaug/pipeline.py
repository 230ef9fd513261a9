"""
Composable augmentation over sample dicts.

A sample is a dict with an 'image' array and optionally a 'bboxes' list of
NormalizedBBox. Stages are pure: they return a new dict and leave the input
dict untouched (boxes are copied before any in-place remap).

The crop and resize stages update 'bboxes'. The geometry stage moves pixels
without remapping boxes, so enable it on detection data only if that
mismatch is acceptable.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Optional

import numpy as np

from .config import (
    CropConfig,
    DistortionConfig,
    GeometryConfig,
    NoiseConfig,
    ResizeConfig,
    TransformConfig,
)
from .seed import create_rng
from .transforms.crop import crop_bbox, crop_foreground_with_window
from .transforms.distortion import apply_distortion
from .transforms.geometry import apply_geometry
from .transforms.noise import apply_noise
from .transforms.resize import resize_image, update_bboxes

logger = logging.getLogger(__name__)

Sample = dict[str, Any]
AugmentFn = Callable[[Sample], Sample]


def compose(*augment_fns: AugmentFn) -> AugmentFn:
    """
    Compose multiple augmentation functions (pure).

    Args:
        *augment_fns: Variable number of augmentation functions

    Returns:
        Composed augmentation function

    Example:
        >>> rng = create_rng(0)
        >>> augment = compose(
        ...     distortion_stage(DistortionConfig(brightness=True), rng),
        ...     resize_stage(ResizeConfig(300, 300), rng),
        ... )
        >>> sample = augment({'image': img, 'bboxes': boxes})
    """
    def composed(sample: Sample) -> Sample:
        result = sample
        for fn in augment_fns:
            result = fn(result)
        return result

    return composed


def apply_to_image(transform_fn: Callable[[np.ndarray], np.ndarray]) -> AugmentFn:
    """Wrap an image -> image function as a stage that keeps other fields."""
    def augment(sample: Sample) -> Sample:
        return {**sample, 'image': transform_fn(sample['image'])}

    return augment


def crop_stage(config: CropConfig) -> AugmentFn:
    """Crop to the foreground object and remap 'bboxes' into the window."""
    if not config.enabled:
        return lambda sample: sample

    def augment(sample: Sample) -> Sample:
        image = sample['image']
        old_height, old_width = image.shape[:2]
        cropped, window = crop_foreground_with_window(
            image, config.fill_background, config.padding,
        )
        result = {**sample, 'image': cropped}
        if 'bboxes' in sample:
            logger.debug("Remapping boxes into crop window %s", window)
            result['bboxes'] = [
                crop_bbox(window, old_width, old_height, b)
                for b in copy.deepcopy(sample['bboxes'])
            ]
        return result

    return augment


def distortion_stage(config: DistortionConfig, rng: np.random.Generator) -> AugmentFn:
    return apply_to_image(lambda img: apply_distortion(img, config, rng))


def geometry_stage(config: GeometryConfig, rng: np.random.Generator) -> AugmentFn:
    return apply_to_image(lambda img: apply_geometry(img, config, rng))


def noise_stage(config: NoiseConfig, rng: np.random.Generator) -> AugmentFn:
    return apply_to_image(lambda img: apply_noise(img, config, rng))


def resize_stage(config: ResizeConfig, rng: np.random.Generator) -> AugmentFn:
    """Resize the image and remap 'bboxes' with the same policy."""
    def augment(sample: Sample) -> Sample:
        image = sample['image']
        old_height, old_width = image.shape[:2]
        result = {**sample, 'image': resize_image(image, config, rng)}
        if 'bboxes' in sample:
            result['bboxes'] = update_bboxes(
                config, old_width, old_height, copy.deepcopy(sample['bboxes']),
            )
        return result

    return augment


def create_augmenter(
    config: TransformConfig,
    rng: Optional[np.random.Generator] = None,
) -> AugmentFn:
    """
    Build the full augmentation from a TransformConfig.

    Stages run in the order crop -> distortion -> geometry -> resize -> noise;
    stages whose config is None are skipped. All stages share one generator,
    so a seeded augmenter replays the same sequence of samples.

    Args:
        config: Top-level configuration
        rng: Random generator (default: create_rng(config.seed))

    Returns:
        Augmentation function over sample dicts
    """
    if rng is None:
        rng = create_rng(config.seed)

    stages: list[AugmentFn] = []
    if config.crop is not None:
        stages.append(crop_stage(config.crop))
    if config.distortion is not None:
        stages.append(distortion_stage(config.distortion, rng))
    if config.geometry is not None:
        stages.append(geometry_stage(config.geometry, rng))
    if config.resize is not None:
        stages.append(resize_stage(config.resize, rng))
    if config.noise is not None:
        stages.append(noise_stage(config.noise, rng))

    logger.debug("Augmenter with %d stages", len(stages))
    return compose(*stages)
