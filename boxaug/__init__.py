"""boxaug: Reproducible image augmentation for object detection.

Public API exports for configuration, random sources, the individual
transforms and the sample-dict pipeline.
"""

# Configuration
from boxaug.config import (
    ResizeConfig,
    GeometryConfig,
    DistortionConfig,
    NoiseConfig,
    CropConfig,
    TransformConfig,
    config_to_dict,
    config_from_dict,
    save_config,
    load_config,
)

# Types and errors
from boxaug.types import (
    ResizeMode,
    PadMode,
    InterpMode,
    DistortOrder,
    NormalizedBBox,
    CropWindow,
)
from boxaug.errors import (
    AugmentationError,
    ConfigError,
    UnsupportedResizeModeError,
    UnsupportedPadModeError,
    UnsupportedInterpModeError,
    PadValueMismatchError,
    SaltPepperValueMismatchError,
    InvalidProbabilityError,
)

# Randomness
from boxaug.sampling import roll_weighted_die, bernoulli, coin_flip, choose_uniform
from boxaug.seed import create_rng, spawn_rngs
from boxaug.chain import GatedEffect, run_chain

# Transforms
from boxaug.transforms import (
    infer_size,
    resize_image,
    update_bbox,
    update_bboxes,
    apply_geometry,
    apply_distortion,
    apply_noise,
    crop_foreground,
    crop_bbox,
    detect_crop_window,
)

# Pipeline
from boxaug.pipeline import compose, create_augmenter

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "ResizeConfig",
    "GeometryConfig",
    "DistortionConfig",
    "NoiseConfig",
    "CropConfig",
    "TransformConfig",
    "config_to_dict",
    "config_from_dict",
    "save_config",
    "load_config",

    # Types
    "ResizeMode",
    "PadMode",
    "InterpMode",
    "DistortOrder",
    "NormalizedBBox",
    "CropWindow",

    # Errors
    "AugmentationError",
    "ConfigError",
    "UnsupportedResizeModeError",
    "UnsupportedPadModeError",
    "UnsupportedInterpModeError",
    "PadValueMismatchError",
    "SaltPepperValueMismatchError",
    "InvalidProbabilityError",

    # Randomness
    "roll_weighted_die",
    "bernoulli",
    "coin_flip",
    "choose_uniform",
    "create_rng",
    "spawn_rngs",
    "GatedEffect",
    "run_chain",

    # Transforms
    "infer_size",
    "resize_image",
    "update_bbox",
    "update_bboxes",
    "apply_geometry",
    "apply_distortion",
    "apply_noise",
    "crop_foreground",
    "crop_bbox",
    "detect_crop_window",

    # Pipeline
    "compose",
    "create_augmenter",
]
