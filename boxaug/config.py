"""
Augmentation configuration records with validation and JSON serialization.

All configs are frozen dataclasses. Enum fields accept members, names or
values and are coerced in __post_init__, so configs loaded from JSON behave
the same as configs built in code.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any

from .errors import (
    ConfigError,
    InvalidProbabilityError,
    UnsupportedInterpModeError,
    UnsupportedPadModeError,
    UnsupportedResizeModeError,
)
from .types import InterpMode, PadMode, ResizeMode, coerce_enum


def _set(obj: Any, name: str, value: Any) -> None:
    object.__setattr__(obj, name, value)


def _check_prob(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise InvalidProbabilityError(f"{name} must be in [0, 1], got {value}")


def _check_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ConfigError(f"{name} must be non-negative, got {value}")


def _check_range(name: str, lower: float, upper: float) -> None:
    if lower < 0:
        raise ConfigError(f"{name} lower must be non-negative, got {lower}")
    if upper < lower:
        raise ConfigError(f"{name} upper must be >= lower, got [{lower}, {upper}]")


@dataclass(frozen=True)
class ResizeConfig:
    """Resize policy (immutable).

    Attributes:
        width: Target width in pixels
        height: Target height in pixels
        mode: Aspect ratio handling
        pad_mode: Border fill for FIT_LARGE_SIZE_AND_PAD
        pad_value: Constant border value, 1 or channel-count entries (empty = zeros)
        interp_modes: Candidate interpolations, sampled uniformly (empty = LINEAR)
    """
    width: int
    height: int
    mode: ResizeMode = ResizeMode.WARP
    pad_mode: PadMode = PadMode.CONSTANT
    pad_value: tuple[float, ...] = ()
    interp_modes: tuple[InterpMode, ...] = ()

    def __post_init__(self) -> None:
        if int(self.width) <= 0 or int(self.height) <= 0:
            raise ConfigError(
                f"Resize target must be positive, got {self.width}x{self.height}"
            )
        _set(self, 'width', int(self.width))
        _set(self, 'height', int(self.height))
        _set(self, 'mode', coerce_enum(ResizeMode, self.mode, UnsupportedResizeModeError))
        _set(self, 'pad_mode', coerce_enum(PadMode, self.pad_mode, UnsupportedPadModeError))
        _set(self, 'pad_value', tuple(float(v) for v in self.pad_value))
        _set(self, 'interp_modes', tuple(
            coerce_enum(InterpMode, m, UnsupportedInterpModeError)
            for m in self.interp_modes
        ))


@dataclass(frozen=True)
class GeometryConfig:
    """Perspective/zoom augmentation (immutable)."""
    prob: float = 0.5
    pad_mode: PadMode = PadMode.MIRRORED
    zoom_in: bool = False
    zoom_out: bool = False
    zoom_factor: float = 0.25  # fraction of each edge length
    persp_horizontal: bool = False
    persp_vertical: bool = False
    persp_factor: float = 0.1  # fraction of the cross-axis dimension
    all_effects: bool = False

    def __post_init__(self) -> None:
        _check_prob('prob', self.prob)
        _check_non_negative('zoom_factor', self.zoom_factor)
        _check_non_negative('persp_factor', self.persp_factor)
        _set(self, 'pad_mode', coerce_enum(PadMode, self.pad_mode, UnsupportedPadModeError))


@dataclass(frozen=True)
class DistortionConfig:
    """Photometric distortion (immutable).

    Deltas are in pixel units for brightness and OpenCV hue units
    (0-179) for hue. Scale ranges are multiplicative.
    """
    brightness: bool = False
    brightness_delta: float = 32.0
    contrast: bool = False
    contrast_lower: float = 0.5
    contrast_upper: float = 1.5
    saturation: bool = False
    saturation_lower: float = 0.5
    saturation_upper: float = 1.5
    hue: bool = False
    hue_delta: float = 18.0
    random_order: bool = False  # random permutation of the color channels
    prob: float = 0.5
    all_effects: bool = False

    def __post_init__(self) -> None:
        _check_prob('prob', self.prob)
        _check_non_negative('brightness_delta', self.brightness_delta)
        _check_non_negative('hue_delta', self.hue_delta)
        _check_range('contrast', self.contrast_lower, self.contrast_upper)
        _check_range('saturation', self.saturation_lower, self.saturation_upper)


@dataclass(frozen=True)
class NoiseConfig:
    """Noise and colorspace effects (immutable).

    jpeg_quality <= 0 disables the JPEG round-trip; it is not gated by prob.
    """
    decolorize: bool = False
    gauss_blur: bool = False
    hist_eq: bool = False
    clahe: bool = False
    jpeg_quality: int = -1
    erode: bool = False
    posterize: bool = False
    inverse: bool = False
    saltpepper: bool = False
    saltpepper_fraction: float = 0.0
    saltpepper_value: tuple[float, ...] = (0.0,)
    convert_to_hsv: bool = False
    convert_to_lab: bool = False
    prob: float = 0.5
    all_effects: bool = False

    def __post_init__(self) -> None:
        _check_prob('prob', self.prob)
        if self.jpeg_quality > 100:
            raise ConfigError(f"jpeg_quality must be <= 100, got {self.jpeg_quality}")
        if not 0.0 <= self.saltpepper_fraction <= 1.0:
            raise ConfigError(
                f"saltpepper_fraction must be in [0, 1], got {self.saltpepper_fraction}"
            )
        values = tuple(float(v) for v in self.saltpepper_value)
        if not values:
            raise ConfigError("saltpepper_value needs at least one value")
        if any(v < 0 or v > 255 for v in values):
            raise ConfigError(f"saltpepper_value must be in [0, 255], got {values}")
        _set(self, 'jpeg_quality', int(self.jpeg_quality))
        _set(self, 'saltpepper_value', values)


@dataclass(frozen=True)
class CropConfig:
    """Foreground crop pre-processing (immutable)."""
    enabled: bool = False
    fill_background: bool = False
    padding: int = 2

    def __post_init__(self) -> None:
        _check_non_negative('padding', self.padding)


@dataclass(frozen=True)
class TransformConfig:
    """
    Top-level augmentation configuration.

    Stages left as None are skipped by the pipeline.
    """
    crop: CropConfig | None = None
    distortion: DistortionConfig | None = None
    geometry: GeometryConfig | None = None
    resize: ResizeConfig | None = None
    noise: NoiseConfig | None = None
    seed: int | None = None


_SECTIONS: dict[str, type] = {
    'crop': CropConfig,
    'distortion': DistortionConfig,
    'geometry': GeometryConfig,
    'resize': ResizeConfig,
    'noise': NoiseConfig,
}


def config_to_dict(config: Any) -> Any:
    """
    Convert a config to plain JSON-compatible values, handling nested configs.

    Enums are stored by member name and tuples as lists.

    Args:
        config: Dataclass instance (or any nested value)

    Returns:
        Dictionary representation
    """
    if hasattr(config, '__dataclass_fields__'):
        return {f.name: config_to_dict(getattr(config, f.name)) for f in fields(config)}
    if isinstance(config, Enum):
        return config.name
    if isinstance(config, (tuple, list)):
        return [config_to_dict(v) for v in config]
    return config


def config_from_dict(config_dict: dict[str, Any]) -> TransformConfig:
    """
    Build a TransformConfig from a dictionary (e.g. parsed JSON).

    Args:
        config_dict: Mapping with optional section keys and 'seed'

    Returns:
        Validated TransformConfig

    Raises:
        ConfigError: On unknown keys or invalid values
    """
    unknown = set(config_dict) - set(_SECTIONS) - {'seed'}
    if unknown:
        raise ConfigError(f"Unknown config sections: {sorted(unknown)}")

    kwargs: dict[str, Any] = {'seed': config_dict.get('seed')}
    for name, section_cls in _SECTIONS.items():
        section = config_dict.get(name)
        if section is None:
            continue
        try:
            kwargs[name] = section_cls(**section)
        except TypeError as e:
            raise ConfigError(f"Invalid '{name}' section: {e}") from e
    return TransformConfig(**kwargs)


def save_config(config: TransformConfig, path: str | Path) -> None:
    """
    Save configuration to JSON file.

    Args:
        config: Configuration to save
        path: Output JSON file path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w') as f:
        json.dump(config_to_dict(config), f, indent=2)


def load_config(path: str | Path) -> TransformConfig:
    """
    Load configuration from JSON file.

    Args:
        path: JSON file path

    Returns:
        Validated TransformConfig
    """
    with open(path, 'r') as f:
        config_dict = json.load(f)

    return config_from_dict(config_dict)
