"""Core data types: enums, bounding boxes and crop windows."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, TypeVar

import numpy as np

from .errors import ConfigError

E = TypeVar('E', bound=Enum)


class ResizeMode(Enum):
    """How aspect ratio is handled when resizing."""
    WARP = "warp"  # Stretch each axis independently
    FIT_LARGE_SIZE_AND_PAD = "fit_large_size_and_pad"  # Fit inside box, pad the rest
    FIT_SMALL_SIZE = "fit_small_size"  # Cover the box, may exceed it on one axis


class PadMode(Enum):
    """Border fill used when padding an image."""
    CONSTANT = "constant"
    MIRRORED = "mirrored"
    REPEAT_NEAREST = "repeat_nearest"


class InterpMode(Enum):
    """Interpolation kinds available to resize."""
    LINEAR = "linear"
    AREA = "area"
    NEAREST = "nearest"
    CUBIC = "cubic"
    LANCZOS4 = "lanczos4"


class DistortOrder(Enum):
    """Effect orderings used by the photometric distorter."""
    BRIGHTNESS_CONTRAST_FIRST = (
        "brightness", "contrast", "saturation", "hue", "random_order",
    )
    CONTRAST_LAST = (
        "brightness", "saturation", "hue", "contrast", "random_order",
    )

    @property
    def effects(self) -> tuple[str, ...]:
        return self.value


def coerce_enum(
    enum_cls: type[E],
    value: E | str,
    error_cls: type[ConfigError] = ConfigError,
) -> E:
    """
    Convert an enum member, name or value into an ``enum_cls`` member.

    Args:
        enum_cls: Target enum class
        value: Member, member name (case-insensitive) or member value
        error_cls: ConfigError subclass raised for unknown values

    Returns:
        Enum member

    Raises:
        error_cls: If value does not name a member of enum_cls
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.upper()
        if key in enum_cls.__members__:
            return enum_cls.__members__[key]
    try:
        return enum_cls(value)
    except ValueError:
        raise error_cls(
            f"Unsupported {enum_cls.__name__} '{value}'. "
            f"Available: {[m.name for m in enum_cls]}"
        ) from None


def num_channels(image: np.ndarray) -> int:
    """Channel count of an (H, W) or (H, W, C) image."""
    return 1 if image.ndim == 2 else image.shape[2]


@dataclass
class NormalizedBBox:
    """
    Bounding box with corners relative to image width and height.

    Mutable so that resize remapping can update annotations in place.

    Attributes:
        xmin: Left edge in [0, 1]
        ymin: Top edge in [0, 1]
        xmax: Right edge in [0, 1]
        ymax: Bottom edge in [0, 1]
    """
    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> NormalizedBBox:
        if len(values) != 4:
            raise ValueError(f"Expected 4 coordinates, got {len(values)}")
        return cls(*(float(v) for v in values))

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.xmin, self.ymin, self.xmax, self.ymax)


@dataclass(frozen=True)
class CropWindow:
    """Axis-aligned pixel window (immutable)."""
    x: int
    y: int
    width: int
    height: int

    def slices(self) -> tuple[slice, slice]:
        """Row and column slices for numpy indexing."""
        return (
            slice(self.y, self.y + self.height),
            slice(self.x, self.x + self.width),
        )
