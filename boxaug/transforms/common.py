"""OpenCV flag tables and small helpers shared by the transforms."""
from __future__ import annotations

from typing import Sequence

import cv2
import numpy as np

from ..errors import (
    ConfigError,
    PadValueMismatchError,
    UnsupportedInterpModeError,
    UnsupportedPadModeError,
)
from ..types import InterpMode, PadMode, coerce_enum, num_channels

BORDER_FLAGS = {
    PadMode.CONSTANT: cv2.BORDER_CONSTANT,
    PadMode.MIRRORED: cv2.BORDER_REFLECT_101,
    PadMode.REPEAT_NEAREST: cv2.BORDER_REPLICATE,
}

INTERP_FLAGS = {
    InterpMode.LINEAR: cv2.INTER_LINEAR,
    InterpMode.AREA: cv2.INTER_AREA,
    InterpMode.NEAREST: cv2.INTER_NEAREST,
    InterpMode.CUBIC: cv2.INTER_CUBIC,
    InterpMode.LANCZOS4: cv2.INTER_LANCZOS4,
}


def border_flag(pad_mode: PadMode | str) -> int:
    """OpenCV border type for a pad mode."""
    return BORDER_FLAGS[coerce_enum(PadMode, pad_mode, UnsupportedPadModeError)]


def interp_flag(interp_mode: InterpMode | str) -> int:
    """OpenCV interpolation flag for an interpolation mode."""
    return INTERP_FLAGS[coerce_enum(InterpMode, interp_mode, UnsupportedInterpModeError)]


def expand_channel_values(
    values: Sequence[float],
    channels: int,
    error_cls: type[ConfigError] = PadValueMismatchError,
    what: str = 'pad_value',
) -> tuple[float, ...]:
    """
    Expand 1 or channel-count values to exactly one value per channel.

    Args:
        values: Configured values (empty = zeros)
        channels: Image channel count
        error_cls: Error raised on a count mismatch
        what: Field name for the error message

    Returns:
        Tuple with one value per channel

    Raises:
        error_cls: If len(values) is neither 0, 1 nor channels
    """
    if len(values) == 0:
        return (0.0,) * channels
    if len(values) == 1:
        return (float(values[0]),) * channels
    if len(values) == channels:
        return tuple(float(v) for v in values)
    raise error_cls(
        f"Specify either 1 {what} or as many as channels ({channels}), got {len(values)}"
    )


def restore_channels(out: np.ndarray, like: np.ndarray) -> np.ndarray:
    """Re-add the trailing channel axis OpenCV drops for (H, W, 1) inputs."""
    if like.ndim == 3 and out.ndim == 2:
        return out[:, :, np.newaxis]
    return out


def saturate_cast(values: np.ndarray, dtype: np.dtype = np.uint8) -> np.ndarray:
    """Round and clip to the value range of ``dtype`` (OpenCV saturate_cast)."""
    info = np.iinfo(dtype)
    return np.clip(np.rint(values), info.min, info.max).astype(dtype)


def is_color(image: np.ndarray) -> bool:
    return num_channels(image) > 1
