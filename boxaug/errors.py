"""Exception hierarchy for augmentation configuration errors."""
from __future__ import annotations


class AugmentationError(Exception):
    """Base class for all boxaug errors."""


class ConfigError(AugmentationError, ValueError):
    """Invalid or unsupported augmentation configuration.

    Raised before any pixel work starts. Never retried.
    """


class UnsupportedResizeModeError(ConfigError):
    """Resize mode is not one of the known ResizeMode values."""


class UnsupportedPadModeError(ConfigError):
    """Pad mode is not one of the known PadMode values."""


class UnsupportedInterpModeError(ConfigError):
    """Interpolation mode is not one of the known InterpMode values."""


class PadValueMismatchError(ConfigError):
    """Pad value count is neither 1 nor the image channel count."""


class SaltPepperValueMismatchError(ConfigError):
    """Salt-and-pepper fill value count is neither 1 nor the channel count."""


class InvalidProbabilityError(ConfigError):
    """Probability vector is empty, negative, or sums to zero."""
