"""
Enumerations and lookup tables for the image matrix adapter.
"""

from enum import Enum

import cv2


class ThresholdMode(Enum):
    """Binarization direction."""

    BINARY = cv2.THRESH_BINARY  # Above threshold -> max value
    BINARY_INV = cv2.THRESH_BINARY_INV  # Above threshold -> 0


class AdaptiveMethod(Enum):
    """How the local threshold of an adaptive binarization is computed."""

    MEAN = cv2.ADAPTIVE_THRESH_MEAN_C  # Plain neighbourhood mean
    GAUSSIAN = cv2.ADAPTIVE_THRESH_GAUSSIAN_C  # Gaussian-weighted neighbourhood


INTERPOLATION_FLAGS = {
    "linear": cv2.INTER_LINEAR,
    "cubic": cv2.INTER_CUBIC,
    "nearest": cv2.INTER_NEAREST,
    "area": cv2.INTER_AREA,
    "lanczos": cv2.INTER_LANCZOS4,
}


def interpolation_flag(name: str) -> int:
    """
    Map an interpolation name to its OpenCV flag.

    Raises:
        ValueError: If the name is unknown.
    """
    try:
        return INTERPOLATION_FLAGS[name]
    except KeyError:
        raise ValueError(
            f"Invalid interpolation: {name}. "
            f"Must be one of {sorted(INTERPOLATION_FLAGS)}"
        ) from None
