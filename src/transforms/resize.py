"""
Aspect-preserving resize into a bounding box.
"""

import logging
from typing import Tuple

import numpy as np

from src.geometry.measurements import round_half_up
from src.imaging.matrix import require_image, resize
from src.transforms.base import Transformation

logger = logging.getLogger(__name__)


def calculate_optimal_size(
    width: int, height: int, max_width: int, max_height: int
) -> Tuple[int, int]:
    """
    Largest size with the source's aspect ratio that fits the bounds.

    Height is pinned to ``max_height`` first; if the resulting width
    overflows ``max_width``, width is pinned instead and height shrunk by
    the same factor. Images smaller than the bounds are scaled up.

    Args:
        width: Source width in pixels.
        height: Source height in pixels.
        max_width: Bounding width.
        max_height: Bounding height.

    Returns:
        (width, height) of the resized image.

    Example:
        >>> calculate_optimal_size(1000, 2000, 1080, 1920)
        (960, 1920)
        >>> calculate_optimal_size(2000, 1000, 1080, 1920)
        (1080, 540)
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Source size must be positive, got {width}x{height}")
    if max_width <= 0 or max_height <= 0:
        raise ValueError(f"Bounds must be positive, got {max_width}x{max_height}")

    aspect_ratio = width / height
    adjusted_width = round_half_up(aspect_ratio * max_height)

    if adjusted_width <= max_width:
        return max(adjusted_width, 1), max_height

    adjusted_height = round_half_up(max_width / adjusted_width * max_height)
    return max_width, max(adjusted_height, 1)


class ResizeTransformation(Transformation):
    """
    Resize to fit within ``max_width`` x ``max_height``.

    Args:
        max_width: Bounding width in pixels.
        max_height: Bounding height in pixels.
        interpolation: Resampling method name.
    """

    def __init__(self, max_width: int, max_height: int, interpolation: str = "linear"):
        if max_width <= 0 or max_height <= 0:
            raise ValueError(f"Bounds must be positive, got {max_width}x{max_height}")
        self.max_width = max_width
        self.max_height = max_height
        self.interpolation = interpolation

    @property
    def key(self) -> str:
        return f"Resize. Max Width: {self.max_width}. Max Height: {self.max_height}."

    def transform(self, source: np.ndarray) -> np.ndarray:
        buffer = require_image(source)
        width, height = calculate_optimal_size(
            buffer.width, buffer.height, self.max_width, self.max_height
        )

        logger.debug(f"Resizing {buffer.width}x{buffer.height} -> {width}x{height}")

        return resize(buffer.data, width, height, interpolation=self.interpolation)
