"""
Image Effects

Grayscale and two binarization filters applied to a rectified document to
make it read like a photocopy. Every effect returns a single-channel
uint8 matrix.
"""

import logging
from enum import Enum
from typing import Optional

import numpy as np

from src.imaging.matrix import adaptive_threshold, grayscale, threshold
from src.imaging.types import AdaptiveMethod, ThresholdMode
from src.transforms.base import Transformation

logger = logging.getLogger(__name__)

THRESHOLD_MAX_VALUE = 255.0

SIMPLE_THRESHOLD_VALUE = 127.5
ADAPTIVE_THRESHOLD_BLOCK_SIZE = 55
ADAPTIVE_THRESHOLD_CONSTANT = 15.0


class ImageEffect(Enum):
    """Effects selectable for a finished scan."""

    NONE = "none"
    GRAYSCALE = "grayscale"
    SIMPLE_THRESHOLD = "simple_threshold"
    ADAPTIVE_THRESHOLD = "adaptive_threshold"


class ImageEffectApplier:
    """Applies the document effects with fixed parameters."""

    def apply_grayscale(self, source: np.ndarray) -> np.ndarray:
        return grayscale(source)

    def apply_simple_threshold(self, source: np.ndarray) -> np.ndarray:
        """Global cut at mid-gray: pixels above 127.5 turn white, the rest black."""
        return threshold(
            grayscale(source),
            SIMPLE_THRESHOLD_VALUE,
            THRESHOLD_MAX_VALUE,
            ThresholdMode.BINARY,
        )

    def apply_adaptive_threshold(self, source: np.ndarray) -> np.ndarray:
        """
        Gaussian-weighted local threshold.

        Copes with uneven lighting across the page, where a single global
        cut would black out shadowed regions.
        """
        return adaptive_threshold(
            grayscale(source),
            max_value=THRESHOLD_MAX_VALUE,
            method=AdaptiveMethod.GAUSSIAN,
            mode=ThresholdMode.BINARY,
            block_size=ADAPTIVE_THRESHOLD_BLOCK_SIZE,
            c=ADAPTIVE_THRESHOLD_CONSTANT,
        )


class GrayscaleTransformation(Transformation):
    def __init__(self, applier: ImageEffectApplier):
        self.applier = applier

    @property
    def key(self) -> str:
        return "Grayscale"

    def transform(self, source: np.ndarray) -> np.ndarray:
        return self.applier.apply_grayscale(source)


class SimpleThresholdTransformation(Transformation):
    def __init__(self, applier: ImageEffectApplier):
        self.applier = applier

    @property
    def key(self) -> str:
        return "SimpleThreshold"

    def transform(self, source: np.ndarray) -> np.ndarray:
        return self.applier.apply_simple_threshold(source)


class AdaptiveThresholdTransformation(Transformation):
    def __init__(self, applier: ImageEffectApplier):
        self.applier = applier

    @property
    def key(self) -> str:
        return "AdaptiveThreshold"

    def transform(self, source: np.ndarray) -> np.ndarray:
        return self.applier.apply_adaptive_threshold(source)


class ImageEffectTransformationFactory:
    """
    Maps an ``ImageEffect`` to its transformation.

    Example:
        >>> factory = ImageEffectTransformationFactory()
        >>> binary = factory.create(ImageEffect.ADAPTIVE_THRESHOLD).transform(page)
    """

    def __init__(self, applier: Optional[ImageEffectApplier] = None):
        self.applier = applier if applier is not None else ImageEffectApplier()

    def create_grayscale_transformation(self) -> Transformation:
        return GrayscaleTransformation(self.applier)

    def create_simple_threshold_transformation(self) -> Transformation:
        return SimpleThresholdTransformation(self.applier)

    def create_adaptive_threshold_transformation(self) -> Transformation:
        return AdaptiveThresholdTransformation(self.applier)

    def create(self, effect: ImageEffect) -> Optional[Transformation]:
        """
        Transformation for ``effect``, or None for ``ImageEffect.NONE``.

        Raises:
            ValueError: If ``effect`` is not an ImageEffect or known value.
        """
        effect = ImageEffect(effect)

        if effect is ImageEffect.NONE:
            return None
        if effect is ImageEffect.GRAYSCALE:
            return self.create_grayscale_transformation()
        if effect is ImageEffect.SIMPLE_THRESHOLD:
            return self.create_simple_threshold_transformation()
        return self.create_adaptive_threshold_transformation()
