"""
Transformation interface and ordered composition.

A transformation is a pure function image -> image identified by a cache
key built from its parameters. Image loading applies a list of them in
order (rotate, resize, crop, effect, ...).
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List

import numpy as np

from src.imaging.matrix import require_image

logger = logging.getLogger(__name__)


class Transformation(ABC):
    """
    A named, pure image transformation.

    Implementations must return a new matrix and leave the source untouched.
    """

    @property
    @abstractmethod
    def key(self) -> str:
        """Stable identifier derived from the transformation's parameters."""

    @abstractmethod
    def transform(self, source: np.ndarray) -> np.ndarray:
        """Produce the transformed image."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key!r})"


class TransformationPipeline(Transformation):
    """
    Applies transformations sequentially, feeding each output to the next.

    Intermediate results are dropped as soon as the next stage has consumed
    them; only the final matrix is returned to the caller.

    Example:
        >>> pipeline = TransformationPipeline([
        ...     crop_factory.create_crop_transformation(coords, view_size),
        ...     ResizeTransformation(max_width=1080, max_height=1920),
        ... ])
        >>> result = pipeline.transform(image)
    """

    def __init__(self, transformations: Iterable[Transformation] = ()):
        self.transformations: List[Transformation] = list(transformations)

    @property
    def key(self) -> str:
        return ", ".join(transformation.key for transformation in self.transformations)

    def add(self, transformation: Transformation) -> "TransformationPipeline":
        """Append a transformation; returns self for chaining."""
        self.transformations.append(transformation)
        return self

    def transform(self, source: np.ndarray) -> np.ndarray:
        require_image(source)

        if not self.transformations:
            return source.copy()

        result = source
        for transformation in self.transformations:
            logger.debug(f"Applying {transformation.key}")
            result = transformation.transform(result)

        return result

    def __len__(self) -> int:
        return len(self.transformations)
