"""
Data types for the Detection module.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np

from src.geometry.shapes import Quadrilateral


class DetectionSource(Enum):
    """Where the returned shape came from."""

    CONTOUR = "contour"  # Largest accepted rectangle candidate
    IMAGE_BOUNDS = "image_bounds"  # Fallback: the whole image


@dataclass
class RectangleCandidate:
    """
    A polygon accepted as a possible document outline.

    Attributes:
        polygon: Four vertices in working-image coordinates, shape (4, 1, 2).
        area: Absolute polygon area in working-image pixels.
        channel: Colour plane index the polygon was found in (-1 for grayscale).
        level: Threshold level (0 = Canny pass).
    """

    polygon: np.ndarray
    area: float
    channel: int
    level: int


@dataclass
class DetectionResult:
    """
    Output of a detection run.

    Attributes:
        shape: Ordered corners in original-image pixel space. Always set.
        source: CONTOUR or IMAGE_BOUNDS.
        candidate_count: Number of candidates accepted across all passes.
        scale_ratio: Working-copy scale factor used for the search.
        area_ratio: Chosen candidate's share of the image area (1.0 for the
            fallback).
    """

    shape: Quadrilateral
    source: DetectionSource
    candidate_count: int
    scale_ratio: float
    area_ratio: float

    @property
    def is_fallback(self) -> bool:
        """True when no document was found and the whole image was returned."""
        return self.source == DetectionSource.IMAGE_BOUNDS
