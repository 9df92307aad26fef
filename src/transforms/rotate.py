"""
Clockwise rotation, typically to undo camera orientation.
"""

import numpy as np

from src.imaging.matrix import rotate
from src.transforms.base import Transformation


class RotateTransformation(Transformation):
    """Rotate clockwise by a fixed number of degrees."""

    def __init__(self, degrees: float):
        self.degrees = degrees

    @property
    def key(self) -> str:
        return f"Rotate. Degrees: {self.degrees:g}."

    def transform(self, source: np.ndarray) -> np.ndarray:
        return rotate(source, self.degrees)
