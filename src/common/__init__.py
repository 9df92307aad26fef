"""
Common types and errors shared across all modules.

This module provides the value types (images, points, sizes) and the error
taxonomy used by the geometry, imaging, detection, rectification and
transformation packages.
"""

from src.common.exceptions import DegenerateShapeError, InvalidImageError, ScannerError
from src.common.types import ImageBuffer, Point, Size

__all__ = [
    "ImageBuffer",
    "Point",
    "Size",
    "ScannerError",
    "InvalidImageError",
    "DegenerateShapeError",
]
