"""
Corner ordering and perspective rectification.

Pipeline stages:
1. Corner ordering (quadrant classification around the centroid)
2. Output size estimation (mean of opposite edges)
3. Perspective warp onto an upright rectangle
"""

from src.rectification.orderer import DocCoordsOrderer, has_valid_shape, order_corners
from src.rectification.perspective import (
    ImagePerspectiveTransformer,
    calculate_output_dimensions,
    calculate_output_size,
    transform_perspective,
)

__all__ = [
    "DocCoordsOrderer",
    "ImagePerspectiveTransformer",
    "calculate_output_dimensions",
    "calculate_output_size",
    "has_valid_shape",
    "order_corners",
    "transform_perspective",
]
