"""
Image Matrix Adapter

Bitmap <-> matrix conversion and the primitive image operations
(grayscale, blur, edges, thresholds, contours, polygon approximation)
the detector and effect filters are built from.
"""

from src.imaging.bitmap import to_bitmap, to_matrix
from src.imaging.matrix import (
    adaptive_threshold,
    approx_polygon,
    canny_edges,
    contour_area,
    dilate,
    extract_channel,
    find_contours,
    gaussian_blur,
    grayscale,
    is_convex,
    median_blur,
    require_image,
    resize,
    rotate,
    split_channels,
    threshold,
)
from src.imaging.types import AdaptiveMethod, ThresholdMode

__all__ = [
    "AdaptiveMethod",
    "ThresholdMode",
    "adaptive_threshold",
    "approx_polygon",
    "canny_edges",
    "contour_area",
    "dilate",
    "extract_channel",
    "find_contours",
    "gaussian_blur",
    "grayscale",
    "is_convex",
    "median_blur",
    "require_image",
    "resize",
    "rotate",
    "split_channels",
    "threshold",
    "to_bitmap",
    "to_matrix",
]
