"""
Perspective Rectification

Warps the region enclosed by a document shape onto an upright rectangle,
as if the page had been scanned flat.

The output size averages opposite edges: perspective foreshortening makes
the near edge of a photographed page longer than the far one, and the mean
is a better estimate of the true proportions than either edge alone.
"""

import logging
from typing import Tuple

import cv2
import numpy as np

from src.common.exceptions import DegenerateShapeError
from src.common.types import Size
from src.geometry.measurements import round_half_up
from src.geometry.shapes import Quadrilateral
from src.imaging.matrix import require_image
from src.imaging.types import interpolation_flag
from src.rectification.orderer import order_corners

logger = logging.getLogger(__name__)


def calculate_output_size(shape: Quadrilateral) -> Size:
    """
    Estimate the rectified size of a shape.

    Args:
        shape: Ordered document shape.

    Returns:
        Size with width = mean(top, bottom) and height = mean(left, right).

    Raises:
        DegenerateShapeError: If either dimension is zero.

    Example:
        >>> shape = Quadrilateral.from_image_bounds(width=100, height=200)
        >>> calculate_output_size(shape)
        Size(width=100.0, height=200.0)
    """
    top, bottom, left, right = shape.edge_lengths()

    logger.debug(
        f"Edge lengths - Top: {top:.1f}, Bottom: {bottom:.1f}, "
        f"Left: {left:.1f}, Right: {right:.1f}"
    )

    width = (top + bottom) / 2.0
    height = (left + right) / 2.0

    if width <= 0 or height <= 0:
        raise DegenerateShapeError(
            f"Shape has a zero-length side: width={width:.2f}, height={height:.2f}"
        )

    return Size(width=width, height=height)


def calculate_output_dimensions(shape: Quadrilateral) -> Tuple[int, int]:
    """
    Pixel dimensions of the rectified output, rounded half-up.

    Raises:
        DegenerateShapeError: If either dimension rounds below one pixel.
    """
    size = calculate_output_size(shape)
    width = round_half_up(size.width)
    height = round_half_up(size.height)

    if width < 1 or height < 1:
        raise DegenerateShapeError(
            f"Rectified size too small: {size.width:.2f}x{size.height:.2f} "
            f"rounds to {width}x{height}"
        )

    return width, height


def _validate_shape(shape: Quadrilateral) -> None:
    ordered = order_corners(shape.to_points())

    if ordered is None:
        raise DegenerateShapeError(
            f"Corners cannot be ordered (collinear, duplicated or misplaced): {shape!r}"
        )
    if ordered != shape:
        raise DegenerateShapeError(
            f"Corner roles do not match their positions: got {shape!r}, "
            f"expected {ordered!r}"
        )


def transform_perspective(
    image: np.ndarray, shape: Quadrilateral, interpolation: str = "linear"
) -> np.ndarray:
    """
    Rectify the quadrilateral region of an image to a rectangle.

    Args:
        image: Source image (H, W) or (H, W, C), uint8. Not modified.
        shape: Ordered corners in the image's pixel space. Must pass
               ``has_valid_shape``.
        interpolation: Sampling method name ("linear", "cubic", "nearest",
                       "area", "lanczos").

    Returns:
        New image of size (round(mean(top, bottom)), round(mean(left, right))).

    Raises:
        InvalidImageError: If the image is empty or malformed.
        DegenerateShapeError: If the shape is invalid or its output size
            rounds to zero.

    Example:
        >>> image = cv2.imread("page.jpg")
        >>> shape = detect_shape(image)
        >>> flat = transform_perspective(image, shape)
    """
    buffer = require_image(image)
    _validate_shape(shape)
    width, height = calculate_output_dimensions(shape)
    flags = interpolation_flag(interpolation)

    source = shape.to_numpy(dtype=np.float32)
    destination = np.array(
        [
            [0, 0],  # Top-Left
            [width, 0],  # Top-Right
            [0, height],  # Bottom-Left
            [width, height],  # Bottom-Right
        ],
        dtype=np.float32,
    )

    try:
        matrix = cv2.getPerspectiveTransform(source, destination)
    except cv2.error as e:
        raise DegenerateShapeError(f"Homography solve failed for {shape!r}: {e}") from e

    if not np.all(np.isfinite(matrix)) or abs(np.linalg.det(matrix)) < 1e-12:
        raise DegenerateShapeError(f"Singular homography for {shape!r}")

    rectified = cv2.warpPerspective(buffer.data, matrix, (width, height), flags=flags)

    logger.info(
        f"Rectified {buffer.width}x{buffer.height} image region to {width}x{height}"
    )

    return rectified


class ImagePerspectiveTransformer:
    """
    Perspective transformer bound to one interpolation method.

    Example:
        >>> transformer = ImagePerspectiveTransformer(interpolation="cubic")
        >>> flat = transformer.transform_perspective(image, shape)
    """

    def __init__(self, interpolation: str = "linear"):
        interpolation_flag(interpolation)
        self.interpolation = interpolation

    def transform_perspective(self, image: np.ndarray, shape: Quadrilateral) -> np.ndarray:
        return transform_perspective(image, shape, interpolation=self.interpolation)
