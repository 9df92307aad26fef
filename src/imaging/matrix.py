"""
Image Matrix Operations

Primitive numeric-image operations used by the shape detector, the effect
filters and the transformation pipeline. Matrices are numpy arrays in the
OpenCV layout: (H, W) single-channel or (H, W, C) with BGR(A) channel order,
uint8 samples.

Every operation allocates its output; inputs are never modified. Operations
on an empty or malformed matrix raise InvalidImageError.
"""

import logging
from typing import List, Optional, Sequence, Union

import cv2
import numpy as np
from pydantic import ValidationError

from src.common.exceptions import InvalidImageError
from src.common.types import ImageBuffer, Point
from src.imaging.types import AdaptiveMethod, ThresholdMode, interpolation_flag

logger = logging.getLogger(__name__)

PointsLike = Union[np.ndarray, Sequence[Point]]


def require_image(matrix: np.ndarray) -> ImageBuffer:
    """
    Validate an image matrix.

    Args:
        matrix: Candidate image matrix.

    Returns:
        The matrix wrapped in an ImageBuffer (no copy is made).

    Raises:
        InvalidImageError: If the matrix is None, empty, has an unsupported
            shape or is not uint8.
    """
    if matrix is None:
        raise InvalidImageError("Invalid input image: image is None")
    try:
        return ImageBuffer(data=matrix)
    except ValidationError as e:
        raise InvalidImageError(f"Invalid input image: {e.errors()[0]['msg']}") from e


def _require_single_channel(matrix: np.ndarray, operation: str) -> np.ndarray:
    buffer = require_image(matrix)
    if not buffer.is_grayscale:
        raise InvalidImageError(
            f"{operation} requires a single-channel image, got shape {buffer.shape}"
        )
    return buffer.data.reshape(buffer.height, buffer.width)


def _validate_kernel_size(kernel_size: int, minimum: int = 1) -> None:
    if kernel_size < minimum or kernel_size % 2 == 0:
        raise ValueError(
            f"Kernel size must be an odd number >= {minimum}, got {kernel_size}"
        )


def grayscale(matrix: np.ndarray) -> np.ndarray:
    """
    Convert a BGR/BGRA matrix to a single-channel luminance matrix.

    Single-channel input is returned as a 2D copy.
    """
    buffer = require_image(matrix)

    if buffer.channels == 1:
        return buffer.data.reshape(buffer.height, buffer.width).copy()
    if buffer.channels == 4:
        return cv2.cvtColor(buffer.data, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(buffer.data, cv2.COLOR_BGR2GRAY)


def gaussian_blur(matrix: np.ndarray, kernel_size: int, sigma: float = 0.0) -> np.ndarray:
    """Gaussian smoothing with a square odd-sized kernel."""
    buffer = require_image(matrix)
    _validate_kernel_size(kernel_size)
    return cv2.GaussianBlur(buffer.data, (kernel_size, kernel_size), sigma)


def median_blur(matrix: np.ndarray, kernel_size: int) -> np.ndarray:
    """
    Median filter. Removes speckle noise while keeping straight edges sharp,
    which suits document outlines better than a Gaussian.
    """
    buffer = require_image(matrix)
    _validate_kernel_size(kernel_size, minimum=3)
    return cv2.medianBlur(buffer.data, kernel_size)


def canny_edges(matrix: np.ndarray, low_threshold: float, high_threshold: float) -> np.ndarray:
    """Binary edge map (0/255) from the Canny detector."""
    buffer = require_image(matrix)
    if low_threshold < 0 or high_threshold < low_threshold:
        raise ValueError(
            f"Invalid Canny thresholds: low={low_threshold}, high={high_threshold}"
        )
    return cv2.Canny(buffer.data, low_threshold, high_threshold)


def dilate(
    matrix: np.ndarray, kernel: Optional[np.ndarray] = None, iterations: int = 1
) -> np.ndarray:
    """
    Morphological dilation. Closes small gaps between edge segments.

    Args:
        matrix: Input matrix, typically a Canny edge map.
        kernel: Structuring element; a 3x3 block of ones when omitted.
        iterations: Number of times dilation is applied.
    """
    buffer = require_image(matrix)
    if kernel is None:
        kernel = np.ones((3, 3), dtype=np.uint8)
    return cv2.dilate(buffer.data, kernel, iterations=iterations)


def threshold(
    matrix: np.ndarray,
    threshold_value: float,
    max_value: float,
    mode: ThresholdMode = ThresholdMode.BINARY,
) -> np.ndarray:
    """
    Global binarization.

    Pixels strictly above ``threshold_value`` become ``max_value`` (BINARY)
    or 0 (BINARY_INV); the rest take the opposite value.
    """
    buffer = require_image(matrix)
    _, binary = cv2.threshold(buffer.data, threshold_value, max_value, mode.value)
    return binary


def adaptive_threshold(
    matrix: np.ndarray,
    max_value: float,
    method: AdaptiveMethod,
    mode: ThresholdMode,
    block_size: int,
    c: float,
) -> np.ndarray:
    """
    Binarization with a per-neighbourhood cutoff.

    Args:
        matrix: Single-channel input.
        max_value: Value assigned to pixels passing the test.
        method: Mean or Gaussian-weighted neighbourhood.
        mode: BINARY or BINARY_INV.
        block_size: Odd neighbourhood size, at least 3.
        c: Constant subtracted from the neighbourhood statistic.

    Raises:
        InvalidImageError: If the input has more than one channel.
        ValueError: If ``block_size`` is not an odd number >= 3.
    """
    gray = _require_single_channel(matrix, "Adaptive threshold")
    _validate_kernel_size(block_size, minimum=3)
    return cv2.adaptiveThreshold(
        gray, max_value, method.value, mode.value, block_size, c
    )


def extract_channel(matrix: np.ndarray, index: int) -> np.ndarray:
    """Copy one channel out of a multi-channel matrix as a 2D matrix."""
    buffer = require_image(matrix)
    if not 0 <= index < buffer.channels:
        raise ValueError(
            f"Channel index {index} out of range for {buffer.channels} channel(s)"
        )
    if buffer.channels == 1:
        return buffer.data.reshape(buffer.height, buffer.width).copy()
    return cv2.extractChannel(buffer.data, index)


def split_channels(matrix: np.ndarray) -> List[np.ndarray]:
    """Every channel of the matrix as separate 2D matrices."""
    buffer = require_image(matrix)
    return [extract_channel(buffer.data, i) for i in range(buffer.channels)]


def resize(
    matrix: np.ndarray, width: int, height: int, interpolation: str = "linear"
) -> np.ndarray:
    """
    Resample to an exact pixel size.

    Raises:
        ValueError: If either target dimension is below 1 pixel.
    """
    buffer = require_image(matrix)
    if width < 1 or height < 1:
        raise ValueError(f"Target size must be at least 1x1, got {width}x{height}")
    return cv2.resize(
        buffer.data,
        (int(width), int(height)),
        interpolation=interpolation_flag(interpolation),
    )


def rotate(matrix: np.ndarray, degrees: float) -> np.ndarray:
    """
    Rotate clockwise by ``degrees``.

    Multiples of 90 degrees are exact pixel permutations. Other angles are
    resampled bilinearly onto a canvas grown to hold the whole rotated image;
    uncovered areas are black.
    """
    buffer = require_image(matrix)
    quarter_turns = {
        90: cv2.ROTATE_90_CLOCKWISE,
        180: cv2.ROTATE_180,
        270: cv2.ROTATE_90_COUNTERCLOCKWISE,
    }
    normalized = degrees % 360

    if normalized == 0:
        return buffer.data.copy()
    if normalized in quarter_turns:
        return cv2.rotate(buffer.data, quarter_turns[int(normalized)])

    center = (buffer.width / 2.0, buffer.height / 2.0)
    rotation = cv2.getRotationMatrix2D(center, -normalized, 1.0)
    cos = abs(rotation[0, 0])
    sin = abs(rotation[0, 1])
    new_width = int(round(buffer.height * sin + buffer.width * cos))
    new_height = int(round(buffer.height * cos + buffer.width * sin))
    rotation[0, 2] += new_width / 2.0 - center[0]
    rotation[1, 2] += new_height / 2.0 - center[1]

    return cv2.warpAffine(
        buffer.data, rotation, (new_width, new_height), flags=cv2.INTER_LINEAR
    )


def find_contours(binary: np.ndarray) -> List[np.ndarray]:
    """
    Trace every closed boundary in a binary matrix.

    Returns all contours (outer and inner, RETR_LIST) compressed to their
    corner points (CHAIN_APPROX_SIMPLE), each of shape (N, 1, 2) int32. The
    list is in the tracing algorithm's order, not sorted by size.
    """
    gray = _require_single_channel(binary, "Contour search")
    # [-2] keeps this working with both the 3-tuple and 2-tuple return forms
    contours = cv2.findContours(gray, cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE)[-2]
    logger.debug(f"Found {len(contours)} contours")
    return list(contours)


def approx_polygon(
    contour: PointsLike, epsilon_ratio: float = 0.02, closed: bool = True
) -> np.ndarray:
    """
    Douglas-Peucker simplification of a contour.

    Args:
        contour: Contour points (array of shape (N, 1, 2) / (N, 2) or Points).
        epsilon_ratio: Maximum deviation as a fraction of the contour's
                       arc length (0.02 = 2 %).
        closed: Treat the curve as closed.

    Returns:
        Simplified polygon, float32 array of shape (M, 1, 2).
    """
    curve = _as_curve(contour)
    if epsilon_ratio < 0:
        raise ValueError(f"epsilon_ratio cannot be negative, got {epsilon_ratio}")
    perimeter = cv2.arcLength(curve, closed)
    return cv2.approxPolyDP(curve, epsilon_ratio * perimeter, closed)


def contour_area(points: PointsLike) -> float:
    """Absolute area enclosed by a polygon."""
    return abs(float(cv2.contourArea(_as_curve(points))))


def is_convex(points: PointsLike) -> bool:
    """True if the polygon is convex (and not self-intersecting)."""
    return bool(cv2.isContourConvex(_as_curve(points)))


def _as_curve(points: PointsLike) -> np.ndarray:
    if isinstance(points, np.ndarray):
        curve = points.astype(np.float32).reshape(-1, 1, 2)
    else:
        curve = np.array(
            [point.to_list() for point in points], dtype=np.float32
        ).reshape(-1, 1, 2)
    if len(curve) == 0:
        raise ValueError("Polygon has no points")
    return curve
