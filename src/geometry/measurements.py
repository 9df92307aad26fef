"""
Distance and angle measurements on 2D points.

Used by the shape detector to judge whether a polygon looks like a
rectangle and by the perspective transformer to size its output.
"""

import logging
import math
from typing import Sequence, Tuple, Union

import numpy as np

from src.common.types import Point

logger = logging.getLogger(__name__)

# Keeps the cosine finite when two polygon vertices coincide.
_COSINE_EPSILON = 1e-10


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def distance(point1: Point, point2: Point) -> float:
    """Euclidean distance between two points."""
    dx = point2.x - point1.x
    dy = point2.y - point1.y
    return math.sqrt((dx * dx) + (dy * dy))


def centroid(points: Sequence[Point]) -> Point:
    """
    Arithmetic mean of a set of points.

    Args:
        points: Non-empty sequence of points.

    Returns:
        The centre point.

    Raises:
        ValueError: If ``points`` is empty.
    """
    if not points:
        raise ValueError("Cannot compute the centroid of an empty point set")

    count = len(points)
    center_x = sum(point.x for point in points) / count
    center_y = sum(point.y for point in points) / count
    return Point(x=center_x, y=center_y)


def angle_cosine(point1: Point, point2: Point, point0: Point) -> float:
    """
    Cosine of the angle at ``point0`` between vectors point0->point1 and point0->point2.

    Computed as the dot product over the product of magnitudes. A value of 0
    means a right angle; values approaching 1 in absolute terms mean the two
    edges are close to collinear.

    Example:
        >>> angle_cosine(Point(x=1, y=0), Point(x=0, y=1), Point(x=0, y=0))
        0.0
    """
    dx1 = point1.x - point0.x
    dy1 = point1.y - point0.y

    dx2 = point2.x - point0.x
    dy2 = point2.y - point0.y

    numerator = (dx1 * dx2) + (dy1 * dy2)
    denominator = math.sqrt(
        ((dx1 * dx1) + (dy1 * dy1)) * ((dx2 * dx2) + (dy2 * dy2)) + _COSINE_EPSILON
    )

    return numerator / denominator


def calculate_edge_lengths(shape) -> Tuple[float, float, float, float]:
    """
    Euclidean lengths of the four edges of a role-ordered shape.

    Args:
        shape: Any object with top_left, top_right, bottom_left and
               bottom_right Points (a Quadrilateral).

    Returns:
        Tuple of (top, bottom, left, right) where top is TL->TR,
        bottom is BL->BR, left is TL->BL and right is TR->BR.
    """
    top = distance(shape.top_left, shape.top_right)
    bottom = distance(shape.bottom_left, shape.bottom_right)
    left = distance(shape.top_left, shape.bottom_left)
    right = distance(shape.top_right, shape.bottom_right)
    return top, bottom, left, right


def max_vertex_cosine(polygon: Union[np.ndarray, Sequence[Point]]) -> float:
    """
    Largest absolute cosine over every vertex angle of a closed polygon.

    Args:
        polygon: Vertices in traversal order, either as Points or as an array
                 of shape (N, 2) or (N, 1, 2).

    Returns:
        Maximum |cos| in [0, 1]. A perfect rectangle yields ~0.
    """
    points = _as_points(polygon)
    count = len(points)
    if count < 3:
        raise ValueError(f"A polygon needs at least 3 vertices, got {count}")

    max_cosine = 0.0
    for i in range(count):
        cosine = abs(
            angle_cosine(points[i - 1], points[(i + 1) % count], points[i])
        )
        max_cosine = max(max_cosine, cosine)

    logger.debug(f"Max vertex cosine over {count} vertices: {max_cosine:.3f}")

    return max_cosine


def _as_points(polygon: Union[np.ndarray, Sequence[Point]]) -> list:
    if isinstance(polygon, np.ndarray):
        return [Point.from_numpy(vertex) for vertex in polygon.reshape(-1, 2)]
    return list(polygon)
