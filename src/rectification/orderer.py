"""
Corner Orderer

Assigns four unordered points to the top-left / top-right / bottom-left /
bottom-right roles by their quadrant relative to the points' centroid.

This is the single validity check for document shapes: a shape is valid
exactly when the orderer can assign every role to exactly one point. The
detector, the crop transformation and any editing UI that lets users drag
corner handles all go through ``order_corners`` / ``has_valid_shape``.
"""

import logging
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from src.common.types import Point
from src.geometry.measurements import centroid
from src.geometry.shapes import Quadrilateral

logger = logging.getLogger(__name__)

PointsInput = Union[Sequence[Point], np.ndarray]

_ROLES = ("top_left", "top_right", "bottom_left", "bottom_right")


def _classify(point: Point, center: Point) -> Optional[str]:
    """Quadrant role of a point; None when it lies on a centre axis."""
    if point.x < center.x and point.y < center.y:
        return "top_left"
    if point.x > center.x and point.y < center.y:
        return "top_right"
    if point.x < center.x and point.y > center.y:
        return "bottom_left"
    if point.x > center.x and point.y > center.y:
        return "bottom_right"
    return None


def _to_points(points: PointsInput) -> List[Point]:
    if isinstance(points, np.ndarray):
        return [Point.from_numpy(row) for row in points.reshape(-1, 2)]
    return list(points)


def order_corners(points: PointsInput) -> Optional[Quadrilateral]:
    """
    Classify four points into corner roles.

    Args:
        points: Four points in any order, as Points or as an array of
                shape (4, 2) / (4, 1, 2).

    Returns:
        The ordered Quadrilateral, or None when the input does not hold
        exactly four points or some role ends up with zero or several
        points (ties with the centroid, collinear or duplicated points).

    Example:
        >>> shape = order_corners([
        ...     Point(x=500, y=700), Point(x=100, y=100),
        ...     Point(x=100, y=700), Point(x=500, y=100),
        ... ])
        >>> shape.top_right
        Point(x=500.0, y=100.0)
    """
    corners = _to_points(points)

    if len(corners) != 4:
        logger.debug(f"Cannot order {len(corners)} points, expected 4")
        return None

    center = centroid(corners)
    assigned: Dict[str, List[Point]] = {role: [] for role in _ROLES}

    for corner in corners:
        role = _classify(corner, center)
        if role is not None:
            assigned[role].append(corner)

    roles: Dict[str, Optional[Point]] = {
        role: (candidates[0] if len(candidates) == 1 else None)
        for role, candidates in assigned.items()
    }

    missing = [role for role, corner in roles.items() if corner is None]
    if missing:
        logger.debug(
            f"Corner ordering failed around centre {center.to_tuple()}: "
            f"unassigned roles {missing}"
        )
        return None

    return Quadrilateral(**roles)


def has_valid_shape(shape: Union[Quadrilateral, PointsInput, None]) -> bool:
    """
    Check whether a shape can be handed to the perspective transformer.

    Raw points only need to be orderable. A ``Quadrilateral`` must also
    carry the roles ordering would give it, since the transformer rejects
    shapes whose roles contradict their positions.

    Used to gate "confirm crop" style actions before any warp is attempted.
    """
    if shape is None:
        return False
    if isinstance(shape, Quadrilateral):
        return order_corners(shape.to_points()) == shape
    return order_corners(shape) is not None


class DocCoordsOrderer:
    """Object wrapper around ``order_corners`` for injection into collaborators."""

    def order(self, points: PointsInput) -> Optional[Quadrilateral]:
        return order_corners(points)

    def has_valid_shape(self, shape: Union[Quadrilateral, PointsInput, None]) -> bool:
        return has_valid_shape(shape)
