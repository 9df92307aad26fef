"""
Quadrilateral ("document shape") value type.

A Quadrilateral always carries all four corner roles. Partially assigned
shapes do not exist: code that cannot assign every role returns ``None``
instead (see ``src.rectification.orderer``).
"""

from itertools import combinations
from typing import List, Tuple

import numpy as np
from pydantic import BaseModel, Field

from src.common.types import Point
from src.geometry.measurements import calculate_edge_lengths


class Quadrilateral(BaseModel):
    """
    Four corner points of a document outline in image pixel coordinates.

    Attributes:
        top_left: Corner above and left of the shape's centre.
        top_right: Corner above and right of the shape's centre.
        bottom_left: Corner below and left of the shape's centre.
        bottom_right: Corner below and right of the shape's centre.

    Example:
        >>> shape = Quadrilateral.from_image_bounds(width=600, height=800)
        >>> shape.bottom_right
        Point(x=600.0, y=800.0)
    """

    top_left: Point = Field(..., description="Top-left corner")
    top_right: Point = Field(..., description="Top-right corner")
    bottom_left: Point = Field(..., description="Bottom-left corner")
    bottom_right: Point = Field(..., description="Bottom-right corner")

    model_config = {"frozen": True}

    @classmethod
    def from_points(cls, points: List[Point]) -> "Quadrilateral":
        """
        Build a shape from points already in [TL, TR, BL, BR] order.

        No classification happens here; use the corner orderer for
        unordered input.
        """
        if len(points) != 4:
            raise ValueError(f"Expected exactly 4 points, got {len(points)}")
        return cls(
            top_left=points[0],
            top_right=points[1],
            bottom_left=points[2],
            bottom_right=points[3],
        )

    @classmethod
    def from_image_bounds(cls, width: float, height: float) -> "Quadrilateral":
        """Shape covering a whole image of the given size."""
        return cls(
            top_left=Point(x=0, y=0),
            top_right=Point(x=width, y=0),
            bottom_left=Point(x=0, y=height),
            bottom_right=Point(x=width, y=height),
        )

    def to_points(self) -> List[Point]:
        """Corners in [TL, TR, BL, BR] order."""
        return [self.top_left, self.top_right, self.bottom_left, self.bottom_right]

    def to_unordered_points(self) -> List[Point]:
        """
        Corners as a role-free list, in clockwise traversal order.

        The order differs from ``to_points`` on purpose so that feeding the
        result to the orderer exercises the classification, not a pass-through.
        """
        return [self.top_right, self.bottom_right, self.bottom_left, self.top_left]

    def to_numpy(self, dtype: type = np.float32) -> np.ndarray:
        """Corners as an array of shape (4, 2) in [TL, TR, BL, BR] order."""
        return np.array([point.to_list() for point in self.to_points()], dtype=dtype)

    def scale(self, scale_x: float, scale_y: float) -> "Quadrilateral":
        """Return a new shape with every corner scaled per axis."""
        return Quadrilateral.from_points(
            [point.scale(scale_x, scale_y) for point in self.to_points()]
        )

    def edge_lengths(self) -> Tuple[float, float, float, float]:
        """Edge lengths as (top, bottom, left, right)."""
        return calculate_edge_lengths(self)

    @property
    def has_distinct_corners(self) -> bool:
        """True when no two corners share the same coordinates."""
        return all(a != b for a, b in combinations(self.to_points(), 2))

    def __repr__(self) -> str:
        return (
            f"Quadrilateral(TL={self.top_left.to_tuple()}, "
            f"TR={self.top_right.to_tuple()}, "
            f"BL={self.bottom_left.to_tuple()}, "
            f"BR={self.bottom_right.to_tuple()})"
        )
