"""
Crop transformation.

Crop handles are placed on an on-screen preview, so their coordinates live
in the preview's space. The transformation maps them into the source
image's pixel space (per-axis ratio source / view) before warping.
"""

import logging
from typing import List, Optional

import numpy as np
from pydantic import BaseModel, Field

from src.common.exceptions import DegenerateShapeError
from src.common.types import Point, Size
from src.imaging.matrix import require_image
from src.rectification.orderer import order_corners
from src.rectification.perspective import ImagePerspectiveTransformer
from src.transforms.base import Transformation

logger = logging.getLogger(__name__)


class CropCoords(BaseModel):
    """
    Corner handle positions in preview coordinates.

    Attributes:
        top_left: Top-left handle.
        top_right: Top-right handle.
        bottom_left: Bottom-left handle.
        bottom_right: Bottom-right handle.
    """

    top_left: Point = Field(..., description="Top-left handle")
    top_right: Point = Field(..., description="Top-right handle")
    bottom_left: Point = Field(..., description="Bottom-left handle")
    bottom_right: Point = Field(..., description="Bottom-right handle")

    model_config = {"frozen": True}

    @classmethod
    def from_points(cls, points: List[Point]) -> "CropCoords":
        """Build from points in [TL, TR, BL, BR] order."""
        if len(points) != 4:
            raise ValueError(f"Expected exactly 4 points, got {len(points)}")
        return cls(
            top_left=points[0],
            top_right=points[1],
            bottom_left=points[2],
            bottom_right=points[3],
        )

    def to_points(self) -> List[Point]:
        return [self.top_left, self.top_right, self.bottom_left, self.bottom_right]

    def scale(self, scale_x: float, scale_y: float) -> "CropCoords":
        return CropCoords.from_points(
            [point.scale(scale_x, scale_y) for point in self.to_points()]
        )

    def __str__(self) -> str:
        return ", ".join(
            f"({point.x:g}, {point.y:g})" for point in self.to_points()
        )


class CropTransformation(Transformation):
    """
    Perspective crop driven by handle positions on a preview.

    Args:
        crop_coords: Handle positions in preview space.
        view_size: Size of the preview the handles were placed on.
        transformer: Perspective transformer; a bilinear one if None.
    """

    def __init__(
        self,
        crop_coords: CropCoords,
        view_size: Size,
        transformer: Optional[ImagePerspectiveTransformer] = None,
    ):
        self.crop_coords = crop_coords
        self.view_size = view_size
        self.transformer = transformer if transformer is not None else ImagePerspectiveTransformer()

    @property
    def key(self) -> str:
        return (
            f"Crop. Coords: {self.crop_coords}. "
            f"View Size: {self.view_size.width:g}x{self.view_size.height:g}."
        )

    def scale_to_source(self, source_width: float, source_height: float) -> CropCoords:
        """Map the handle positions into a source image of the given size."""
        x_ratio = source_width / self.view_size.width
        y_ratio = source_height / self.view_size.height
        return self.crop_coords.scale(x_ratio, y_ratio)

    def transform(self, source: np.ndarray) -> np.ndarray:
        buffer = require_image(source)
        scaled_coords = self.scale_to_source(buffer.width, buffer.height)

        # Handles may have been dragged past each other; re-derive the roles
        shape = order_corners(scaled_coords.to_points())
        if shape is None:
            raise DegenerateShapeError(
                f"Crop handles do not form a valid document shape: {scaled_coords}"
            )

        logger.debug(f"Crop coords {self.crop_coords} scaled to {scaled_coords}")

        return self.transformer.transform_perspective(buffer.data, shape)


class CropTransformationFactory:
    """Creates crop transformations sharing one perspective transformer."""

    def __init__(self, transformer: Optional[ImagePerspectiveTransformer] = None):
        self.transformer = transformer if transformer is not None else ImagePerspectiveTransformer()

    def create_crop_transformation(
        self, crop_coords: CropCoords, view_size: Size
    ) -> CropTransformation:
        return CropTransformation(
            crop_coords=crop_coords,
            view_size=view_size,
            transformer=self.transformer,
        )
