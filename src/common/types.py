"""
Common type definitions for the document scanning core.

This module provides Pydantic-based type definitions for the value types
shared by every stage of the pipeline: image buffers, points and sizes.

These types provide:
- Type validation and conversion
- Immutable value semantics (points and sizes carry no identity)
- Helper methods for common operations
- Integration with numpy arrays and OpenCV
"""

import math
from typing import Any, Tuple, Union

import numpy as np
from pydantic import BaseModel, Field, field_validator

Number = Union[int, float, np.integer, np.floating]


def _to_finite_float(v: Any) -> float:
    if isinstance(v, bool) or not isinstance(v, (int, float, np.integer, np.floating)):
        raise ValueError(f"Coordinate must be numeric, got {type(v)}")
    value = float(v)
    if not math.isfinite(value):
        raise ValueError(f"Coordinate must be finite, got {value}")
    return value


class ImageBuffer(BaseModel):
    """
    Type-safe wrapper for image sample matrices (numpy.ndarray).

    Matrices follow the OpenCV convention: shape (H, W) for single-channel
    data, (H, W, C) with BGR or BGRA channel order for colour data, and
    uint8 samples.

    Attributes:
        data: The underlying numpy array containing image data.

    Example:
        >>> import cv2
        >>> image = cv2.imread("receipt.jpg")
        >>> buffer = ImageBuffer(data=image)
        >>> print(buffer.height, buffer.width)  # 3024, 4032
    """

    data: np.ndarray = Field(..., description="Image data as numpy array")

    model_config = {"arbitrary_types_allowed": True}

    @field_validator("data")
    @classmethod
    def _validate_image(cls, v: np.ndarray) -> np.ndarray:
        """
        Validate that the numpy array is a usable 8-bit image.

        Raises:
            ValueError: If array is not a valid image format.
        """
        if not isinstance(v, np.ndarray):
            raise ValueError(f"Expected numpy.ndarray, got {type(v)}")

        if v.size == 0:
            raise ValueError(f"Image array is empty (shape {v.shape})")

        if len(v.shape) not in (2, 3):
            raise ValueError(
                f"Expected 2D (grayscale) or 3D (color) image, got shape {v.shape}"
            )

        if len(v.shape) == 3 and v.shape[2] not in (1, 3, 4):
            raise ValueError(
                f"Expected 1, 3, or 4 channels for color image, got {v.shape[2]}"
            )

        if v.dtype != np.uint8:
            raise ValueError(
                f"Expected uint8 dtype for image, got {v.dtype}. "
                "Images should be in range [0, 255]"
            )

        return v

    @property
    def shape(self) -> Tuple[int, ...]:
        """Get image shape (H, W) or (H, W, C)."""
        return self.data.shape

    @property
    def height(self) -> int:
        """Get image height in pixels."""
        return int(self.data.shape[0])

    @property
    def width(self) -> int:
        """Get image width in pixels."""
        return int(self.data.shape[1])

    @property
    def channels(self) -> int:
        """Get number of channels (1 for grayscale, 3 for BGR, 4 for BGRA)."""
        if len(self.data.shape) == 2:
            return 1
        return int(self.data.shape[2])

    @property
    def is_grayscale(self) -> bool:
        """Check if image holds a single channel."""
        return self.channels == 1

    def __repr__(self) -> str:
        return f"ImageBuffer(shape={self.shape}, dtype={self.data.dtype})"


class Point(BaseModel):
    """
    Immutable 2D point in image pixel coordinates.

    Coordinates are floats: detected corners are rescaled from a downscaled
    working image and user-dragged handles are sub-pixel positions.

    Attributes:
        x: X-coordinate (horizontal, 0 at the left image edge).
        y: Y-coordinate (vertical, 0 at the top image edge).

    Example:
        >>> point = Point(x=100, y=200.5)
        >>> point.to_tuple()
        (100.0, 200.5)
        >>> Point.from_numpy(np.array([150, 250])).scale(2, 2)
        Point(x=300.0, y=500.0)
    """

    x: float = Field(..., description="X-coordinate (horizontal)")
    y: float = Field(..., description="Y-coordinate (vertical)")

    model_config = {"frozen": True}

    @field_validator("x", "y", mode="before")
    @classmethod
    def _convert_to_float(cls, v: Number) -> float:
        return _to_finite_float(v)

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "Point":
        """
        Create Point from numpy array.

        Args:
            arr: Array holding exactly two values [x, y]. Shapes (2,) and
                 (1, 2) (OpenCV contour vertices) are accepted.

        Raises:
            ValueError: If array does not hold exactly two values.
        """
        arr = np.asarray(arr).reshape(-1)
        if arr.shape != (2,):
            raise ValueError(f"Expected array with 2 values, got {arr.shape}")
        return cls(x=float(arr[0]), y=float(arr[1]))

    @classmethod
    def from_list(cls, coords: list) -> "Point":
        """Create Point from a list or tuple [x, y]."""
        if len(coords) != 2:
            raise ValueError(f"Expected list with 2 elements, got {len(coords)}")
        return cls(x=coords[0], y=coords[1])

    def to_numpy(self, dtype: type = np.float32) -> np.ndarray:
        """Convert Point to numpy array of shape (2,)."""
        return np.array([self.x, self.y], dtype=dtype)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_list(self) -> list:
        return [self.x, self.y]

    def distance_to(self, other: "Point") -> float:
        """
        Calculate Euclidean distance to another point.

        Args:
            other: Target point.

        Returns:
            Euclidean distance as float.
        """
        dx = self.x - other.x
        dy = self.y - other.y
        return float(math.sqrt(dx * dx + dy * dy))

    def scale(self, scale_x: float, scale_y: float) -> "Point":
        """Return a new point with each axis multiplied by its factor."""
        return Point(x=self.x * scale_x, y=self.y * scale_y)

    def __add__(self, other: "Point") -> "Point":
        """Add two points (vector addition)."""
        return Point(x=self.x + other.x, y=self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        """Subtract two points (vector subtraction)."""
        return Point(x=self.x - other.x, y=self.y - other.y)

    def __repr__(self) -> str:
        return f"Point(x={self.x}, y={self.y})"


class Size(BaseModel):
    """
    Width and height of a raster, in pixels.

    Attributes:
        width: Strictly positive width.
        height: Strictly positive height.
    """

    width: float = Field(..., gt=0, description="Width in pixels")
    height: float = Field(..., gt=0, description="Height in pixels")

    model_config = {"frozen": True}

    @classmethod
    def of_image(cls, image: np.ndarray) -> "Size":
        """Size of an image matrix (H, W[, C])."""
        return cls(width=image.shape[1], height=image.shape[0])

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height

    def to_tuple(self) -> Tuple[float, float]:
        return (self.width, self.height)

    def __repr__(self) -> str:
        return f"Size(width={self.width}, height={self.height})"
