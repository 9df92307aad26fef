"""
Load request: where an image comes from and what to do with it.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
from PIL import Image

from src.loading.target import ImageTarget
from src.transforms.base import Transformation

ImageSource = Union[str, Path, bytes, Image.Image, np.ndarray]


def describe_source(source: ImageSource) -> str:
    """Short, stable description of a source for cache keys and logs."""
    if isinstance(source, (str, Path)):
        return f"File({Path(source)})"
    if isinstance(source, bytes):
        return f"Bytes({len(source)})"
    if isinstance(source, Image.Image):
        return f"Bitmap({source.mode}, {source.width}x{source.height}, id={id(source)})"
    if isinstance(source, np.ndarray):
        return f"Matrix({'x'.join(str(d) for d in source.shape)}, id={id(source)})"
    raise TypeError(f"Unsupported image source type: {type(source).__name__}")


@dataclass
class LoadRequest:
    """
    Parameters of one image load.

    Steps are applied in a fixed order: decode, rotate, resize, then
    ``transformations`` in list order.

    Attributes:
        source: File path, encoded bytes, PIL image or BGR matrix.
        target_width: Resize width; 0 disables resizing.
        target_height: Resize height; 0 disables resizing.
        center_inside: Fit within the target size keeping aspect ratio
                       instead of stretching to it.
        rotation_degrees: Clockwise rotation applied after decoding.
        transformations: Extra steps applied last.
        target: Receiver of the outcome.

    Example:
        >>> request = (
        ...     LoadRequest(source="page.jpg", target=target)
        ...     .rotate(90)
        ...     .resize(1080, 1920)
        ...     .transformation(CropTransformation(coords, view_size))
        ... )
    """

    source: ImageSource
    target_width: int = 0
    target_height: int = 0
    center_inside: bool = False
    rotation_degrees: float = 0.0
    transformations: List[Transformation] = field(default_factory=list)
    target: Optional[ImageTarget] = None

    def __post_init__(self):
        describe_source(self.source)
        if isinstance(self.source, (str, Path)) and not str(self.source).strip():
            raise ValueError("The image path is blank.")

    def resize(self, width: int, height: int, center_inside: bool = False) -> "LoadRequest":
        if width <= 0:
            raise ValueError("The width must be larger than 0.")
        if height <= 0:
            raise ValueError("The height must be larger than 0.")
        self.target_width = width
        self.target_height = height
        self.center_inside = center_inside
        return self

    def rotate(self, degrees: float) -> "LoadRequest":
        self.rotation_degrees = degrees
        return self

    def transformation(self, transformation: Transformation) -> "LoadRequest":
        self.transformations.append(transformation)
        return self

    def into(self, target: ImageTarget) -> "LoadRequest":
        self.target = target
        return self

    @property
    def has_target_size(self) -> bool:
        return self.target_width > 0 and self.target_height > 0

    @property
    def has_rotation(self) -> bool:
        return self.rotation_degrees % 360 != 0

    def to_key(self) -> str:
        """Key identifying the request's output, for caller-side caching."""
        parts = []
        if self.has_target_size:
            parts.append(f"targetSize: ({self.target_width}, {self.target_height})")
            if self.center_inside:
                parts.append("centerInside: True")
        if self.has_rotation:
            parts.append(f"rotationDegrees: {self.rotation_degrees:g}")
        if self.transformations:
            keys = ", ".join(t.key for t in self.transformations)
            parts.append(f"transformations: {keys}")
        parts.append(f"source: {describe_source(self.source)}")
        return ", ".join(parts)
