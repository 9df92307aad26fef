"""
Conversion between Pillow bitmaps and OpenCV sample matrices.

Channel convention: bitmaps are RGB / RGBA / L (Pillow), matrices are
BGR / BGRA / single-channel (OpenCV). Conversion only reorders channels,
so L, RGB and RGBA data survives a round trip unchanged. Other modes are
normalised to one of those three on the way in and come back in that mode.
"""

import logging

import cv2
import numpy as np
from PIL import Image

from src.common.exceptions import InvalidImageError
from src.imaging.matrix import require_image

logger = logging.getLogger(__name__)

_DIRECT_MODES = ("L", "RGB", "RGBA")


def to_matrix(bitmap: Image.Image) -> np.ndarray:
    """
    Convert a Pillow image to an OpenCV matrix.

    Args:
        bitmap: Decoded image. Modes L, RGB and RGBA convert losslessly;
                bilevel images become L, other modes become RGB (or RGBA
                when they carry an alpha band).

    Returns:
        New uint8 matrix: (H, W) for L, (H, W, 3) BGR, (H, W, 4) BGRA.

    Raises:
        InvalidImageError: If the input is not a Pillow image or has a zero
            dimension.

    Example:
        >>> from PIL import Image
        >>> matrix = to_matrix(Image.open("page.jpg"))
        >>> matrix.shape
        (3024, 4032, 3)
    """
    if not isinstance(bitmap, Image.Image):
        raise InvalidImageError(f"Expected PIL.Image.Image, got {type(bitmap)}")
    if bitmap.width == 0 or bitmap.height == 0:
        raise InvalidImageError(
            f"Bitmap has a zero dimension: {bitmap.width}x{bitmap.height}"
        )

    if bitmap.mode not in _DIRECT_MODES:
        target_mode = "L" if bitmap.mode == "1" else (
            "RGBA" if "A" in bitmap.getbands() else "RGB"
        )
        logger.debug(f"Converting bitmap mode {bitmap.mode} to {target_mode}")
        bitmap = bitmap.convert(target_mode)

    samples = np.array(bitmap, dtype=np.uint8)

    if bitmap.mode == "RGB":
        return cv2.cvtColor(samples, cv2.COLOR_RGB2BGR)
    if bitmap.mode == "RGBA":
        return cv2.cvtColor(samples, cv2.COLOR_RGBA2BGRA)
    return samples


def to_bitmap(matrix: np.ndarray) -> Image.Image:
    """
    Convert an OpenCV matrix back to a Pillow image.

    Args:
        matrix: uint8 matrix, single-channel, BGR or BGRA.

    Returns:
        New Pillow image in mode L, RGB or RGBA.

    Raises:
        InvalidImageError: If the matrix is empty or malformed.
    """
    buffer = require_image(matrix)

    if buffer.channels == 1:
        samples = buffer.data.reshape(buffer.height, buffer.width)
    elif buffer.channels == 4:
        samples = cv2.cvtColor(buffer.data, cv2.COLOR_BGRA2RGBA)
    else:
        samples = cv2.cvtColor(buffer.data, cv2.COLOR_BGR2RGB)

    return Image.fromarray(np.ascontiguousarray(samples))
