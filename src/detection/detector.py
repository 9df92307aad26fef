"""
Document Shape Detector

Finds the outline of a rectangular document in a photograph.

Pipeline:
1. Downscale to a fixed working resolution (bounds the cost of every later
   step regardless of camera resolution)
2. Denoise
3. For each colour plane and threshold level: binarize (Canny + dilation at
   level 0, a plain binary threshold above it), trace contours, keep
   rectangle-like polygons
4. Pick the largest candidate
5. Scale it back to the original resolution and order its corners

Detection never fails on a valid image: when nothing qualifies, the whole
image outline is returned so an editing UI always has handles to show.
"""

import logging
from typing import Iterator, List, Optional, Tuple

import numpy as np

from src.common.types import Point
from src.detection.candidates import find_rectangle_candidates
from src.detection.config_loader import DetectionModuleConfig, get_default_config
from src.detection.types import DetectionResult, DetectionSource, RectangleCandidate
from src.geometry.shapes import Quadrilateral
from src.imaging.matrix import (
    canny_edges,
    dilate,
    extract_channel,
    gaussian_blur,
    grayscale,
    median_blur,
    require_image,
    resize,
    threshold,
)
from src.imaging.types import ThresholdMode
from src.rectification.orderer import DocCoordsOrderer

logger = logging.getLogger(__name__)

GRAYSCALE_PLANE = -1


class DocShapeDetector:
    """
    Contour-based document outline detector.

    Example:
        >>> detector = DocShapeDetector()
        >>> image = cv2.imread("receipt.jpg")
        >>> shape = detector.detect_shape(image)
        >>> shape.top_left
        Point(x=412.0, y=236.0)
    """

    def __init__(
        self,
        config: Optional[DetectionModuleConfig] = None,
        orderer: Optional[DocCoordsOrderer] = None,
    ):
        """
        Initialize the detector.

        Args:
            config: Detection configuration. If None, loads from config.yaml.
            orderer: Corner orderer. A default instance is created if None.
        """
        if config is None:
            self.config = get_default_config().detection
            logger.debug("Loaded detection configuration from file")
        else:
            self.config = config
        self.orderer = orderer if orderer is not None else DocCoordsOrderer()

    def detect_shape(self, image: np.ndarray) -> Quadrilateral:
        """
        Locate the document and return its ordered corners.

        Args:
            image: BGR, BGRA or single-channel uint8 image. Not modified.

        Returns:
            Corners in the image's pixel space; the whole image outline when
            no document is found.

        Raises:
            InvalidImageError: If the image is empty or malformed.
        """
        return self.detect(image).shape

    def detect(self, image: np.ndarray) -> DetectionResult:
        """
        Same as ``detect_shape`` but with diagnostics about the search.

        Raises:
            InvalidImageError: If the image is empty or malformed.
        """
        buffer = require_image(image)
        working, scale_ratio = self._downscale(buffer.data)
        candidates = self._find_candidates(working)
        largest = self._select_largest(candidates)

        if largest is not None:
            shape = self._to_original_shape(largest, scale_ratio)

            if shape is not None:
                working_area = float(working.shape[0] * working.shape[1])
                area_ratio = largest.area / working_area
                logger.info(
                    f"Document found (channel {largest.channel}, level {largest.level}, "
                    f"{area_ratio:.0%} of frame): {shape!r}"
                )
                return DetectionResult(
                    shape=shape,
                    source=DetectionSource.CONTOUR,
                    candidate_count=len(candidates),
                    scale_ratio=scale_ratio,
                    area_ratio=area_ratio,
                )

            logger.warning("Largest candidate could not be ordered, using image bounds")
        else:
            logger.warning("No document candidate found, using image bounds")

        return DetectionResult(
            shape=Quadrilateral.from_image_bounds(buffer.width, buffer.height),
            source=DetectionSource.IMAGE_BOUNDS,
            candidate_count=len(candidates),
            scale_ratio=scale_ratio,
            area_ratio=1.0,
        )

    def _downscale(self, image: np.ndarray) -> Tuple[np.ndarray, float]:
        height, width = image.shape[:2]
        scale_ratio = self.config.downscale.target_max_dimension / max(width, height)
        new_width = max(1, int(round(width * scale_ratio)))
        new_height = max(1, int(round(height * scale_ratio)))

        logger.debug(
            f"Working copy {width}x{height} -> {new_width}x{new_height} "
            f"(ratio {scale_ratio:.4f})"
        )

        working = resize(
            image, new_width, new_height, interpolation=self.config.downscale.interpolation
        )
        return working, scale_ratio

    def _denoise(self, image: np.ndarray) -> np.ndarray:
        blur = self.config.blur
        if blur.method == "median" and blur.kernel_size >= 3:
            return median_blur(image, blur.kernel_size)
        if blur.method == "gaussian":
            return gaussian_blur(image, blur.kernel_size)
        return image.copy()

    def _planes(self, image: np.ndarray) -> Iterator[Tuple[int, np.ndarray]]:
        """Yield (channel index, single-channel plane) pairs to search."""
        channels = 1 if image.ndim == 2 else image.shape[2]

        if self.config.channel_mode == "grayscale" or channels < 3:
            yield GRAYSCALE_PLANE, grayscale(image)
            return

        # Colour planes only; an alpha plane carries no document edges
        for channel in range(3):
            yield channel, extract_channel(image, channel)

    def _binary_images(self, plane: np.ndarray) -> Iterator[Tuple[int, np.ndarray]]:
        """Yield (level, binary image) pairs for one plane."""
        edges = self.config.edges
        levels = self.config.thresholds.levels
        max_value = self.config.thresholds.max_value

        for level in range(levels):
            if level == 0:
                # Canny catches documents with gradient shading that no
                # single global cut separates from the background
                binary = canny_edges(plane, edges.canny_low, edges.canny_high)
                if edges.dilation_iterations > 0:
                    kernel = np.ones(
                        (edges.dilation_kernel_size, edges.dilation_kernel_size),
                        dtype=np.uint8,
                    )
                    binary = dilate(binary, kernel, iterations=edges.dilation_iterations)
            else:
                cut = level * max_value / levels
                binary = threshold(plane, cut, max_value, ThresholdMode.BINARY)
            yield level, binary

    def _find_candidates(self, working: np.ndarray) -> List[RectangleCandidate]:
        denoised = self._denoise(working)
        candidates: List[RectangleCandidate] = []

        for channel, plane in self._planes(denoised):
            for level, binary in self._binary_images(plane):
                candidates.extend(
                    find_rectangle_candidates(
                        binary, self.config.candidate, channel=channel, level=level
                    )
                )

        logger.debug(f"Collected {len(candidates)} rectangle candidates")
        return candidates

    @staticmethod
    def _select_largest(
        candidates: List[RectangleCandidate],
    ) -> Optional[RectangleCandidate]:
        """Largest-area candidate; the first one found wins ties."""
        largest = None
        for candidate in candidates:
            if largest is None or candidate.area > largest.area:
                largest = candidate
        return largest

    def _to_original_shape(
        self, candidate: RectangleCandidate, scale_ratio: float
    ) -> Optional[Quadrilateral]:
        upscale = 1.0 / scale_ratio
        points = [
            Point.from_numpy(vertex).scale(upscale, upscale)
            for vertex in candidate.polygon.reshape(-1, 2)
        ]
        return self.orderer.order(points)


def detect_shape(
    image: np.ndarray, config: Optional[DetectionModuleConfig] = None
) -> Quadrilateral:
    """
    Convenience function for one-shot detection.

    Args:
        image: BGR, BGRA or single-channel uint8 image.
        config: Optional custom configuration. Uses default if None.

    Returns:
        Ordered document corners, or the whole image outline.
    """
    detector = DocShapeDetector(config=config)
    return detector.detect_shape(image)
