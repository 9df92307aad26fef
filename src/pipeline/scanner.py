"""
Document Scanner

Ties detection, perspective rectification, effects and resizing into the
editing flow of a scanning app:

1. Detect the document outline (shown to the user as crop handles)
2. Crop: warp the region under the (possibly adjusted) handles flat
3. Finalize: apply an effect, then fit the page into an output size

``scan`` runs all three with the detected shape, for unattended use.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np

from src.common.types import Size
from src.detection.config_loader import DetectionModuleConfig, load_config
from src.detection.detector import DocShapeDetector
from src.detection.types import DetectionResult
from src.geometry.shapes import Quadrilateral
from src.imaging.matrix import require_image
from src.rectification.perspective import ImagePerspectiveTransformer
from src.transforms.base import TransformationPipeline
from src.transforms.crop import CropCoords, CropTransformationFactory
from src.transforms.effects import ImageEffect, ImageEffectTransformationFactory
from src.transforms.resize import ResizeTransformation

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """
    Outcome of an unattended scan.

    Attributes:
        image: Final page image.
        detection: How the document outline was found.
        effect: Effect applied to the rectified page.
    """

    image: np.ndarray
    detection: DetectionResult
    effect: ImageEffect

    @property
    def used_fallback(self) -> bool:
        """True when no document was found and the whole frame was used."""
        return self.detection.is_fallback


class DocumentScanner:
    """
    Facade over the scanning steps.

    Example:
        >>> scanner = DocumentScanner()
        >>> image = cv2.imread("receipt.jpg")
        >>> result = scanner.scan(image, effect=ImageEffect.ADAPTIVE_THRESHOLD)
        >>> cv2.imwrite("receipt_scan.png", result.image)
    """

    def __init__(
        self,
        config: Optional[DetectionModuleConfig] = None,
        config_path: Optional[Path] = None,
        interpolation: str = "linear",
    ):
        """
        Initialize the scanner.

        Args:
            config: Detection configuration. Takes precedence over config_path.
            config_path: YAML file to load the detection configuration from.
                         The bundled defaults are used if both are None.
            interpolation: Resampling method for warping and resizing.
        """
        if config is None and config_path is not None:
            config = load_config(config_path).detection
            logger.info(f"Loaded detection configuration from {config_path}")

        self.detector = DocShapeDetector(config=config)
        self.transformer = ImagePerspectiveTransformer(interpolation=interpolation)
        self.crop_factory = CropTransformationFactory(self.transformer)
        self.effect_factory = ImageEffectTransformationFactory()
        self.interpolation = interpolation

    def detect(self, image: np.ndarray) -> DetectionResult:
        """Find the document outline, falling back to the image bounds."""
        return self.detector.detect(image)

    def crop(
        self,
        image: np.ndarray,
        coords: Union[CropCoords, Quadrilateral],
        view_size: Optional[Size] = None,
    ) -> np.ndarray:
        """
        Rectify the region under the crop handles.

        Args:
            image: Source image.
            coords: Handle positions, in ``view_size`` space when given,
                    otherwise in the image's own pixel space.
            view_size: Size of the preview the handles were placed on.

        Raises:
            DegenerateShapeError: If the handles do not enclose a valid
                quadrilateral.
        """
        buffer = require_image(image)

        if isinstance(coords, Quadrilateral):
            coords = CropCoords.from_points(coords.to_points())
        if view_size is None:
            view_size = Size(width=buffer.width, height=buffer.height)

        transformation = self.crop_factory.create_crop_transformation(coords, view_size)
        return transformation.transform(buffer.data)

    def finalize(
        self,
        image: np.ndarray,
        effect: ImageEffect = ImageEffect.NONE,
        max_size: Optional[Size] = None,
    ) -> np.ndarray:
        """
        Apply an effect and fit the page into ``max_size``.

        Returns a new matrix even when there is nothing to do.
        """
        pipeline = TransformationPipeline()

        effect_transformation = self.effect_factory.create(effect)
        if effect_transformation is not None:
            pipeline.add(effect_transformation)

        if max_size is not None:
            pipeline.add(
                ResizeTransformation(
                    max_width=int(max_size.width),
                    max_height=int(max_size.height),
                    interpolation=self.interpolation,
                )
            )

        logger.debug(f"Finalizing with [{pipeline.key}]")

        return pipeline.transform(image)

    def scan(
        self,
        image: np.ndarray,
        effect: ImageEffect = ImageEffect.NONE,
        max_size: Optional[Size] = None,
    ) -> ScanResult:
        """
        Detect, rectify, apply an effect and resize in one go.

        Raises:
            InvalidImageError: If the image is empty or malformed.
        """
        logger.info("Starting document scan")

        detection = self.detect(image)
        if detection.is_fallback:
            logger.warning("No document outline found, using the whole image")

        rectified = self.crop(image, detection.shape)
        page = self.finalize(rectified, effect=effect, max_size=max_size)

        logger.info(
            f"Scan complete: {page.shape[1]}x{page.shape[0]} page, effect={effect.value}"
        )

        return ScanResult(image=page, detection=detection, effect=effect)
