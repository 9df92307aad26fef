"""
Document Shape Detection

Locates the four corners of a rectangular document in a photograph using
contour search over several colour planes and threshold levels.

Example:
    >>> from src.detection import DocShapeDetector
    >>> import cv2
    >>> detector = DocShapeDetector()
    >>> image = cv2.imread("receipt.jpg")
    >>> result = detector.detect(image)
    >>> if not result.is_fallback:
    ...     print(f"Document at {result.shape}")
"""

from src.detection.config_loader import (
    Config,
    DetectionModuleConfig,
    get_default_config,
    load_config,
)
from src.detection.detector import DocShapeDetector, detect_shape
from src.detection.types import DetectionResult, DetectionSource, RectangleCandidate

__all__ = [
    "Config",
    "DetectionModuleConfig",
    "DetectionResult",
    "DetectionSource",
    "DocShapeDetector",
    "RectangleCandidate",
    "detect_shape",
    "get_default_config",
    "load_config",
]
