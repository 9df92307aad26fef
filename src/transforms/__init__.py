"""
Transformation Pipeline

Composable image -> image steps (crop, resize, rotate, effects) applied in
order by the image loader and the scanner facade.
"""

from src.transforms.base import Transformation, TransformationPipeline
from src.transforms.crop import (
    CropCoords,
    CropTransformation,
    CropTransformationFactory,
)
from src.transforms.effects import (
    AdaptiveThresholdTransformation,
    GrayscaleTransformation,
    ImageEffect,
    ImageEffectApplier,
    ImageEffectTransformationFactory,
    SimpleThresholdTransformation,
)
from src.transforms.resize import ResizeTransformation, calculate_optimal_size
from src.transforms.rotate import RotateTransformation

__all__ = [
    "AdaptiveThresholdTransformation",
    "CropCoords",
    "CropTransformation",
    "CropTransformationFactory",
    "GrayscaleTransformation",
    "ImageEffect",
    "ImageEffectApplier",
    "ImageEffectTransformationFactory",
    "ResizeTransformation",
    "RotateTransformation",
    "SimpleThresholdTransformation",
    "Transformation",
    "TransformationPipeline",
    "calculate_optimal_size",
]
