"""
Image Loading

Background decode-and-transform of images for display or export.
"""

from src.loading.loader import ImageLoader, apply_request, decode_source
from src.loading.request import LoadRequest, describe_source
from src.loading.target import CallbackTarget, ImageTarget

__all__ = [
    "CallbackTarget",
    "ImageLoader",
    "ImageTarget",
    "LoadRequest",
    "apply_request",
    "decode_source",
    "describe_source",
]
