"""
Image Loader

Decodes an image and runs it through rotation, resizing and a list of
transformations on a background worker, reporting the outcome to an
``ImageTarget``. Results are not cached here; ``LoadRequest.to_key``
gives callers a key to cache on.
"""

import io
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Set

import cv2
import numpy as np
from PIL import Image

from src.imaging.bitmap import to_matrix
from src.imaging.matrix import require_image, resize
from src.loading.request import LoadRequest, describe_source
from src.transforms.resize import ResizeTransformation
from src.transforms.rotate import RotateTransformation

logger = logging.getLogger(__name__)

# ScannerError subclasses ValueError
LOAD_ERRORS = (ValueError, cv2.error, OSError)


def decode_source(source) -> np.ndarray:
    """
    Decode any supported source to a BGR(A) or grayscale matrix.

    Raises:
        OSError: If a file is missing or its content is not an image.
        InvalidImageError: If the decoded image is empty or malformed.
    """
    if isinstance(source, (str, Path)):
        with Image.open(source) as bitmap:
            return to_matrix(bitmap)
    if isinstance(source, bytes):
        with Image.open(io.BytesIO(source)) as bitmap:
            return to_matrix(bitmap)
    if isinstance(source, Image.Image):
        return to_matrix(source)
    return require_image(source).data.copy()


def apply_request(request: LoadRequest, image: np.ndarray) -> np.ndarray:
    """Run the request's rotate, resize and transformation steps in order."""
    result = image

    if request.has_rotation:
        result = RotateTransformation(request.rotation_degrees).transform(result)

    if request.has_target_size:
        if request.center_inside:
            resizer = ResizeTransformation(request.target_width, request.target_height)
            result = resizer.transform(result)
        else:
            result = resize(result, request.target_width, request.target_height)

    for transformation in request.transformations:
        result = transformation.transform(result)

    return result


class ImageLoader:
    """
    Runs load requests on a dedicated worker thread.

    Requests are processed one at a time in submission order. Failures
    never propagate to the caller: they are logged and handed to the
    request's target, and the returned future resolves to None.

    Example:
        >>> loader = ImageLoader()
        >>> future = loader.load_image(
        ...     LoadRequest(source="page.jpg").resize(1080, 1920, center_inside=True)
        ... )
        >>> page = future.result()
    """

    def __init__(self, max_workers: int = 1):
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="image-loader"
        )
        self._lock = threading.Lock()
        self._pending: Set[Future] = set()
        self._generation = 0

    def load_image(self, request: LoadRequest) -> "Future[Optional[np.ndarray]]":
        """
        Queue a request.

        Returns:
            Future resolving to the final matrix, or None if loading failed
            or the request was cancelled.
        """
        if request.target is not None:
            request.target.on_prepare_load()

        with self._lock:
            generation = self._generation
            future = self._executor.submit(self._run, request, generation)
            self._pending.add(future)

        future.add_done_callback(self._forget)
        return future

    def cancel_requests(self) -> int:
        """
        Drop every queued request and silence those already running.

        Returns:
            Number of requests that had not started and were cancelled.
        """
        with self._lock:
            self._generation += 1
            pending = list(self._pending)

        cancelled = sum(1 for future in pending if future.cancel())
        logger.info(f"Cancelled {cancelled} pending load request(s)")
        return cancelled

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ImageLoader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _run(self, request: LoadRequest, generation: int) -> Optional[np.ndarray]:
        description = describe_source(request.source)

        try:
            image = apply_request(request, decode_source(request.source))
        except LOAD_ERRORS as e:
            logger.error(f"Failed to load {description}: {e}")
            if request.target is not None and self._is_current(generation):
                request.target.on_loading_failed(e)
            return None

        if not self._is_current(generation):
            logger.debug(f"Discarding result of cancelled load {description}")
            return None

        logger.debug(
            f"Loaded {description} as {image.shape[1]}x{image.shape[0]} image"
        )

        if request.target is not None:
            request.target.on_loading_succeeded(image)

        return image
