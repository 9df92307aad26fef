"""
Receivers of image loading results.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class ImageTarget(Protocol):
    """
    Receives the lifecycle events of one load request.

    ``on_prepare_load`` runs on the caller's thread before the work is
    queued; the other two run on the loader's worker thread.
    """

    def on_prepare_load(self) -> None:
        ...

    def on_loading_succeeded(self, image: np.ndarray) -> None:
        ...

    def on_loading_failed(self, error: Exception) -> None:
        ...


class CallbackTarget:
    """
    ImageTarget built from optional plain callables.

    Example:
        >>> target = CallbackTarget(
        ...     on_success=lambda image: results.append(image),
        ...     on_failure=lambda error: logger.error(f"Load failed: {error}"),
        ... )
    """

    def __init__(
        self,
        on_start: Optional[Callable[[], None]] = None,
        on_success: Optional[Callable[[np.ndarray], None]] = None,
        on_failure: Optional[Callable[[Exception], None]] = None,
    ):
        self.on_start = on_start
        self.on_success = on_success
        self.on_failure = on_failure

    def on_prepare_load(self) -> None:
        if self.on_start is not None:
            self.on_start()

    def on_loading_succeeded(self, image: np.ndarray) -> None:
        if self.on_success is not None:
            self.on_success(image)

    def on_loading_failed(self, error: Exception) -> None:
        if self.on_failure is not None:
            self.on_failure(error)
