"""
Unit tests for the background image loader.
"""

import threading

import numpy as np
import pytest
from PIL import Image

from src.common.exceptions import DegenerateShapeError
from src.common.types import Point, Size
from src.loading.loader import ImageLoader, apply_request, decode_source
from src.loading.request import LoadRequest
from src.loading.target import CallbackTarget
from src.transforms.base import Transformation
from src.transforms.crop import CropCoords, CropTransformation

TIMEOUT = 10


class _RecordingTarget:
    """ImageTarget that records every event."""

    def __init__(self):
        self.events = []
        self.image = None
        self.error = None

    def on_prepare_load(self):
        self.events.append("prepare")

    def on_loading_succeeded(self, image):
        self.events.append("success")
        self.image = image

    def on_loading_failed(self, error):
        self.events.append("failure")
        self.error = error


class _BlockingTransformation(Transformation):
    """Holds the worker thread until released."""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()

    @property
    def key(self):
        return "Blocking"

    def transform(self, source):
        self.started.set()
        self.release.wait(TIMEOUT)
        return source.copy()


@pytest.fixture
def loader():
    with ImageLoader() as image_loader:
        yield image_loader


@pytest.fixture
def page_file(tmp_path, document_image):
    """The synthetic document saved as PNG (BGR -> RGB)."""
    path = tmp_path / "page.png"
    Image.fromarray(np.ascontiguousarray(document_image[:, :, ::-1])).save(path)
    return path


class TestDecodeSource:
    """Tests for decode_source."""

    def test_file(self, page_file, document_image):
        """Test that a PNG decodes to the original BGR samples."""
        np.testing.assert_array_equal(decode_source(page_file), document_image)

    def test_bytes(self, page_file, document_image):
        """Test that encoded bytes decode the same as the file."""
        np.testing.assert_array_equal(decode_source(page_file.read_bytes()), document_image)

    def test_matrix_is_copied(self, document_image):
        """Test that matrix sources are copied, not shared."""
        decoded = decode_source(document_image)
        assert decoded is not document_image

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises OSError."""
        with pytest.raises(OSError):
            decode_source(tmp_path / "missing.png")


class TestApplyRequest:
    """Tests for the processing order of a request."""

    def test_rotate_then_resize(self, document_image):
        """Test that rotation runs before the exact resize."""
        request = LoadRequest(source=document_image).rotate(90).resize(80, 60)
        assert apply_request(request, document_image).shape == (60, 80, 3)

    def test_center_inside_keeps_aspect(self, document_image):
        """Test that center_inside fits the image within the target size."""
        request = LoadRequest(source=document_image).resize(300, 300, center_inside=True)
        assert apply_request(request, document_image).shape == (300, 225, 3)


class TestImageLoader:
    """Tests for ImageLoader."""

    def test_success(self, loader, page_file):
        """Test that a successful load reaches the target and the future."""
        target = _RecordingTarget()
        request = LoadRequest(source=page_file, target=target).resize(
            300, 300, center_inside=True
        )

        result = loader.load_image(request).result(timeout=TIMEOUT)

        assert target.events == ["prepare", "success"]
        assert result.shape == (300, 225, 3)
        assert target.image is result

    def test_prepare_runs_on_caller_thread(self, loader, document_image):
        """Test that on_prepare_load fires before the work is queued."""
        threads = []
        target = CallbackTarget(on_start=lambda: threads.append(threading.current_thread()))
        loader.load_image(LoadRequest(source=document_image, target=target)).result(TIMEOUT)

        assert threads == [threading.current_thread()]

    def test_missing_file_reported(self, loader, tmp_path):
        """Test that a decode failure goes to the target, not the caller."""
        target = _RecordingTarget()
        future = loader.load_image(LoadRequest(source=tmp_path / "missing.png", target=target))

        assert future.result(timeout=TIMEOUT) is None
        assert target.events == ["prepare", "failure"]
        assert isinstance(target.error, OSError)

    def test_corrupt_bytes_reported(self, loader):
        """Test that undecodable bytes are reported as a failure."""
        target = _RecordingTarget()
        loader.load_image(LoadRequest(source=b"not an image", target=target)).result(TIMEOUT)

        assert target.events == ["prepare", "failure"]
        assert isinstance(target.error, OSError)

    def test_transformation_failure_reported(self, loader, document_image):
        """Test that a degenerate crop is reported instead of raised."""
        collinear = CropCoords.from_points(
            [Point(x=0, y=0), Point(x=10, y=0), Point(x=20, y=0), Point(x=30, y=0)]
        )
        target = _RecordingTarget()
        request = LoadRequest(source=document_image, target=target).transformation(
            CropTransformation(collinear, Size(width=600, height=800))
        )

        assert loader.load_image(request).result(timeout=TIMEOUT) is None
        assert isinstance(target.error, DegenerateShapeError)

    def test_requests_run_in_order(self, loader, document_image):
        """Test that the single worker completes requests in submission order."""
        finished = []
        futures = [
            loader.load_image(
                LoadRequest(
                    source=document_image,
                    target=CallbackTarget(on_success=lambda image, i=i: finished.append(i)),
                )
            )
            for i in range(5)
        ]
        for future in futures:
            future.result(timeout=TIMEOUT)

        assert finished == [0, 1, 2, 3, 4]

    def test_cancel_requests(self, loader, document_image):
        """Test that cancelling drops queued work and silences running work."""
        blocking = _BlockingTransformation()
        running_target = _RecordingTarget()
        queued_target = _RecordingTarget()

        running = loader.load_image(
            LoadRequest(source=document_image, target=running_target).transformation(blocking)
        )
        assert blocking.started.wait(TIMEOUT)
        queued = loader.load_image(LoadRequest(source=document_image, target=queued_target))

        assert loader.cancel_requests() == 1
        blocking.release.set()

        assert running.result(timeout=TIMEOUT) is None
        assert queued.cancelled()
        assert running_target.events == ["prepare"]
        assert queued_target.events == ["prepare"]

    def test_loads_after_cancel(self, loader, document_image):
        """Test that new requests work after a cancellation."""
        loader.cancel_requests()
        target = _RecordingTarget()
        loader.load_image(LoadRequest(source=document_image, target=target)).result(TIMEOUT)

        assert target.events == ["prepare", "success"]
