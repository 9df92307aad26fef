"""
Unit tests for load requests and callback targets.
"""

import numpy as np
import pytest
from PIL import Image

from src.loading.request import LoadRequest, describe_source
from src.loading.target import CallbackTarget, ImageTarget
from src.transforms.effects import ImageEffect, ImageEffectTransformationFactory
from src.transforms.resize import ResizeTransformation


class TestLoadRequest:
    """Tests for LoadRequest."""

    def test_builder_helpers(self):
        """Test chained configuration."""
        effect = ImageEffectTransformationFactory().create(ImageEffect.GRAYSCALE)
        request = (
            LoadRequest(source="page.jpg")
            .rotate(90)
            .resize(1080, 1920)
            .transformation(effect)
        )

        assert request.has_rotation
        assert request.has_target_size
        assert request.transformations == [effect]

    def test_resize_validation(self):
        """Test that target sizes must be positive."""
        with pytest.raises(ValueError, match="width must be larger than 0"):
            LoadRequest(source="page.jpg").resize(0, 10)
        with pytest.raises(ValueError, match="height must be larger than 0"):
            LoadRequest(source="page.jpg").resize(10, -1)

    def test_blank_path_rejected(self):
        """Test that a blank file path is rejected."""
        with pytest.raises(ValueError, match="blank"):
            LoadRequest(source="   ")

    def test_unsupported_source_rejected(self):
        """Test that unknown source types are rejected."""
        with pytest.raises(TypeError, match="Unsupported image source"):
            LoadRequest(source=42)

    def test_full_turn_is_not_rotation(self):
        """Test that multiples of 360 degrees are treated as no rotation."""
        assert not LoadRequest(source="page.jpg").rotate(360).has_rotation

    def test_key_minimal(self):
        """Test the key of a request with no processing."""
        assert LoadRequest(source="page.jpg").to_key() == "source: File(page.jpg)"

    def test_key_full(self):
        """Test that the key lists every parameter in processing order."""
        request = (
            LoadRequest(source="page.jpg")
            .resize(100, 200, center_inside=True)
            .rotate(90)
            .transformation(ResizeTransformation(50, 50))
        )
        assert request.to_key() == (
            "targetSize: (100, 200), centerInside: True, rotationDegrees: 90, "
            "transformations: Resize. Max Width: 50. Max Height: 50., "
            "source: File(page.jpg)"
        )

    def test_key_distinguishes_transformations(self):
        """Test that different transformation parameters give different keys."""
        first = LoadRequest(source="page.jpg").transformation(ResizeTransformation(50, 50))
        second = LoadRequest(source="page.jpg").transformation(ResizeTransformation(60, 50))
        assert first.to_key() != second.to_key()


class TestDescribeSource:
    """Tests for describe_source."""

    def test_bytes(self):
        """Test that encoded bytes are described by length."""
        assert describe_source(b"\x89PNG1234") == "Bytes(8)"

    def test_bitmap(self):
        """Test that bitmaps are described by mode and size."""
        assert describe_source(Image.new("RGB", (4, 3))).startswith("Bitmap(RGB, 4x3")

    def test_matrix(self):
        """Test that matrices are described by shape."""
        assert describe_source(np.zeros((3, 4, 3), dtype=np.uint8)).startswith("Matrix(3x4x3")


class TestCallbackTarget:
    """Tests for CallbackTarget."""

    def test_satisfies_protocol(self):
        """Test that the adapter is an ImageTarget."""
        assert isinstance(CallbackTarget(), ImageTarget)

    def test_forwards_events(self):
        """Test that each event reaches its callable."""
        events = []
        target = CallbackTarget(
            on_start=lambda: events.append("start"),
            on_success=lambda image: events.append(("success", image.shape)),
            on_failure=lambda error: events.append(("failure", str(error))),
        )
        target.on_prepare_load()
        target.on_loading_succeeded(np.zeros((2, 3), dtype=np.uint8))
        target.on_loading_failed(ValueError("boom"))

        assert events == ["start", ("success", (2, 3)), ("failure", "boom")]

    def test_missing_callbacks_are_ignored(self):
        """Test that unset callbacks are no-ops."""
        target = CallbackTarget()
        target.on_prepare_load()
        target.on_loading_failed(ValueError("ignored"))
