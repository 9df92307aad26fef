"""
Unit tests for bitmap <-> matrix conversion.
"""

import numpy as np
import pytest
from PIL import Image

from src.common.exceptions import InvalidImageError
from src.imaging.bitmap import to_bitmap, to_matrix


class TestToMatrix:
    """Tests for to_matrix."""

    def test_rgb_becomes_bgr(self):
        """Test that channel order is swapped to OpenCV's BGR."""
        bitmap = Image.new("RGB", (4, 3), (255, 0, 0))
        matrix = to_matrix(bitmap)

        assert matrix.shape == (3, 4, 3)
        np.testing.assert_array_equal(matrix[0, 0], [0, 0, 255])

    def test_rgba_keeps_alpha(self):
        """Test that alpha survives as the fourth channel."""
        matrix = to_matrix(Image.new("RGBA", (2, 2), (10, 20, 30, 40)))
        np.testing.assert_array_equal(matrix[1, 1], [30, 20, 10, 40])

    def test_grayscale_is_2d(self):
        """Test that mode L becomes a 2D matrix."""
        assert to_matrix(Image.new("L", (5, 6), 77)).shape == (6, 5)

    def test_palette_is_converted(self):
        """Test that palette images are expanded to colour."""
        assert to_matrix(Image.new("P", (3, 3))).shape == (3, 3, 3)

    def test_rejects_non_bitmap(self):
        """Test that non-Pillow input is rejected."""
        with pytest.raises(InvalidImageError, match="Expected PIL.Image.Image"):
            to_matrix(np.zeros((2, 2, 3), dtype=np.uint8))


class TestRoundTrip:
    """Bitmap -> matrix -> bitmap preserves every sample."""

    @pytest.mark.parametrize("mode", ["L", "RGB", "RGBA"])
    def test_round_trip_lossless(self, mode):
        """Test that 8-bit data survives conversion both ways."""
        rng = np.random.default_rng(7)
        channels = {"L": (), "RGB": (3,), "RGBA": (4,)}[mode]
        samples = rng.integers(0, 256, size=(13, 17) + channels, dtype=np.uint8)
        bitmap = Image.fromarray(samples)

        restored = to_bitmap(to_matrix(bitmap))

        assert restored.mode == mode
        assert restored.size == bitmap.size
        np.testing.assert_array_equal(np.array(restored), samples)

    @pytest.mark.parametrize(
        "mode,expected", [("LA", "RGBA"), ("P", "RGB"), ("CMYK", "RGB"), ("1", "L")]
    )
    def test_other_modes_come_back_normalised(self, mode, expected):
        """Test that modes outside L/RGB/RGBA return in their normalised mode."""
        bitmap = Image.new(mode, (4, 3))
        normalised = bitmap.convert(expected)

        restored = to_bitmap(to_matrix(bitmap))

        assert restored.mode == expected
        np.testing.assert_array_equal(np.array(restored), np.array(normalised))

    def test_to_bitmap_rejects_empty(self):
        """Test that an empty matrix cannot become a bitmap."""
        with pytest.raises(InvalidImageError):
            to_bitmap(np.zeros((0, 3), dtype=np.uint8))
