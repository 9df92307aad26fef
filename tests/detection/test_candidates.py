"""
Unit tests for rectangle candidate filtering.
"""

import cv2
import numpy as np

from src.detection.candidates import find_rectangle_candidates, is_rectangle
from src.detection.config_loader import CandidateConfig


def _polygon(points):
    return np.array(points, dtype=np.float32).reshape(-1, 1, 2)


class TestIsRectangle:
    """Tests for is_rectangle."""

    IMAGE_AREA = 100.0 * 100.0

    def test_accepts_rectangle(self):
        """Test that a rectangle covering half the image qualifies."""
        polygon = _polygon([[10, 10], [90, 10], [90, 70], [10, 70]])
        assert is_rectangle(polygon, self.IMAGE_AREA, CandidateConfig())

    def test_rejects_wrong_vertex_count(self):
        """Test that triangles and pentagons are rejected."""
        triangle = _polygon([[10, 10], [90, 10], [50, 90]])
        assert not is_rectangle(triangle, self.IMAGE_AREA, CandidateConfig())

    def test_rejects_too_small(self):
        """Test the minimum area share (default 20%)."""
        polygon = _polygon([[10, 10], [40, 10], [40, 40], [10, 40]])  # 9%
        assert not is_rectangle(polygon, self.IMAGE_AREA, CandidateConfig())

    def test_rejects_too_large(self):
        """Test the maximum area share (default 98%), which drops the frame border."""
        polygon = _polygon([[0, 0], [99.9, 0], [99.9, 99.9], [0, 99.9]])
        assert not is_rectangle(polygon, self.IMAGE_AREA, CandidateConfig())

    def test_rejects_non_convex(self):
        """Test that a self-intersecting bow-tie is rejected."""
        bow_tie = _polygon([[10, 10], [90, 90], [90, 10], [10, 90]])
        assert not is_rectangle(bow_tie, self.IMAGE_AREA, CandidateConfig(min_area_ratio=0.0))

    def test_rejects_sharp_angles(self):
        """Test that a parallelogram with ~45 degree corners is rejected."""
        polygon = _polygon([[10, 10], [60, 10], [95, 80], [45, 80]])
        assert not is_rectangle(polygon, self.IMAGE_AREA, CandidateConfig())

    def test_cosine_limit_configurable(self):
        """Test that loosening max_cosine admits the parallelogram."""
        polygon = _polygon([[10, 10], [60, 10], [95, 80], [45, 80]])
        assert is_rectangle(polygon, self.IMAGE_AREA, CandidateConfig(max_cosine=0.9))


class TestFindRectangleCandidates:
    """Tests for find_rectangle_candidates."""

    @staticmethod
    def _binary_with_rectangles():
        binary = np.zeros((200, 200), dtype=np.uint8)
        cv2.rectangle(binary, (20, 20), (180, 150), 255, thickness=-1)
        cv2.rectangle(binary, (60, 60), (80, 80), 0, thickness=-1)  # Small hole
        return binary

    def test_finds_large_rectangle(self):
        """Test that the large region is accepted and the small hole is not."""
        candidates = find_rectangle_candidates(
            self._binary_with_rectangles(), CandidateConfig(), channel=1, level=2
        )

        assert len(candidates) == 1
        candidate = candidates[0]
        assert candidate.polygon.shape == (4, 1, 2)
        assert candidate.area == 160 * 130
        assert (candidate.channel, candidate.level) == (1, 2)

    def test_empty_image(self):
        """Test that an empty binary image has no candidates."""
        assert find_rectangle_candidates(np.zeros((50, 50), dtype=np.uint8), CandidateConfig()) == []

    def test_largest_contours_limit(self):
        """Test that limiting to the largest contour still finds the document."""
        config = CandidateConfig(largest_contours_limit=1)
        candidates = find_rectangle_candidates(self._binary_with_rectangles(), config)
        assert len(candidates) == 1
