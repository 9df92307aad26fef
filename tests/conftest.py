"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules.
"""

import pytest


@pytest.fixture
def sample_quadrilateral_points():
    """Fixture providing 4 unordered corner points of a slightly skewed page."""
    import numpy as np

    return np.array(
        [
            [300, 150],  # Top-right area
            [100, 200],  # Top-left area
            [320, 400],  # Bottom-right area
            [80, 380],  # Bottom-left area
        ],
        dtype=np.float32,
    )


@pytest.fixture
def document_image():
    """
    Fixture providing a dark document on a light background.

    600 wide, 800 high; the document spans (100, 100) to (500, 700).
    """
    import cv2
    import numpy as np

    image = np.full((800, 600, 3), 230, dtype=np.uint8)
    pts = np.array([[100, 100], [500, 100], [500, 700], [100, 700]], dtype=np.int32)
    cv2.fillPoly(image, [pts], (40, 40, 40))

    return image


@pytest.fixture
def skewed_document_image():
    """Fixture providing a perspective-distorted white page on a dark table."""
    import cv2
    import numpy as np

    image = np.full((600, 800, 3), 35, dtype=np.uint8)
    # TL, TR, BR, BL in drawing order
    pts = np.array([[180, 90], [640, 120], [690, 520], [130, 490]], dtype=np.int32)
    cv2.fillPoly(image, [pts], (225, 225, 225))
    cv2.putText(
        image, "INVOICE", (260, 300), cv2.FONT_HERSHEY_SIMPLEX, 2.0, (20, 20, 20), 4
    )

    return image, pts.astype(np.float32)


@pytest.fixture
def blank_image():
    """Fixture providing a uniform gray image with nothing to detect."""
    import numpy as np

    return np.full((480, 640, 3), 128, dtype=np.uint8)


@pytest.fixture
def gradient_image():
    """Fixture providing a 3-channel horizontal gradient (distinct B, G, R)."""
    import numpy as np

    ramp = np.tile(np.linspace(0, 255, 320, dtype=np.uint8), (240, 1))
    return np.dstack([ramp, 255 - ramp, np.full_like(ramp, 90)])
