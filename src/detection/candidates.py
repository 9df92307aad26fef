"""
Rectangle candidate filtering.

Turns a binary/edge image into the list of polygons that plausibly outline
a document: four vertices, a sensible share of the frame, convex, and no
corner much sharper or flatter than a right angle.
"""

import logging
from typing import List

import numpy as np

from src.detection.config_loader import CandidateConfig
from src.detection.types import RectangleCandidate
from src.geometry.measurements import max_vertex_cosine
from src.imaging.matrix import approx_polygon, contour_area, find_contours, is_convex

logger = logging.getLogger(__name__)

RECT_SIDE_COUNT = 4


def is_rectangle(polygon: np.ndarray, image_area: float, config: CandidateConfig) -> bool:
    """
    Decide whether an approximated polygon is a document candidate.

    Args:
        polygon: Approximated polygon, shape (N, 1, 2).
        image_area: Area of the image the polygon was found in.
        config: Acceptance rules.

    Returns:
        True if the polygon has 4 vertices, its area lies within
        [min_area_ratio, max_area_ratio] of ``image_area``, it is convex and
        its largest absolute vertex cosine is at most ``max_cosine``.
    """
    if len(polygon) != RECT_SIDE_COUNT:
        return False

    area = contour_area(polygon)
    if area < image_area * config.min_area_ratio or area > image_area * config.max_area_ratio:
        return False

    if not is_convex(polygon):
        return False

    return max_vertex_cosine(polygon) <= config.max_cosine


def find_rectangle_candidates(
    binary: np.ndarray,
    config: CandidateConfig,
    channel: int = -1,
    level: int = 0,
) -> List[RectangleCandidate]:
    """
    Extract contours from a binary image and keep the rectangle-like ones.

    Args:
        binary: Single-channel binary or edge image.
        config: Acceptance rules.
        channel: Colour plane the image was derived from (for diagnostics).
        level: Threshold level the image was produced with.

    Returns:
        Accepted candidates in contour tracing order.
    """
    image_area = float(binary.shape[0] * binary.shape[1])
    contours = find_contours(binary)

    if config.largest_contours_limit is not None:
        contours = sorted(contours, key=contour_area, reverse=True)
        contours = contours[: config.largest_contours_limit]

    candidates = []
    for contour in contours:
        polygon = approx_polygon(contour, config.approx_epsilon_ratio, closed=True)

        if is_rectangle(polygon, image_area, config):
            candidates.append(
                RectangleCandidate(
                    polygon=polygon,
                    area=contour_area(polygon),
                    channel=channel,
                    level=level,
                )
            )

    logger.debug(
        f"Channel {channel}, level {level}: {len(candidates)} of "
        f"{len(contours)} contours accepted"
    )

    return candidates
