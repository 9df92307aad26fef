"""
Geometric primitives: the document shape type and distance/angle math.
"""

from src.geometry.measurements import (
    angle_cosine,
    calculate_edge_lengths,
    centroid,
    distance,
    max_vertex_cosine,
    round_half_up,
)
from src.geometry.shapes import Quadrilateral

__all__ = [
    "Quadrilateral",
    "angle_cosine",
    "calculate_edge_lengths",
    "centroid",
    "distance",
    "max_vertex_cosine",
    "round_half_up",
]
