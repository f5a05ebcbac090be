"""
Geometry primitives used by all stages.

Re-exports the helpers so consumers can write:
    from contour_canon.geometry import edge_altitude, contour_moments, ...
"""

from contour_canon.geometry.primitives import (
    as_contour_array,
    euclidean_distance,
    edge_altitude,
    bounding_box,
    aspect_ratio,
    extract_min_max,
    signed_area,
    contour_moments,
    contour_to_polar,
)

__all__ = [
    "as_contour_array",
    "euclidean_distance",
    "edge_altitude",
    "bounding_box",
    "aspect_ratio",
    "extract_min_max",
    "signed_area",
    "contour_moments",
    "contour_to_polar",
]
