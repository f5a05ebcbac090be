"""
Normalization stages: affine distortion correction and extent scaling.
"""

from contour_canon.normalization.affine import (
    AffineTransform,
    estimate_transform,
    forward_transform,
    inverse_transform,
    correct_distortion,
    correct_all_distortions,
)
from contour_canon.normalization.extent import (
    find_normalisation_factor,
    normalise_point_fixed_factor,
    normalise_contour_fixed_factor,
    normalise_contour,
    denormalise_contour,
    normalise_all_contours,
    denormalise_all_contours,
)

__all__ = [
    "AffineTransform",
    "estimate_transform",
    "forward_transform",
    "inverse_transform",
    "correct_distortion",
    "correct_all_distortions",
    "find_normalisation_factor",
    "normalise_point_fixed_factor",
    "normalise_contour_fixed_factor",
    "normalise_contour",
    "denormalise_contour",
    "normalise_all_contours",
    "denormalise_all_contours",
]
