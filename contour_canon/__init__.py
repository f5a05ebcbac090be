"""
contour_canon: canonical blob outlines for superformula fitting.

Re-exports the public API so consumers can write:
    from contour_canon import ContourNormalizer, PipelineSettings, ...
"""

from contour_canon.domain.errors import InvalidContour, HullCorrespondenceNotFound
from contour_canon.geometry_models import (
    Point2D,
    PipelineSettings,
    points_from_array,
    points_to_array,
)
from contour_canon.extraction import MaskProcessor, ExtractionResult, extract_contours
from contour_canon.filtering import compute_hull, filter_contour, filter_contours
from contour_canon.normalization import (
    AffineTransform,
    estimate_transform,
    forward_transform,
    inverse_transform,
    correct_distortion,
    correct_all_distortions,
    find_normalisation_factor,
    normalise_contour,
    denormalise_contour,
    normalise_all_contours,
    denormalise_all_contours,
)
from contour_canon.superformula import SuperformulaConfig, reconstruct_contour
from contour_canon.pipeline import (
    ContourNormalizer,
    NormalizedContour,
    DroppedContour,
    FrameResult,
    normalize_mask,
)

__all__ = [
    "InvalidContour",
    "HullCorrespondenceNotFound",
    "Point2D",
    "PipelineSettings",
    "points_from_array",
    "points_to_array",
    "MaskProcessor",
    "ExtractionResult",
    "extract_contours",
    "compute_hull",
    "filter_contour",
    "filter_contours",
    "AffineTransform",
    "estimate_transform",
    "forward_transform",
    "inverse_transform",
    "correct_distortion",
    "correct_all_distortions",
    "find_normalisation_factor",
    "normalise_contour",
    "denormalise_contour",
    "normalise_all_contours",
    "denormalise_all_contours",
    "SuperformulaConfig",
    "reconstruct_contour",
    "ContourNormalizer",
    "NormalizedContour",
    "DroppedContour",
    "FrameResult",
    "normalize_mask",
]
