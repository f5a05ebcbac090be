"""
Contour extraction from segmentation masks.

Provides:
- MaskProcessor: mask coercion and morphological clean-up
- extract_contours: trace + reject inconsistent regions
"""

from contour_canon.extraction.mask import MaskProcessor
from contour_canon.extraction.contour_extractor import (
    ExtractionResult,
    find_raw_contours,
    is_consistent_region,
    reject_inconsistent_contours,
    extract_contours,
)

__all__ = [
    "MaskProcessor",
    "ExtractionResult",
    "find_raw_contours",
    "is_consistent_region",
    "reject_inconsistent_contours",
    "extract_contours",
]
