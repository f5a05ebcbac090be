"""
Contour extraction from binary masks.

Traces the external boundary of every foreground region at full resolution
(no point decimation) and rejects regions whose bounding box is too small
or too far from square to be a candidate blob.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import cv2
import numpy as np

from contour_canon.config import (
    CONTOUR_AREA_RATIO,
    CONTOUR_LOW_ASPECT_RATIO,
    CONTOUR_HIGH_ASPECT_RATIO,
)
from contour_canon.extraction.mask import MaskLike, MaskProcessor
from contour_canon.geometry.primitives import as_contour_array, bounding_box

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Contours that survived rejection, with their trace order positions."""
    contours: list[np.ndarray] = field(default_factory=list)
    hierarchy: np.ndarray = field(default_factory=lambda: np.empty((0, 4), dtype=np.int32))
    indices: list[int] = field(default_factory=list)
    raw_count: int = 0
    mask_shape: tuple[int, int] = (0, 0)

    def __len__(self) -> int:
        return len(self.contours)

    @property
    def is_empty(self) -> bool:
        return not self.contours


def find_raw_contours(mask: np.ndarray) -> tuple[list[np.ndarray], np.ndarray]:
    """
    Trace the external contours of all foreground regions.

    Args:
        mask: (H, W) uint8 binary mask (0 background, 255 foreground)

    Returns:
        Tuple of (contours as (N, 2) int32 arrays, hierarchy as (K, 4) array).
        An all-background mask gives ([], empty hierarchy).
    """
    traced, hierarchy = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_NONE)
    contours = [as_contour_array(c).astype(np.int32) for c in traced]
    if hierarchy is None:
        hierarchy = np.empty((0, 4), dtype=np.int32)
    else:
        hierarchy = hierarchy.reshape(-1, 4)
    return contours, hierarchy


def is_consistent_region(
    contour,
    mask_shape: tuple[int, int],
    area_ratio: float = CONTOUR_AREA_RATIO,
    low_aspect_ratio: float = CONTOUR_LOW_ASPECT_RATIO,
    high_aspect_ratio: float = CONTOUR_HIGH_ASPECT_RATIO,
) -> bool:
    """
    Check one contour against the area and aspect ratio policy.

    The bounding-box area stands in for the contour area. Aspect ratio
    bounds are inclusive: a ratio equal to either bound is kept.
    """
    _, _, width, height = bounding_box(contour)
    mask_area = int(mask_shape[0]) * int(mask_shape[1])
    region_area = width * height

    if region_area < mask_area / area_ratio:
        return False
    if height == 0:
        return False

    ratio = width / height
    return low_aspect_ratio <= ratio <= high_aspect_ratio


def reject_inconsistent_contours(
    contours: list[np.ndarray],
    hierarchy: Optional[np.ndarray],
    mask_shape: tuple[int, int],
    area_ratio: float = CONTOUR_AREA_RATIO,
    low_aspect_ratio: float = CONTOUR_LOW_ASPECT_RATIO,
    high_aspect_ratio: float = CONTOUR_HIGH_ASPECT_RATIO,
) -> ExtractionResult:
    """
    Keep only contours that pass ``is_consistent_region``.

    Builds new collections instead of erasing from the inputs.

    Args:
        contours: Traced contours
        hierarchy: (K, 4) hierarchy rows matching ``contours`` (may be None)
        mask_shape: (height, width) of the source mask
        area_ratio: Divisor of the mask area giving the minimum bbox area
        low_aspect_ratio: Smallest accepted width/height
        high_aspect_ratio: Largest accepted width/height

    Returns:
        ExtractionResult holding surviving contours, hierarchy rows and
        their positions in the input list
    """
    kept_indices = [
        i for i, contour in enumerate(contours)
        if is_consistent_region(contour, mask_shape, area_ratio, low_aspect_ratio, high_aspect_ratio)
    ]

    if hierarchy is not None and len(hierarchy) == len(contours) and kept_indices:
        kept_hierarchy = np.asarray(hierarchy).reshape(-1, 4)[kept_indices]
    else:
        kept_hierarchy = np.empty((0, 4), dtype=np.int32)

    return ExtractionResult(
        contours=[contours[i] for i in kept_indices],
        hierarchy=kept_hierarchy,
        indices=kept_indices,
        raw_count=len(contours),
        mask_shape=(int(mask_shape[0]), int(mask_shape[1])),
    )


def extract_contours(
    mask: MaskLike,
    area_ratio: float = CONTOUR_AREA_RATIO,
    low_aspect_ratio: float = CONTOUR_LOW_ASPECT_RATIO,
    high_aspect_ratio: float = CONTOUR_HIGH_ASPECT_RATIO,
    clean: bool = False,
) -> ExtractionResult:
    """
    Turn a binary mask into the set of plausible blob contours.

    Args:
        mask: Binary mask (numpy array or PIL Image); non-zero is foreground
        area_ratio: Divisor of the mask area giving the minimum bbox area
        low_aspect_ratio: Smallest accepted width/height
        high_aspect_ratio: Largest accepted width/height
        clean: Run MaskProcessor.clean before tracing

    Returns:
        ExtractionResult; empty for an all-background mask
    """
    binary = MaskProcessor.to_binary(mask)
    if clean:
        binary = MaskProcessor.clean(binary)

    contours, hierarchy = find_raw_contours(binary)
    if not contours:
        logger.debug("No foreground regions in %dx%d mask", binary.shape[1], binary.shape[0])
        return ExtractionResult(mask_shape=binary.shape[:2])

    result = reject_inconsistent_contours(
        contours,
        hierarchy,
        binary.shape[:2],
        area_ratio=area_ratio,
        low_aspect_ratio=low_aspect_ratio,
        high_aspect_ratio=high_aspect_ratio,
    )
    logger.debug(
        "Kept %d of %d traced contours (area_ratio=%s, aspect=[%s, %s])",
        len(result), result.raw_count, area_ratio, low_aspect_ratio, high_aspect_ratio,
    )
    return result
