"""
Per-frame contour normalization pipeline.

mask -> extract_contours -> filter_contour -> correct_distortion
     -> normalise_contour -> FrameResult

Each surviving contour is processed independently; with ``max_workers > 1``
the per-contour stages run on a thread pool and results are collected back
in trace order. A degenerate contour is dropped and reported in
``FrameResult.dropped``; it never aborts the frame.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np

from contour_canon.domain.constants import REASON_HULL_MISMATCH, REASON_INVALID_CONTOUR
from contour_canon.domain.errors import HullCorrespondenceNotFound, InvalidContour
from contour_canon.extraction.contour_extractor import ExtractionResult, extract_contours
from contour_canon.extraction.mask import MaskLike
from contour_canon.filtering.hull_filter import filter_contour
from contour_canon.geometry_models import PipelineSettings, Point2D, points_from_array
from contour_canon.normalization.affine import AffineTransform, correct_distortion
from contour_canon.normalization.extent import denormalise_contour, normalise_contour

logger = logging.getLogger(__name__)


@dataclass
class NormalizedContour:
    """A canonical contour plus what is needed to map results back."""
    index: int
    points: np.ndarray
    transform: AffineTransform
    factor: float
    raw_point_count: int = 0
    filtered_point_count: int = 0

    def to_image_space(self, points: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Map canonical-frame points back to image coordinates.

        Applies the inverse extent scaling, then the inverse affine transform.

        Args:
            points: Canonical points (defaults to this contour's own points)
        """
        source = self.points if points is None else points
        return self.transform.inverse(denormalise_contour(source, self.factor))

    def to_points(self) -> list[Point2D]:
        return points_from_array(self.points)


@dataclass
class DroppedContour:
    """A contour removed from the frame and why."""
    index: int
    reason: str
    message: str


@dataclass
class FrameResult:
    """Output of one pipeline run."""
    contours: list[NormalizedContour] = field(default_factory=list)
    dropped: list[DroppedContour] = field(default_factory=list)
    mask_shape: tuple[int, int] = (0, 0)

    @property
    def is_empty(self) -> bool:
        return not self.contours

    @property
    def transforms(self) -> list[AffineTransform]:
        return [c.transform for c in self.contours]

    @property
    def factors(self) -> list[float]:
        return [c.factor for c in self.contours]


class ContourNormalizer:
    """
    Extract, denoise and canonicalize all blob contours of a mask.

    Stateless between calls: the same instance may process many frames.
    """

    def __init__(self, settings: Optional[PipelineSettings] = None):
        """
        Args:
            settings: Tuning parameters (defaults from contour_canon.config)
        """
        self.settings = settings or PipelineSettings()

    def extract(self, mask: MaskLike) -> ExtractionResult:
        """Trace the mask and keep the plausible regions."""
        return extract_contours(
            mask,
            area_ratio=self.settings.area_ratio,
            low_aspect_ratio=self.settings.low_aspect_ratio,
            high_aspect_ratio=self.settings.high_aspect_ratio,
            clean=self.settings.clean_mask,
        )

    def process_contour(self, index: int, contour: np.ndarray) -> NormalizedContour:
        """
        Run the per-contour stages on one traced contour.

        Args:
            index: Position of the contour in trace order
            contour: (N, 2) integer contour

        Returns:
            NormalizedContour

        Raises:
            InvalidContour: Degenerate contour (tagged with ``index``)
            HullCorrespondenceNotFound: Contour/hull mismatch (tagged with ``index``)
        """
        try:
            filtered = filter_contour(contour, dist_threshold=self.settings.dist_threshold)
            corrected, transform = correct_distortion(filtered)
            normalised, factor = normalise_contour(corrected)
        except InvalidContour as e:
            raise InvalidContour(str(e), index=index) from e
        except HullCorrespondenceNotFound as e:
            raise HullCorrespondenceNotFound(str(e), index=index) from e

        return NormalizedContour(
            index=index,
            points=normalised,
            transform=transform,
            factor=factor,
            raw_point_count=len(contour),
            filtered_point_count=len(filtered),
        )

    def _run_one(
        self, index: int, contour: np.ndarray
    ) -> Union[NormalizedContour, DroppedContour]:
        try:
            return self.process_contour(index, contour)
        except InvalidContour as e:
            logger.info("Dropping contour %d: %s", index, e)
            return DroppedContour(index=index, reason=REASON_INVALID_CONTOUR, message=str(e))
        except HullCorrespondenceNotFound as e:
            logger.error("Hull correspondence failed for contour %d: %s", index, e)
            if self.settings.strict:
                raise
            return DroppedContour(index=index, reason=REASON_HULL_MISMATCH, message=str(e))

    def process(self, mask: MaskLike) -> FrameResult:
        """
        Normalize every plausible blob of a mask.

        Args:
            mask: Binary mask (numpy array or PIL Image)

        Returns:
            FrameResult with contours and drops ordered by trace index.
            An all-background mask gives an empty result.

        Raises:
            HullCorrespondenceNotFound: Only when ``settings.strict`` is set
        """
        extraction = self.extract(mask)
        if extraction.is_empty:
            return FrameResult(mask_shape=extraction.mask_shape)

        jobs = list(zip(extraction.indices, extraction.contours))
        workers = self.settings.max_workers

        if workers == 1 or len(jobs) == 1:
            outcomes = [self._run_one(index, contour) for index, contour in jobs]
        else:
            by_index = {}
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {
                    executor.submit(self._run_one, index, contour): index
                    for index, contour in jobs
                }
                for future in as_completed(futures):
                    by_index[futures[future]] = future.result()
            outcomes = [by_index[index] for index, _ in jobs]

        result = FrameResult(mask_shape=extraction.mask_shape)
        for outcome in outcomes:
            if isinstance(outcome, NormalizedContour):
                result.contours.append(outcome)
            else:
                result.dropped.append(outcome)

        logger.info(
            "Normalized %d contour(s), dropped %d (traced %d)",
            len(result.contours), len(result.dropped), extraction.raw_count,
        )
        return result


def normalize_mask(mask: MaskLike, settings: Optional[PipelineSettings] = None) -> FrameResult:
    """Convenience wrapper: ``ContourNormalizer(settings).process(mask)``."""
    return ContourNormalizer(settings).process(mask)
