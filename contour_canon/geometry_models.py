"""
Pydantic models for the values exchanged with the pipeline.

These models define:
1. The immutable Point2D value type used at the library boundary
2. PipelineSettings, the validated per-call tuning parameters

Coordinate system: image pixels
- (0, 0) = top-left corner
- X increases left to right, Y increases top to bottom
"""

from typing import Annotated, Iterable, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

from contour_canon.config import (
    CONTOUR_AREA_RATIO,
    CONTOUR_LOW_ASPECT_RATIO,
    CONTOUR_HIGH_ASPECT_RATIO,
    HULL_DIST_THRESHOLD,
    CONTOUR_CLEAN_MASK,
    PIPELINE_MAX_WORKERS,
    PIPELINE_STRICT,
)


class Point2D(BaseModel):
    """2D coordinate point in floating-point image space."""
    model_config = ConfigDict(frozen=True)

    x: float = Field(..., description="X coordinate (pixels)")
    y: float = Field(..., description="Y coordinate (pixels)")

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


def points_from_array(contour: np.ndarray) -> list[Point2D]:
    """
    Convert an ``(N, 2)`` or OpenCV ``(N, 1, 2)`` array to Point2D values.

    Args:
        contour: Contour coordinates

    Returns:
        List of Point2D in contour order
    """
    arr = np.asarray(contour, dtype=np.float64).reshape(-1, 2)
    return [Point2D(x=float(x), y=float(y)) for x, y in arr]


def points_to_array(points: Iterable[Point2D]) -> np.ndarray:
    """Convert Point2D values back to an ``(N, 2)`` float64 array."""
    coords = [(p.x, p.y) for p in points]
    if not coords:
        return np.empty((0, 2), dtype=np.float64)
    return np.array(coords, dtype=np.float64)


class PipelineSettings(BaseModel):
    """
    Tuning parameters for one pipeline run.

    Defaults come from ``contour_canon.config`` (environment / .env).
    """
    area_ratio: Annotated[float, Field(gt=0.0)] = Field(
        default=CONTOUR_AREA_RATIO,
        description="Divisor of the mask area giving the minimum bounding-box area",
    )
    low_aspect_ratio: Annotated[float, Field(gt=0.0)] = Field(
        default=CONTOUR_LOW_ASPECT_RATIO,
        description="Smallest accepted width/height ratio (inclusive)",
    )
    high_aspect_ratio: Annotated[float, Field(gt=0.0)] = Field(
        default=CONTOUR_HIGH_ASPECT_RATIO,
        description="Largest accepted width/height ratio (inclusive)",
    )
    dist_threshold: Annotated[float, Field(gt=0.0)] = Field(
        default=HULL_DIST_THRESHOLD,
        description="Maximum distance (pixels) between a kept point and its hull edge",
    )
    clean_mask: bool = Field(
        default=CONTOUR_CLEAN_MASK,
        description="Run morphological clean-up on the mask before tracing",
    )
    max_workers: Optional[Annotated[int, Field(ge=1)]] = Field(
        default=PIPELINE_MAX_WORKERS,
        description="Worker threads for per-contour processing (None = executor default)",
    )
    strict: bool = Field(
        default=PIPELINE_STRICT,
        description="Re-raise hull/contour mismatches instead of dropping the contour",
    )

    @model_validator(mode="after")
    def _check_aspect_bounds(self) -> "PipelineSettings":
        if self.low_aspect_ratio > self.high_aspect_ratio:
            raise ValueError(
                f"low_aspect_ratio ({self.low_aspect_ratio}) exceeds "
                f"high_aspect_ratio ({self.high_aspect_ratio})"
            )
        return self
