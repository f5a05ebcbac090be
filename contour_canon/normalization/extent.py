"""
Max-extent normalization of canonical contours.

Each contour is divided by its own largest absolute coordinate so the shape
fits in [-1, 1] x [-1, 1]. Factors are stored per contour and never shared.
"""

from typing import Sequence

import numpy as np

from contour_canon.domain.errors import InvalidContour
from contour_canon.geometry.primitives import as_contour_array


def find_normalisation_factor(contour) -> float:
    """
    Largest absolute x or y coordinate of the contour.

    Raises:
        InvalidContour: If the contour is empty or collapses to the origin
    """
    pts = as_contour_array(contour, dtype=np.float64)
    if len(pts) == 0:
        raise InvalidContour("Cannot normalise an empty contour")
    factor = float(np.max(np.abs(pts)))
    if factor == 0.0 or not np.isfinite(factor):
        raise InvalidContour(f"Invalid normalisation factor {factor}")
    return factor


def normalise_point_fixed_factor(point: Sequence[float], factor: float) -> tuple[float, float]:
    """Scale a single point by 1 / factor."""
    return (float(point[0]) / factor, float(point[1]) / factor)


def normalise_contour_fixed_factor(contour, factor: float) -> np.ndarray:
    """Scale every point of a contour by 1 / factor."""
    if factor == 0.0:
        raise ValueError("Normalisation factor must be non-zero")
    return as_contour_array(contour, dtype=np.float64) / factor


def normalise_contour(contour) -> tuple[np.ndarray, float]:
    """
    Normalise a contour by its own extent.

    Returns:
        Tuple of (normalised (N, 2) points, factor used)
    """
    factor = find_normalisation_factor(contour)
    return normalise_contour_fixed_factor(contour, factor), factor


def denormalise_contour(contour, factor: float) -> np.ndarray:
    """Undo ``normalise_contour`` with the stored factor."""
    return as_contour_array(contour, dtype=np.float64) * factor


def normalise_all_contours(contours: list) -> tuple[list[np.ndarray], list[float]]:
    """
    Normalise each contour by its own factor.

    Returns:
        Tuple of (normalised contours, factors), paired by position
    """
    normalised = []
    factors = []
    for contour_idx, contour in enumerate(contours):
        try:
            points, factor = normalise_contour(contour)
        except InvalidContour as e:
            raise InvalidContour(str(e), index=contour_idx) from e
        normalised.append(points)
        factors.append(factor)
    return normalised, factors


def denormalise_all_contours(contours: list, factors: Sequence[float]) -> list[np.ndarray]:
    """
    Undo ``normalise_all_contours``.

    Raises:
        ValueError: If contours and factors have different lengths
    """
    if len(contours) != len(factors):
        raise ValueError(
            f"Got {len(contours)} contours but {len(factors)} normalisation factors"
        )
    return [denormalise_contour(c, f) for c, f in zip(contours, factors)]
