"""
Hull-guided contour denoising.

Boundary tracing leaves single-pixel jags along the outline of a blob. The
filter walks each contour together with its convex hull and keeps only the
points that lie close to the hull edge currently being followed.

The walk relies on the first point of a ``cv2.findContours`` contour being
the top-most/left-most pixel, which is always a hull vertex. The hull is
oriented opposite to the contour, so stepping backwards through the hull
follows the contour. Hull vertices are matched by exact value, which
requires integer contour points (before any transform).
"""

import logging
from typing import Optional

import cv2
import numpy as np

from contour_canon.config import HULL_DIST_THRESHOLD
from contour_canon.domain.constants import MIN_HULL_POINTS
from contour_canon.domain.errors import HullCorrespondenceNotFound
from contour_canon.geometry.primitives import as_contour_array, edge_altitude, signed_area

logger = logging.getLogger(__name__)


def compute_hull(contour) -> np.ndarray:
    """
    Convex hull of a contour as an ``(H, 2)`` array of contour points.

    Args:
        contour: (N, 2) integer contour

    Returns:
        Hull vertices (``filter_contour`` re-orients them against the contour)
    """
    pts = as_contour_array(contour)
    if len(pts) == 0:
        return pts.reshape(0, 2)
    if np.issubdtype(pts.dtype, np.integer):
        pts = np.ascontiguousarray(pts, dtype=np.int32)
    else:
        pts = np.ascontiguousarray(pts, dtype=np.float32)
    hull = cv2.convexHull(pts, clockwise=False, returnPoints=True)
    return as_contour_array(hull)


def _find_hull_cursor(hull_points: list[tuple], target: tuple) -> int:
    for hull_idx, hull_point in enumerate(hull_points):
        if hull_point == target:
            return hull_idx
    raise HullCorrespondenceNotFound(
        f"Contour start point {target} is not a vertex of its convex hull"
    )


def filter_contour(
    contour,
    hull: Optional[np.ndarray] = None,
    dist_threshold: float = HULL_DIST_THRESHOLD,
) -> np.ndarray:
    """
    Drop contour points farther than ``dist_threshold`` from the local hull edge.

    Args:
        contour: (N, 2) integer contour in tracing order
        hull: Precomputed hull (computed from ``contour`` when None)
        dist_threshold: Maximum accepted distance in pixels (exclusive)

    Returns:
        (M, 2) array of kept points, M <= N, in the original order. Empty
        when the hull has fewer than 3 vertices.

    Raises:
        HullCorrespondenceNotFound: If contour[0] is not a hull vertex
    """
    pts = as_contour_array(contour)
    if hull is None:
        hull = compute_hull(pts)
    hull = as_contour_array(hull)

    if len(hull) < MIN_HULL_POINTS:
        logger.debug("Skipping contour with degenerate hull (%d vertices)", len(hull))
        return pts[:0].copy()

    # Stepping backwards must follow the contour
    if signed_area(hull) * signed_area(pts) > 0:
        hull = hull[::-1]

    contour_points = [tuple(p) for p in pts.tolist()]
    hull_points = [tuple(p) for p in hull.tolist()]
    hull_size = len(hull_points)

    hull_idx = _find_hull_cursor(hull_points, contour_points[0])
    current_hull_point = hull_points[hull_idx]
    hull_idx = (hull_idx - 1) % hull_size
    next_hull_point = hull_points[hull_idx]

    kept = []
    for point_idx, contour_point in enumerate(contour_points):
        if edge_altitude(current_hull_point, next_hull_point, contour_point) < dist_threshold:
            kept.append(point_idx)

        # Reached the end of the current edge: move to the next one
        if contour_point == next_hull_point:
            current_hull_point = next_hull_point
            hull_idx = (hull_idx - 1) % hull_size
            next_hull_point = hull_points[hull_idx]

    return pts[kept]


def filter_contours(
    contours: list[np.ndarray],
    dist_threshold: float = HULL_DIST_THRESHOLD,
) -> list[np.ndarray]:
    """
    Apply ``filter_contour`` to every contour, each against its own hull.

    Raises:
        HullCorrespondenceNotFound: Tagged with the index of the failing contour
    """
    filtered = []
    for contour_idx, contour in enumerate(contours):
        try:
            filtered.append(filter_contour(contour, dist_threshold=dist_threshold))
        except HullCorrespondenceNotFound as e:
            raise HullCorrespondenceNotFound(str(e), index=contour_idx) from e
    return filtered
