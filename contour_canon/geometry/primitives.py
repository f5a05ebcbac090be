"""
Geometry primitives shared by every normalization stage.

Handles:
- Coercing OpenCV-shaped point arrays to plain (N, 2) contours
- Point/edge distances (triangle altitude via Heron's formula)
- Bounding boxes and extents
- Polygon image moments
- Cartesian to polar conversion of canonical contours
"""

import math
from typing import Optional, Sequence

import cv2
import numpy as np

from contour_canon.domain.constants import ALTITUDE_DECIMALS, AREA_EPSILON, MIN_CONTOUR_POINTS
from contour_canon.domain.errors import InvalidContour


def as_contour_array(contour, dtype: Optional[type] = None) -> np.ndarray:
    """
    Return the contour as an ``(N, 2)`` array.

    Accepts lists of pairs, OpenCV ``(N, 1, 2)`` arrays and ``(N, 2)`` arrays.

    Args:
        contour: Point sequence
        dtype: Optional target dtype (keeps the input dtype when None)

    Returns:
        (N, 2) numpy array

    Raises:
        ValueError: If the input cannot be read as 2D points
    """
    arr = np.asarray(contour) if dtype is None else np.asarray(contour, dtype=dtype)
    if arr.size == 0:
        return arr.reshape(0, 2)
    if arr.shape[-1] != 2:
        raise ValueError(f"Expected 2D points, got array of shape {arr.shape}")
    return arr.reshape(-1, 2)


def euclidean_distance(p: Sequence[float], q: Sequence[float]) -> float:
    """Distance between two points."""
    return math.hypot(float(q[0]) - float(p[0]), float(q[1]) - float(p[1]))


def edge_altitude(
    edge_start: Sequence[float],
    edge_end: Sequence[float],
    point: Sequence[float],
) -> float:
    """
    Perpendicular distance from ``point`` to the line through an edge.

    The edge and the point form a triangle; its altitude over the edge is
    ``2 * area / base`` with the area from Heron's formula in Kahan's
    numerically stable form (sides sorted a >= b >= c). The result is
    rounded to ``ALTITUDE_DECIMALS`` places, so a pixel lying exactly on a
    threshold compares the same wherever it sits along a long edge.

    Args:
        edge_start: First edge endpoint
        edge_end: Second edge endpoint
        point: Point to measure

    Returns:
        Altitude in the input units. A zero-length edge yields 0.0.
    """
    base = euclidean_distance(edge_start, edge_end)
    if base == 0.0:
        return 0.0
    sides = sorted(
        (base, euclidean_distance(edge_start, point), euclidean_distance(edge_end, point)),
        reverse=True,
    )
    a, b, c = sides

    # Rounding can push the radicand slightly below zero for collinear points
    radicand = max((a + (b + c)) * (c - (a - b)) * (c + (a - b)) * (a + (b - c)), 0.0)
    area = 0.25 * math.sqrt(radicand)
    return round(2.0 * area / base, ALTITUDE_DECIMALS)


def bounding_box(contour) -> tuple[int, int, int, int]:
    """Upright bounding rectangle ``(x, y, width, height)`` of a contour."""
    pts = as_contour_array(contour)
    if np.issubdtype(pts.dtype, np.integer):
        pts = pts.astype(np.int32)
    else:
        pts = pts.astype(np.float32)
    x, y, w, h = cv2.boundingRect(pts)
    return int(x), int(y), int(w), int(h)


def aspect_ratio(contour) -> float:
    """Bounding-box width divided by height."""
    _, _, w, h = bounding_box(contour)
    if h == 0:
        return math.inf
    return float(w) / float(h)


def extract_min_max(contour) -> tuple[float, float, float, float]:
    """
    Coordinate extent of a contour.

    Returns:
        Tuple of (min_x, min_y, max_x, max_y)

    Raises:
        InvalidContour: If the contour is empty
    """
    pts = as_contour_array(contour, dtype=np.float64)
    if len(pts) == 0:
        raise InvalidContour("Cannot compute the extent of an empty contour")
    min_x, min_y = pts.min(axis=0)
    max_x, max_y = pts.max(axis=0)
    return float(min_x), float(min_y), float(max_x), float(max_y)


def signed_area(contour) -> float:
    """Shoelace area; the sign gives the traversal orientation."""
    pts = as_contour_array(contour, dtype=np.float64)
    if len(pts) < MIN_CONTOUR_POINTS:
        return 0.0
    x = pts[:, 0]
    y = pts[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def contour_moments(contour) -> dict[str, float]:
    """
    Image moments of the polygon bounded by the contour.

    Args:
        contour: Ordered contour points

    Returns:
        OpenCV moments dictionary (m00, m10, m01, mu20, mu11, mu02, ...)

    Raises:
        InvalidContour: If the contour has fewer than 3 points or zero area
    """
    pts = as_contour_array(contour)
    if len(pts) < MIN_CONTOUR_POINTS:
        raise InvalidContour(f"Contour has {len(pts)} points, need at least {MIN_CONTOUR_POINTS}")

    # cv2.moments only treats CV_32S / CV_32F input as a point set
    if np.issubdtype(pts.dtype, np.integer):
        pts = np.ascontiguousarray(pts, dtype=np.int32)
    else:
        pts = np.ascontiguousarray(pts, dtype=np.float32)

    moments = cv2.moments(pts)
    if abs(moments["m00"]) < AREA_EPSILON:
        raise InvalidContour("Contour encloses zero area (m00 == 0)")
    return moments


def contour_to_polar(contour) -> np.ndarray:
    """
    Convert a canonical-frame contour to polar coordinates about the origin.

    Returns:
        (N, 2) array of (rho, phi) with phi in (-pi, pi]
    """
    pts = as_contour_array(contour, dtype=np.float64)
    rho = np.hypot(pts[:, 0], pts[:, 1])
    phi = np.arctan2(pts[:, 1], pts[:, 0])
    return np.column_stack((rho, phi))
