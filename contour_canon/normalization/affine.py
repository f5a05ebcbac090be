"""
Moment-based affine distortion correction.

The second-order moments of a blob give its orientation and the spread
along its principal axes. From them we build three homogeneous matrices:

    T  moves the mass center to the origin
    S  equalizes the two axis variances to their geometric mean
    R  rotates by the moment orientation

and map contour points with M = R @ S @ T. The inverse of M brings
canonical-frame results back to image coordinates.

Eigenvalue ordering: ``numpy.linalg.eigh`` returns eigenvalues in ascending
order; they are reversed here so that lambda_0 is always the LARGEST
variance. When mu20 > mu02 (blob wider than tall) lambda_0 drives the x
scale, otherwise the y scale.
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from contour_canon.domain.constants import EIGEN_EPSILON, MOMENT_EPSILON
from contour_canon.domain.errors import InvalidContour
from contour_canon.geometry.primitives import as_contour_array, contour_moments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AffineTransform:
    """Rotation, scale and translation of one contour, kept separately."""
    rotation: np.ndarray
    scale: np.ndarray
    translation: np.ndarray
    angle: float = 0.0

    @property
    def matrix(self) -> np.ndarray:
        """Composite forward matrix R @ S @ T."""
        return self.rotation @ self.scale @ self.translation

    @property
    def inverse_matrix(self) -> np.ndarray:
        return np.linalg.inv(self.matrix)

    @property
    def scale_x(self) -> float:
        return float(self.scale[0, 0])

    @property
    def scale_y(self) -> float:
        return float(self.scale[1, 1])

    @property
    def center(self) -> tuple[float, float]:
        """Mass center of the source contour in image coordinates."""
        return (-float(self.translation[0, 2]), -float(self.translation[1, 2]))

    def forward(self, points) -> np.ndarray:
        return forward_transform(points, self)

    def inverse(self, points) -> np.ndarray:
        return inverse_transform(points, self)


def rotation_matrix(angle: float) -> np.ndarray:
    """3x3 homogeneous rotation by ``angle`` radians."""
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array([
        [c, -s, 0.0],
        [s, c, 0.0],
        [0.0, 0.0, 1.0],
    ], dtype=np.float64)


def scaling_matrix(scale_x: float, scale_y: float) -> np.ndarray:
    """3x3 homogeneous axis-aligned scaling."""
    return np.diag([scale_x, scale_y, 1.0]).astype(np.float64)


def translation_matrix(tx: float, ty: float) -> np.ndarray:
    """3x3 homogeneous translation by (tx, ty)."""
    matrix = np.eye(3, dtype=np.float64)
    matrix[0, 2] = tx
    matrix[1, 2] = ty
    return matrix


def moment_orientation(mu11p: float, mu20p: float, mu02p: float) -> float:
    """
    Blob orientation from normalized central moments.

    Returns 0.0 when mu11p is (numerically) zero, so a symmetric blob with
    mu20p == mu02p has no preferred axis. A non-zero mu11p over a zero
    denominator is a diagonal blob and yields +/- pi/4.
    """
    spread = abs(mu20p) + abs(mu02p)
    if mu11p == 0.0 or abs(mu11p) <= MOMENT_EPSILON * spread:
        return 0.0
    denominator = mu20p - mu02p
    if denominator == 0.0:
        return math.copysign(math.pi / 4.0, mu11p)
    return 0.5 * math.atan((2.0 * mu11p) / denominator)


def covariance_eigenvalues(mu20p: float, mu11p: float, mu02p: float) -> np.ndarray:
    """
    Eigenvalues of [[mu20p, mu11p], [mu11p, mu02p]] in DESCENDING order.

    Raises:
        InvalidContour: If either eigenvalue is zero or negative
    """
    covariance = np.array([[mu20p, mu11p], [mu11p, mu02p]], dtype=np.float64)
    eigenvalues = np.linalg.eigh(covariance)[0][::-1]

    largest = float(eigenvalues[0])
    if not np.all(np.isfinite(eigenvalues)) or largest <= 0.0:
        raise InvalidContour("Second-moment matrix has no positive eigenvalue")
    if float(eigenvalues[1]) <= EIGEN_EPSILON * largest:
        raise InvalidContour(
            f"Degenerate second-moment matrix (eigenvalues {largest:.6g}, {float(eigenvalues[1]):.6g})"
        )
    return eigenvalues


def estimate_transform(contour) -> AffineTransform:
    """
    Build the rotation, scale and translation that canonicalize a contour.

    Args:
        contour: (N, 2) contour, N >= 3, enclosing a non-zero area

    Returns:
        AffineTransform for the contour

    Raises:
        InvalidContour: Fewer than 3 points, zero area, or zero-width blob
    """
    moments = contour_moments(contour)
    m00 = moments["m00"]

    xbar = moments["m10"] / m00
    ybar = moments["m01"] / m00

    mu11p = moments["mu11"] / m00
    mu20p = moments["mu20"] / m00
    mu02p = moments["mu02"] / m00

    angle = moment_orientation(mu11p, mu20p, mu02p)
    lambda0, lambda1 = covariance_eigenvalues(mu20p, mu11p, mu02p)

    # Geometric mean spread: both axes end up with variance sqrt(lambda0 * lambda1)
    common = (lambda0 * lambda1) ** 0.25
    if moments["mu20"] > moments["mu02"]:
        scale_x = common / math.sqrt(lambda0)
        scale_y = common / math.sqrt(lambda1)
    else:
        scale_x = common / math.sqrt(lambda1)
        scale_y = common / math.sqrt(lambda0)

    logger.debug(
        "Moments: center=(%.3f, %.3f) angle=%.5f scale=(%.5f, %.5f)",
        xbar, ybar, angle, scale_x, scale_y,
    )

    return AffineTransform(
        rotation=rotation_matrix(angle),
        scale=scaling_matrix(scale_x, scale_y),
        translation=translation_matrix(-xbar, -ybar),
        angle=angle,
    )


def _apply_homogeneous(points, matrix: np.ndarray) -> np.ndarray:
    pts = as_contour_array(points, dtype=np.float64)
    if len(pts) == 0:
        return pts.copy()
    homogeneous = np.vstack([pts.T, np.ones(len(pts), dtype=np.float64)])
    transformed = matrix @ homogeneous
    return (transformed[:2] / transformed[2]).T


def forward_transform(points, transform: AffineTransform) -> np.ndarray:
    """Map image-space points into the canonical frame."""
    return _apply_homogeneous(points, transform.matrix)


def inverse_transform(points, transform: AffineTransform) -> np.ndarray:
    """Map canonical-frame points back to image space."""
    return _apply_homogeneous(points, transform.inverse_matrix)


def correct_distortion(contour) -> tuple[np.ndarray, AffineTransform]:
    """
    Canonicalize one contour.

    Returns:
        Tuple of (transformed (N, 2) float64 points, transform used)

    Raises:
        InvalidContour: See ``estimate_transform``
    """
    transform = estimate_transform(contour)
    return forward_transform(contour, transform), transform


def correct_all_distortions(
    contours: list[np.ndarray],
) -> tuple[list[np.ndarray], list[AffineTransform]]:
    """
    Canonicalize every contour.

    Raises:
        InvalidContour: Tagged with the index of the first degenerate contour
    """
    corrected = []
    transforms = []
    for contour_idx, contour in enumerate(contours):
        try:
            points, transform = correct_distortion(contour)
        except InvalidContour as e:
            raise InvalidContour(str(e), index=contour_idx) from e
        corrected.append(points)
        transforms.append(transform)
    return corrected, transforms
