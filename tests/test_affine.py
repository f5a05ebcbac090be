import math

import cv2
import numpy as np
import pytest

from contour_canon.domain.errors import InvalidContour
from contour_canon.normalization.affine import (
    AffineTransform,
    correct_all_distortions,
    correct_distortion,
    covariance_eigenvalues,
    estimate_transform,
    forward_transform,
    inverse_transform,
    moment_orientation,
    rotation_matrix,
    scaling_matrix,
    translation_matrix,
)

from conftest import rectangle_corners


def _float_moments(points):
    return cv2.moments(np.ascontiguousarray(points, dtype=np.float32))


def test_eigenvalues_are_descending():
    np.testing.assert_allclose(covariance_eigenvalues(5.0, 0.0, 2.0), [5.0, 2.0])
    np.testing.assert_allclose(covariance_eigenvalues(2.0, 0.0, 5.0), [5.0, 2.0])
    values = covariance_eigenvalues(4.0, 1.5, 3.0)
    assert values[0] > values[1]


def test_zero_eigenvalue_is_invalid():
    with pytest.raises(InvalidContour):
        covariance_eigenvalues(4.0, 0.0, 0.0)


def test_symmetric_blob_has_zero_orientation():
    assert moment_orientation(0.0, 3.0, 3.0) == 0.0
    assert moment_orientation(0.0, 5.0, 2.0) == 0.0


def test_orientation_formula_and_diagonal_case():
    assert moment_orientation(1.0, 5.0, 2.0) == pytest.approx(0.5 * math.atan(2.0 / 3.0))
    assert moment_orientation(1.0, 3.0, 3.0) == pytest.approx(math.pi / 4)
    assert moment_orientation(-1.0, 3.0, 3.0) == pytest.approx(-math.pi / 4)


def test_matrix_builders():
    np.testing.assert_allclose(rotation_matrix(0.0), np.eye(3))
    np.testing.assert_allclose(scaling_matrix(2.0, 3.0), np.diag([2.0, 3.0, 1.0]))
    t = translation_matrix(-4.0, 7.0)
    assert t[0, 2] == -4.0 and t[1, 2] == 7.0 and t[2, 2] == 1.0


def test_wide_blob_shrinks_x_axis():
    corners = rectangle_corners(201, 51)  # 200 x 50 polygon
    transform = estimate_transform(corners)
    moments = cv2.moments(corners)

    assert transform.scale_x < transform.scale_y
    assert transform.scale_y / transform.scale_x == pytest.approx(
        math.sqrt(moments["mu20"] / moments["mu02"]), rel=1e-6
    )
    assert transform.angle == pytest.approx(0.0, abs=1e-9)
    assert transform.center == pytest.approx((100.0, 25.0))


def test_tall_blob_shrinks_y_axis():
    transform = estimate_transform(rectangle_corners(51, 201))
    assert transform.scale_x > transform.scale_y


def test_corrected_contour_is_centered_and_isotropic():
    corrected, _ = correct_distortion(rectangle_corners(201, 51, origin=(30, 12)))
    moments = _float_moments(corrected)
    assert moments["m10"] / moments["m00"] == pytest.approx(0.0, abs=1e-3)
    assert moments["m01"] / moments["m00"] == pytest.approx(0.0, abs=1e-3)
    assert moments["mu20"] == pytest.approx(moments["mu02"], rel=1e-4)


def test_total_second_moment_energy_is_geometric_mean():
    corners = rectangle_corners(201, 51)
    moments = cv2.moments(corners)
    mu20p = moments["mu20"] / moments["m00"]
    mu02p = moments["mu02"] / moments["m00"]

    corrected, _ = correct_distortion(corners)
    out = _float_moments(corrected)
    assert out["mu20"] / out["m00"] == pytest.approx(math.sqrt(mu20p * mu02p), rel=1e-4)


def test_forward_then_inverse_round_trip():
    transform = AffineTransform(
        rotation=rotation_matrix(0.3),
        scale=scaling_matrix(1.7, 0.4),
        translation=translation_matrix(-10.0, 5.0),
        angle=0.3,
    )
    rng = np.random.default_rng(7)
    points = rng.uniform(-200.0, 200.0, size=(50, 2))

    there = forward_transform(points, transform)
    back = inverse_transform(there, transform)
    np.testing.assert_allclose(back, points, atol=1e-9)
    np.testing.assert_allclose(transform.inverse(transform.forward(points)), points, atol=1e-9)


def test_composite_order_is_rotation_scale_translation():
    transform = AffineTransform(
        rotation=rotation_matrix(math.pi / 2),
        scale=scaling_matrix(2.0, 1.0),
        translation=translation_matrix(-1.0, 0.0),
    )
    # (2, 0) -> translate (1, 0) -> scale (2, 0) -> rotate (0, 2)
    np.testing.assert_allclose(transform.forward([[2.0, 0.0]]), [[0.0, 2.0]], atol=1e-12)


def test_transform_is_deterministic():
    corners = rectangle_corners(120, 80, origin=(3, 9))
    first, t1 = correct_distortion(corners)
    second, t2 = correct_distortion(corners)
    np.testing.assert_array_equal(first, second)
    np.testing.assert_array_equal(t1.matrix, t2.matrix)


@pytest.mark.parametrize(
    "points",
    [
        [[0, 0], [5, 5]],
        [[0, 0], [1, 1], [2, 2], [3, 3]],
        [],
    ],
)
def test_degenerate_contours_are_invalid(points):
    with pytest.raises(InvalidContour):
        estimate_transform(np.array(points, dtype=np.int32).reshape(-1, 2))


def test_batch_reports_failing_index():
    good = rectangle_corners(40, 40)
    bad = np.array([[0, 0], [1, 1]], dtype=np.int32)
    with pytest.raises(InvalidContour) as excinfo:
        correct_all_distortions([good, bad])
    assert excinfo.value.index == 1

    corrected, transforms = correct_all_distortions([good, good])
    assert len(corrected) == len(transforms) == 2
