import math

import numpy as np
import pytest

from contour_canon.domain.errors import InvalidContour
from contour_canon.geometry.primitives import (
    as_contour_array,
    aspect_ratio,
    bounding_box,
    contour_moments,
    contour_to_polar,
    edge_altitude,
    euclidean_distance,
    extract_min_max,
    signed_area,
)

from conftest import rectangle_corners


def test_as_contour_array_flattens_opencv_layout():
    cv_contour = np.array([[[1, 2]], [[3, 4]], [[5, 6]]], dtype=np.int32)
    flat = as_contour_array(cv_contour)
    assert flat.shape == (3, 2)
    assert flat.dtype == np.int32
    assert flat.tolist() == [[1, 2], [3, 4], [5, 6]]


def test_as_contour_array_rejects_non_2d_points():
    with pytest.raises(ValueError):
        as_contour_array(np.zeros((4, 3)))


def test_as_contour_array_empty():
    assert as_contour_array([]).shape == (0, 2)


def test_euclidean_distance():
    assert euclidean_distance((0, 0), (3, 4)) == pytest.approx(5.0)


def test_edge_altitude_perpendicular_distance():
    assert edge_altitude((0, 0), (10, 0), (5, 3)) == pytest.approx(3.0)
    assert edge_altitude((0, 0), (10, 0), (-4, -2)) == pytest.approx(2.0)


def test_edge_altitude_collinear_point_is_zero():
    # Heron's radicand can round below zero here
    assert edge_altitude((0, 0), (10, 10), (3, 3)) == pytest.approx(0.0, abs=1e-5)
    assert edge_altitude((0, 0), (10, 0), (4, 0)) == 0.0


@pytest.mark.parametrize("x", range(50, 150))
def test_edge_altitude_is_exact_along_long_edge(x):
    # Long, thin triangles: every pixel two rows below the edge is exactly 2 px away
    assert edge_altitude((149, 50), (50, 50), (x, 52)) == 2.0
    assert edge_altitude((50, 50), (50, 149), (52, x)) == 2.0


def test_edge_altitude_zero_length_edge_accepts():
    assert edge_altitude((2, 2), (2, 2), (50, 50)) == 0.0


def test_bounding_box_and_aspect_ratio():
    corners = rectangle_corners(70, 100, origin=(5, 10))
    assert bounding_box(corners) == (5, 10, 70, 100)
    assert aspect_ratio(corners) == 0.7


def test_extract_min_max():
    pts = np.array([[3.0, -1.0], [-2.0, 4.0], [0.5, 0.5]])
    assert extract_min_max(pts) == (-2.0, -1.0, 3.0, 4.0)
    with pytest.raises(InvalidContour):
        extract_min_max(np.empty((0, 2)))


def test_signed_area_orientation():
    square = np.array([[0, 0], [10, 0], [10, 10], [0, 10]])
    assert signed_area(square) == pytest.approx(100.0)
    assert signed_area(square[::-1]) == pytest.approx(-100.0)
    assert signed_area(square[:2]) == 0.0


def test_contour_moments_of_rectangle():
    corners = rectangle_corners(11, 5)  # spans 10 x 4
    moments = contour_moments(corners)
    assert moments["m00"] == pytest.approx(40.0)
    assert moments["m10"] / moments["m00"] == pytest.approx(5.0)
    assert moments["m01"] / moments["m00"] == pytest.approx(2.0)
    assert moments["mu11"] == pytest.approx(0.0, abs=1e-6)


def test_contour_moments_rejects_short_contour():
    with pytest.raises(InvalidContour):
        contour_moments(np.array([[0, 0], [5, 5]], dtype=np.int32))


def test_contour_moments_rejects_zero_area():
    with pytest.raises(InvalidContour):
        contour_moments(np.array([[0, 0], [1, 1], [2, 2]], dtype=np.int32))


def test_contour_to_polar():
    polar = contour_to_polar(np.array([[1.0, 0.0], [0.0, 2.0], [-3.0, 0.0]]))
    np.testing.assert_allclose(polar[:, 0], [1.0, 2.0, 3.0])
    np.testing.assert_allclose(polar[:, 1], [0.0, math.pi / 2, math.pi])
