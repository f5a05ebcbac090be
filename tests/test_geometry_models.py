import numpy as np
import pytest
from pydantic import ValidationError

from contour_canon import config
from contour_canon.geometry_models import (
    PipelineSettings,
    Point2D,
    points_from_array,
    points_to_array,
)


def test_point_is_immutable():
    point = Point2D(x=1.5, y=-2.0)
    with pytest.raises(ValidationError):
        point.x = 3.0
    assert point.as_tuple() == (1.5, -2.0)


def test_points_convert_both_ways():
    contour = np.array([[[1, 2]], [[3, 4]], [[5, 6]]], dtype=np.int32)
    points = points_from_array(contour)
    assert [p.as_tuple() for p in points] == [(1.0, 2.0), (3.0, 4.0), (5.0, 6.0)]
    np.testing.assert_array_equal(points_to_array(points), contour.reshape(-1, 2))
    assert points_to_array([]).shape == (0, 2)


def test_settings_default_to_config():
    settings = PipelineSettings()
    assert settings.area_ratio == config.CONTOUR_AREA_RATIO
    assert settings.low_aspect_ratio == config.CONTOUR_LOW_ASPECT_RATIO
    assert settings.high_aspect_ratio == config.CONTOUR_HIGH_ASPECT_RATIO
    assert settings.dist_threshold == config.HULL_DIST_THRESHOLD
    assert settings.max_workers == config.PIPELINE_MAX_WORKERS


@pytest.mark.parametrize(
    "kwargs",
    [
        {"area_ratio": 0},
        {"dist_threshold": -1.0},
        {"max_workers": 0},
        {"low_aspect_ratio": 2.0, "high_aspect_ratio": 1.0},
    ],
)
def test_invalid_settings_are_rejected(kwargs):
    with pytest.raises(ValidationError):
        PipelineSettings(**kwargs)


def test_unbounded_worker_pool_allowed():
    assert PipelineSettings(max_workers=None).max_workers is None
