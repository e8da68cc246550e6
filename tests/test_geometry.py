import math

import pytest

from expression.geometry import (
    EPSILON, bbox, box_center, clamp01, eye_aspect_ratio, mean_y,
    point_with_max_x, point_with_min_x, upper_lip_apex_y,
)

REGION = [(0.2, 0.1), (0.6, 0.4), (0.4, 0.7), (0.1, 0.3)]


def test_bbox():
    box = bbox(REGION)
    assert box == (0.1, 0.6, 0.1, 0.7)
    assert box.width == pytest.approx(0.5)
    assert box.height == pytest.approx(0.6)
    assert box_center(box) == pytest.approx((0.35, 0.4))


def test_bbox_empty_is_degenerate():
    box = bbox([])
    assert box.min_x == math.inf and box.max_x == -math.inf
    assert box.min_y == math.inf and box.max_y == -math.inf


def test_mean_y():
    assert mean_y(REGION) == pytest.approx(0.375)
    assert mean_y([]) == 0.0


def test_extremal_points():
    assert point_with_min_x(REGION) == (0.1, 0.3)
    assert point_with_max_x(REGION) == (0.6, 0.4)
    assert point_with_min_x([]) == (0.0, 0.0)
    assert point_with_max_x([]) == (0.0, 0.0)


def test_eye_aspect_ratio():
    ratio, width = eye_aspect_ratio([(0.0, 0.0), (0.25, 0.05)])
    assert ratio == pytest.approx(0.2)
    assert width == pytest.approx(0.25)


def test_eye_aspect_ratio_floors_width():
    ratio, width = eye_aspect_ratio([(0.3, 0.1), (0.3, 0.2)])
    assert width == EPSILON
    assert ratio == pytest.approx(0.1 / EPSILON)


def test_upper_lip_apex_ignores_corners():
    # corner at x=0.0 is highest but outside the middle half of the box
    inner = [(0.0, 0.9), (1.0, 0.2), (0.5, 0.6), (0.3, 0.4)]
    assert upper_lip_apex_y(inner) == pytest.approx(0.6)


def test_upper_lip_apex_falls_back_to_box_top():
    assert upper_lip_apex_y([(0.0, 0.1), (1.0, 0.5)]) == pytest.approx(0.5)


def test_clamp01():
    assert clamp01(-0.5) == 0.0
    assert clamp01(0.3) == 0.3
    assert clamp01(4) == 1.0
