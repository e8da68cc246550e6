from __future__ import annotations

import pytest

from expression.models import FaceLandmarks


def box_region(x0: float, y0: float, width: float, height: float):
    """Four points whose bounding box is exactly [x0, x0+width] x [y0, y0+height]."""
    return [
        (x0, y0 + height / 2),
        (x0 + width, y0 + height / 2),
        (x0 + width / 2, y0 + height),
        (x0 + width / 2, y0),
    ]


def eyes(left_ar: float, right_ar: float | None = None, width: float = 0.25, y0: float = 0.0):
    right_ar = left_ar if right_ar is None else right_ar
    return {
        "left_eye": box_region(0.0, y0, width, left_ar * width),
        "right_eye": box_region(0.5, y0, width, right_ar * width),
    }


def mouth(left_corner_y: float, right_corner_y: float, width: float = 0.4,
          top: float = 0.4, bottom: float = 0.2, x0: float = 0.3):
    """Outer lips whose corners sit at the given heights; inner x points stay strictly inside."""
    mid = x0 + width / 2
    return [
        (x0, left_corner_y),
        (x0 + width, right_corner_y),
        (mid, top),
        (mid, bottom),
    ]


@pytest.fixture
def make_landmarks():
    def _make(**regions):
        return FaceLandmarks.from_regions(regions)
    return _make


@pytest.fixture
def expressive_face(make_landmarks):
    """Closed eyes, stretched smiling mouth and parted lips."""
    return make_landmarks(
        **eyes(0.08),
        outer_lips=mouth(0.4, 0.4, width=0.55, x0=0.2),
        inner_lips=box_region(0.3, 0.25, 0.3, 0.1),
    )
