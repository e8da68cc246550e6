# expression/geometry.py
"""
Geometry helpers over landmark regions (ordered sequences of (x, y) points).

All functions are total: empty regions produce defined defaults instead of
raising, so callers only need to check region emptiness before relying on
the values.
"""
import math
from typing import NamedTuple, Sequence

from expression.models import Point

EPSILON = 0.001
ORIGIN: Point = (0.0, 0.0)


class BBox(NamedTuple):
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def bbox(region: Sequence[Point]) -> BBox:
    """Min/max x and y. An empty region gives the degenerate box (inf, -inf, inf, -inf)."""
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    for x, y in region:
        min_x, max_x = min(min_x, x), max(max_x, x)
        min_y, max_y = min(min_y, y), max(max_y, y)
    return BBox(min_x, max_x, min_y, max_y)


def box_center(box: BBox) -> Point:
    return ((box.min_x + box.max_x) / 2.0, (box.min_y + box.max_y) / 2.0)


def mean_y(region: Sequence[Point]) -> float:
    if not region:
        return 0.0
    return sum(p[1] for p in region) / len(region)


def point_with_min_x(region: Sequence[Point]) -> Point:
    return min(region, key=lambda p: p[0]) if region else ORIGIN


def point_with_max_x(region: Sequence[Point]) -> Point:
    return max(region, key=lambda p: p[0]) if region else ORIGIN


def eye_aspect_ratio(eye: Sequence[Point]) -> tuple[float, float]:
    """Return (height / width, width) of the eye bounding box as an openness proxy."""
    box = bbox(eye)
    width = max(EPSILON, box.width)
    height = max(0.0, box.height)
    return height / width, width


def upper_lip_apex_y(inner_lips: Sequence[Point]) -> float:
    # middle 50% of the lip box only, so corner points don't dominate
    box = bbox(inner_lips)
    left = box.min_x + 0.25 * box.width
    right = box.max_x - 0.25 * box.width
    apex = -math.inf
    for x, y in inner_lips:
        if left <= x <= right:
            apex = max(apex, y)
    return apex if math.isfinite(apex) else box.max_y


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))
