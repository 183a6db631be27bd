"""Shared 2D math used by the binding engine."""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from .types import Point


def rotate_point(point: Point, center: Point, angle: float) -> Point:
    """Rotate ``point`` about ``center`` by ``angle`` radians."""
    if angle == 0:
        return point
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    dx = point[0] - center[0]
    dy = point[1] - center[1]
    return (
        center[0] + dx * cos_a - dy * sin_a,
        center[1] + dx * sin_a + dy * cos_a,
    )


def distance_to_segment(point: Point, start: Point, end: Point) -> float:
    """Shortest distance from ``point`` to the segment ``start``-``end``."""
    seg_x = end[0] - start[0]
    seg_y = end[1] - start[1]
    length_sq = seg_x * seg_x + seg_y * seg_y
    if length_sq == 0:
        return math.hypot(point[0] - start[0], point[1] - start[1])
    t = ((point[0] - start[0]) * seg_x + (point[1] - start[1]) * seg_y) / length_sq
    t = max(0.0, min(1.0, t))
    closest_x = start[0] + t * seg_x
    closest_y = start[1] + t * seg_y
    return math.hypot(point[0] - closest_x, point[1] - closest_y)


def normalize_points(x: float, y: float, points: Sequence[Point]) -> Tuple[float, float, List[Point]]:
    """Shift points so the first one sits at the origin.

    The element position absorbs the shift, so scene positions of every
    point stay the same.
    """
    if not points:
        return x, y, []
    dx, dy = points[0]
    if dx == 0 and dy == 0:
        return x, y, list(points)
    return x + dx, y + dy, [(px - dx, py - dy) for px, py in points]


def get_size_from_points(points: Sequence[Point]) -> Tuple[float, float]:
    """Return (width, height) of the bounding box around ``points``."""
    if not points:
        return 0.0, 0.0
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return max(xs) - min(xs), max(ys) - min(ys)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
