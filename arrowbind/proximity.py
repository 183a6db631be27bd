"""Proximity detection between points and bindable shapes.

All functions here are pure geometry: they read element fields and never
mutate them. Rotated shapes are handled by rotating the query point into
the shape's unrotated frame about its center.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Collection, Dict, Iterable, List, Optional

from .constants import BASE_BINDING_DISTANCE, BASE_BINDING_GAP
from .elements import is_bindable_element
from .geometry import clamp, distance_to_segment, rotate_point
from .types import BindingMode, Element, ElementType, Point, UnsupportedShapeError


@dataclass
class BindingCandidate:
    """The shape an arrow endpoint would bind to, and where."""

    element: Element
    fixed_point: Point


def max_binding_distance(zoom: float) -> float:
    """Binding threshold in scene units for the given zoom level."""
    return BASE_BINDING_DISTANCE / zoom


def _unrotate(point: Point, element: Element) -> Point:
    if element.angle == 0:
        return point
    return rotate_point(point, element.center, -element.angle)


def _diamond_vertices(element: Element) -> List[Point]:
    cx, cy = element.center
    return [
        (cx, element.y),
        (element.x + element.width, cy),
        (cx, element.y + element.height),
        (element.x, cy),
    ]


def _rectangle_vertices(element: Element) -> List[Point]:
    x, y, w, h = element.x, element.y, element.width, element.height
    return [(x, y), (x + w, y), (x + w, y + h), (x, y + h)]


def _distance_to_polygon(point: Point, vertices: List[Point]) -> float:
    return min(
        distance_to_segment(point, vertices[i], vertices[(i + 1) % len(vertices)])
        for i in range(len(vertices))
    )


def _distance_to_rectangle_edge(point: Point, element: Element) -> float:
    return _distance_to_polygon(point, _rectangle_vertices(element))


def _distance_to_diamond_edge(point: Point, element: Element) -> float:
    return _distance_to_polygon(point, _diamond_vertices(element))


def _distance_to_ellipse_edge(point: Point, element: Element) -> float:
    # Approximation: boundary point at the polar angle of the query point,
    # not the true nearest point on the ellipse.
    cx, cy = element.center
    rx = element.width / 2
    ry = element.height / 2
    if rx == 0 or ry == 0:
        return math.hypot(point[0] - cx, point[1] - cy)
    theta = math.atan2(point[1] - cy, point[0] - cx)
    edge_x = cx + rx * math.cos(theta)
    edge_y = cy + ry * math.sin(theta)
    return math.hypot(point[0] - edge_x, point[1] - edge_y)


_EDGE_DISTANCE: Dict[ElementType, Callable[[Point, Element], float]] = {
    ElementType.RECTANGLE: _distance_to_rectangle_edge,
    ElementType.ELLIPSE: _distance_to_ellipse_edge,
    ElementType.DIAMOND: _distance_to_diamond_edge,
}


def distance_to_shape_edge(point: Point, element: Element) -> float:
    """Distance from a scene point to the nearest edge of a bindable shape."""
    measure = _EDGE_DISTANCE.get(element.element_type)
    if measure is None:
        raise UnsupportedShapeError(f"Unhandled element type: {element.element_type.value}")
    return measure(_unrotate(point, element), element)


def is_point_inside_shape(point: Point, element: Element) -> bool:
    """Return True if the scene point lies inside the shape outline."""
    local = _unrotate(point, element)
    cx, cy = element.center
    hw = element.width / 2
    hh = element.height / 2
    if element.element_type is ElementType.RECTANGLE:
        return (
            element.x <= local[0] <= element.x + element.width
            and element.y <= local[1] <= element.y + element.height
        )
    if element.element_type is ElementType.ELLIPSE:
        if hw == 0 or hh == 0:
            return False
        dx = (local[0] - cx) / hw
        dy = (local[1] - cy) / hh
        return dx * dx + dy * dy <= 1
    if element.element_type is ElementType.DIAMOND:
        if hw == 0 or hh == 0:
            return False
        return abs(local[0] - cx) / hw + abs(local[1] - cy) / hh <= 1
    raise UnsupportedShapeError(f"Unhandled element type: {element.element_type.value}")


def compute_fixed_point(point: Point, element: Element) -> Point:
    """Express a scene point as a clamped ratio over the shape's bounding box."""
    local = _unrotate(point, element)
    width = element.width or 1
    height = element.height or 1
    ratio_x = (local[0] - element.x) / width
    ratio_y = (local[1] - element.y) / height
    return (clamp(ratio_x, 0.0, 1.0), clamp(ratio_y, 0.0, 1.0))


def _ray_segment_intersection(dir_x: float, dir_y: float, a: Point, b: Point) -> Optional[float]:
    """Intersect a ray from the origin with segment a-b.

    Returns the ray parameter, or None when they do not meet.
    """
    edge_x = b[0] - a[0]
    edge_y = b[1] - a[1]
    denom = dir_x * edge_y - dir_y * edge_x
    if abs(denom) < 1e-10:
        return None
    t = (a[0] * edge_y - a[1] * edge_x) / denom
    u = (a[0] * dir_y - a[1] * dir_x) / denom
    if 0 <= u <= 1 and t > 0:
        return t
    return None


def _project_onto_rectangle(cx: float, cy: float, dir_x: float, dir_y: float, element: Element) -> Point:
    hw = element.width / 2
    hh = element.height / 2
    t = math.inf
    if dir_x != 0:
        tx = (hw if dir_x > 0 else -hw) / dir_x
        if tx > 0:
            t = min(t, tx)
    if dir_y != 0:
        ty = (hh if dir_y > 0 else -hh) / dir_y
        if ty > 0:
            t = min(t, ty)
    if math.isinf(t):
        return (cx, cy)
    return (cx + dir_x * t, cy + dir_y * t)


def _project_onto_ellipse(cx: float, cy: float, dir_x: float, dir_y: float, element: Element) -> Point:
    rx = element.width / 2
    ry = element.height / 2
    if rx == 0 or ry == 0:
        return (cx, cy)
    theta = math.atan2(dir_y, dir_x)
    return (cx + rx * math.cos(theta), cy + ry * math.sin(theta))


def _project_onto_diamond(cx: float, cy: float, dir_x: float, dir_y: float, element: Element) -> Point:
    hw = element.width / 2
    hh = element.height / 2
    # vertices relative to the center: top, right, bottom, left
    vertices = [(0.0, -hh), (hw, 0.0), (0.0, hh), (-hw, 0.0)]
    closest = math.inf
    for i in range(4):
        t = _ray_segment_intersection(dir_x, dir_y, vertices[i], vertices[(i + 1) % 4])
        if t is not None and t < closest:
            closest = t
    if math.isinf(closest):
        return (cx, cy)
    return (cx + dir_x * closest, cy + dir_y * closest)


_EDGE_PROJECTION: Dict[ElementType, Callable[[float, float, float, float, Element], Point]] = {
    ElementType.RECTANGLE: _project_onto_rectangle,
    ElementType.ELLIPSE: _project_onto_ellipse,
    ElementType.DIAMOND: _project_onto_diamond,
}


def get_point_from_fixed_point(
    fixed_point: Point,
    element: Element,
    gap: float = BASE_BINDING_GAP,
    mode: BindingMode = BindingMode.ORBIT,
) -> Point:
    """Turn a fixed point back into a scene position on (or near) the shape.

    In ORBIT mode the point is projected from the center onto the shape
    edge and pushed outward by ``gap``. INSIDE mode returns the fixed
    point's own scene position.
    """
    project = _EDGE_PROJECTION.get(element.element_type)
    if project is None:
        raise UnsupportedShapeError(f"Unhandled element type: {element.element_type.value}")

    center = element.center
    cx, cy = center
    target_x = element.x + fixed_point[0] * element.width
    target_y = element.y + fixed_point[1] * element.height

    if mode is BindingMode.INSIDE:
        return rotate_point((target_x, target_y), center, element.angle)

    dx = target_x - cx
    dy = target_y - cy
    length = math.hypot(dx, dy)
    if length == 0:
        edge_point = project(cx, cy, 1.0, 0.0, element)
    else:
        edge_point = project(cx, cy, dx / length, dy / length, element)

    edge_dx = edge_point[0] - cx
    edge_dy = edge_point[1] - cy
    edge_length = math.hypot(edge_dx, edge_dy)
    if edge_length == 0:
        result = edge_point
    else:
        result = (
            edge_point[0] + edge_dx / edge_length * gap,
            edge_point[1] + edge_dy / edge_length * gap,
        )

    return rotate_point(result, center, element.angle)


def get_hovered_element_for_binding(
    point: Point,
    elements: Iterable[Element],
    zoom: float,
    exclude_ids: Collection[str] = (),
) -> Optional[BindingCandidate]:
    """Find the closest bindable shape whose edge is within reach of ``point``.

    Elements are scanned in the given order and the first one wins ties.
    """
    threshold = max_binding_distance(zoom)
    closest: Optional[Element] = None
    closest_distance = math.inf

    for element in elements:
        if element.is_deleted or not is_bindable_element(element):
            continue
        if element.id in exclude_ids:
            continue
        distance = distance_to_shape_edge(point, element)
        if distance <= threshold and distance < closest_distance:
            closest = element
            closest_distance = distance

    if closest is None:
        return None
    return BindingCandidate(element=closest, fixed_point=compute_fixed_point(point, closest))


__all__ = [
    "BindingCandidate",
    "compute_fixed_point",
    "distance_to_shape_edge",
    "get_hovered_element_for_binding",
    "get_point_from_fixed_point",
    "is_point_inside_shape",
    "max_binding_distance",
]
