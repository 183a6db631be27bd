"""Keep bound arrow endpoints glued to their shapes.

Call these after a shape's move/resize/rotate has been committed for the
frame. Bindings themselves are never changed here, only arrow geometry.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List

from .binding import find_bindable_element
from .elements import is_arrow_element, is_bindable_element, mutate_element
from .geometry import get_size_from_points, normalize_points
from .proximity import get_point_from_fixed_point
from .types import Arrow, BindingEndpoint, Element, Point

logger = logging.getLogger(__name__)


def move_arrow_endpoint(arrow: Arrow, endpoint: BindingEndpoint, scene_point: Point) -> None:
    """Place the first or last point of ``arrow`` at ``scene_point``.

    Points are renormalized so the first one stays at the origin, and the
    whole geometry is committed in a single mutation.
    """
    relative = (scene_point[0] - arrow.x, scene_point[1] - arrow.y)
    index = 0 if endpoint is BindingEndpoint.START else max(len(arrow.points) - 1, 0)

    points: List[Point] = list(arrow.points) or [(0.0, 0.0)]
    points[index] = relative
    x, y, points = normalize_points(arrow.x, arrow.y, points)
    width, height = get_size_from_points(points)

    mutate_element(arrow, x=x, y=y, points=points, width=width, height=height)


def update_arrow_endpoint(arrow: Arrow, endpoint: BindingEndpoint, target: Element) -> None:
    """Move one bound endpoint of ``arrow`` onto the edge of ``target``."""
    binding = arrow.get_binding(endpoint)
    if binding is None:
        return

    scene_point = get_point_from_fixed_point(binding.fixed_point, target, mode=binding.mode)
    move_arrow_endpoint(arrow, endpoint, scene_point)
    logger.debug(
        "Synced %s %s to %s at (%.2f, %.2f)",
        arrow.id,
        endpoint.value,
        target.id,
        scene_point[0],
        scene_point[1],
    )


def update_bound_arrow_endpoints(shape: Element, elements: Iterable[Element]) -> None:
    """Re-snap every arrow endpoint bound to ``shape``."""
    if not is_bindable_element(shape) or not shape.bound_elements:
        return

    by_id = {element.id: element for element in elements}
    for entry in shape.bound_elements:
        arrow = by_id.get(entry.id)
        if not is_arrow_element(arrow):
            continue
        if arrow.start_binding is not None and arrow.start_binding.element_id == shape.id:
            update_arrow_endpoint(arrow, BindingEndpoint.START, shape)
        if arrow.end_binding is not None and arrow.end_binding.element_id == shape.id:
            update_arrow_endpoint(arrow, BindingEndpoint.END, shape)


def update_arrow_bindings(arrow: Arrow, elements: Iterable[Element]) -> None:
    """Re-snap both ends of ``arrow`` to whatever they are bound to."""
    elements = list(elements)
    for endpoint in (BindingEndpoint.START, BindingEndpoint.END):
        binding = arrow.get_binding(endpoint)
        if binding is None:
            continue
        target = find_bindable_element(binding.element_id, elements)
        if target is not None:
            update_arrow_endpoint(arrow, endpoint, target)


def get_arrow_midpoint(arrow: Arrow) -> Point:
    """Scene point halfway along the arrow's polyline."""
    points = arrow.points
    if len(points) < 2:
        return (arrow.x, arrow.y)

    segment_lengths = [
        math.hypot(points[i][0] - points[i - 1][0], points[i][1] - points[i - 1][1])
        for i in range(1, len(points))
    ]
    half = sum(segment_lengths) / 2
    walked = 0.0
    for i, length in enumerate(segment_lengths, start=1):
        if walked + length >= half:
            t = 0.0 if length == 0 else (half - walked) / length
            prev, curr = points[i - 1], points[i]
            return (
                arrow.x + prev[0] + (curr[0] - prev[0]) * t,
                arrow.y + prev[1] + (curr[1] - prev[1]) * t,
            )
        walked += length

    last = points[-1]
    return (arrow.x + last[0], arrow.y + last[1])
