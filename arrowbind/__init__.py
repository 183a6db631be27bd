"""Arrow-to-shape binding engine for a PySide6 whiteboard.

Arrows attach to the edges of rectangles, ellipses and diamonds, stay
attached while those shapes move, resize and rotate, and get a visual
hint while an endpoint is dragged near a shape.
"""

from .binding import (
    bind_arrow_to_element,
    bind_text_to_container,
    find_bindable_element,
    unbind_all_arrows_from_shape,
    unbind_arrow,
    unbind_arrow_endpoint,
    unbind_text_from_container,
)
from .bound_points import (
    get_arrow_midpoint,
    move_arrow_endpoint,
    update_arrow_bindings,
    update_arrow_endpoint,
    update_bound_arrow_endpoints,
)
from .constants import (
    BASE_BINDING_DISTANCE,
    BASE_BINDING_GAP,
    BINDING_COLORS,
    BINDING_HIGHLIGHT_LINE_WIDTH,
    BINDING_HIGHLIGHT_PADDING,
    SHAPE_PRESETS,
)
from .elements import is_arrow_element, is_bindable_element, is_text_element, mutate_element
from .highlight import Theme, render_suggested_binding, resolve_highlight_color
from .model import SceneModel
from .proximity import (
    BindingCandidate,
    compute_fixed_point,
    distance_to_shape_edge,
    get_hovered_element_for_binding,
    get_point_from_fixed_point,
    is_point_inside_shape,
    max_binding_distance,
)
from .types import (
    Arrow,
    BindingEndpoint,
    BindingMode,
    BoundElement,
    Element,
    ElementType,
    FixedPointBinding,
    Shape,
    TextElement,
    UnsupportedShapeError,
)
from .ui import SceneCanvas, build_demo_scene, main

__all__ = [
    "Arrow",
    "BASE_BINDING_DISTANCE",
    "BASE_BINDING_GAP",
    "BINDING_COLORS",
    "BINDING_HIGHLIGHT_LINE_WIDTH",
    "BINDING_HIGHLIGHT_PADDING",
    "BindingCandidate",
    "BindingEndpoint",
    "BindingMode",
    "BoundElement",
    "Element",
    "ElementType",
    "FixedPointBinding",
    "SHAPE_PRESETS",
    "SceneCanvas",
    "SceneModel",
    "Shape",
    "TextElement",
    "Theme",
    "UnsupportedShapeError",
    "bind_arrow_to_element",
    "bind_text_to_container",
    "build_demo_scene",
    "compute_fixed_point",
    "distance_to_shape_edge",
    "find_bindable_element",
    "get_arrow_midpoint",
    "get_hovered_element_for_binding",
    "get_point_from_fixed_point",
    "is_arrow_element",
    "is_bindable_element",
    "is_point_inside_shape",
    "is_text_element",
    "main",
    "max_binding_distance",
    "move_arrow_endpoint",
    "mutate_element",
    "render_suggested_binding",
    "resolve_highlight_color",
    "unbind_all_arrows_from_shape",
    "unbind_arrow",
    "unbind_arrow_endpoint",
    "unbind_text_from_container",
    "update_arrow_bindings",
    "update_arrow_endpoint",
    "update_bound_arrow_endpoints",
]
