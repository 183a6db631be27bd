"""Constants and presets for arrow binding."""

from typing import Any, Dict

from .types import ElementType


# Gap between a bound arrow endpoint and the shape edge (scene units)
BASE_BINDING_GAP = 5.0

# Max distance from a shape edge that still binds (screen units, divided by zoom)
BASE_BINDING_DISTANCE = 15.0

BINDING_HIGHLIGHT_LINE_WIDTH = 2.0
BINDING_HIGHLIGHT_PADDING = 6.0

BINDING_COLORS: Dict[str, Dict[str, str]] = {
    "light": {"highlight": "#4a90d9"},
    "dark": {"highlight": "#035da1"},
}


SHAPE_PRESETS: Dict[str, Dict[str, Any]] = {
    "rectangle": {
        "type": ElementType.RECTANGLE,
        "width": 120.0,
        "height": 60.0,
        "color": "#4a9eff",
    },
    "ellipse": {
        "type": ElementType.ELLIPSE,
        "width": 120.0,
        "height": 80.0,
        "color": "#6a9ddb",
    },
    "diamond": {
        "type": ElementType.DIAMOND,
        "width": 120.0,
        "height": 100.0,
        "color": "#f1c40f",
    },
}
