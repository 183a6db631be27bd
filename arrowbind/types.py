"""Data types for arrowbind scenes.

This module contains the element records the binding engine reads and
mutates: shapes that arrows can attach to, the arrows themselves, and
the bindings that link the two.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

Point = Tuple[float, float]


class UnsupportedShapeError(ValueError):
    """Raised when an element kind reaches code that cannot handle it."""


class ElementType(Enum):
    """Supported scene element types."""

    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    DIAMOND = "diamond"
    ARROW = "arrow"
    TEXT = "text"
    LINE = "line"


BINDABLE_TYPES = frozenset({ElementType.RECTANGLE, ElementType.ELLIPSE, ElementType.DIAMOND})


class BindingEndpoint(Enum):
    """Which end of an arrow a binding belongs to."""

    START = "start"
    END = "end"


class BindingMode(Enum):
    """How a fixed point maps back to a scene position.

    ORBIT projects onto the shape edge and keeps a gap; INSIDE uses the
    fixed point itself.
    """

    ORBIT = "orbit"
    INSIDE = "inside"


@dataclass(frozen=True)
class BoundElement:
    """Back-reference from a shape to an element attached to it."""

    id: str
    kind: ElementType = ElementType.ARROW


@dataclass(frozen=True)
class FixedPointBinding:
    """Attachment of an arrow endpoint to a shape.

    ``fixed_point`` is a ratio across the shape's unrotated bounding box,
    so it survives resizes and rotations of the shape. ``mode`` decides
    whether the endpoint orbits the edge or sits on the fixed point itself.
    """

    element_id: str
    fixed_point: Point = (0.5, 0.5)
    mode: BindingMode = BindingMode.ORBIT


@dataclass
class Element:
    """Common fields shared by every scene element."""

    id: str
    element_type: ElementType
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    angle: float = 0.0
    is_deleted: bool = False
    version: int = 0
    bound_elements: List[BoundElement] = field(default_factory=list)

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass
class Shape(Element):
    """A rectangle, ellipse or diamond that arrows can bind to."""

    element_type: ElementType = ElementType.RECTANGLE
    color: str = "#4a9eff"


@dataclass
class Arrow(Element):
    """A connector with an ordered point list and optional end bindings."""

    element_type: ElementType = ElementType.ARROW
    points: List[Point] = field(default_factory=lambda: [(0.0, 0.0)])
    start_binding: Optional[FixedPointBinding] = None
    end_binding: Optional[FixedPointBinding] = None

    def get_binding(self, endpoint: BindingEndpoint) -> Optional[FixedPointBinding]:
        if endpoint is BindingEndpoint.START:
            return self.start_binding
        return self.end_binding


@dataclass
class TextElement(Element):
    """A text label, optionally attached to a container element."""

    element_type: ElementType = ElementType.TEXT
    text: str = ""
    container_id: Optional[str] = None
