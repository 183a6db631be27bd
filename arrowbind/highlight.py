"""Suggested-binding highlight drawn while an arrow endpoint is dragged."""

from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Dict

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QPainter, QPen, QPolygonF

from .constants import BINDING_COLORS, BINDING_HIGHLIGHT_LINE_WIDTH, BINDING_HIGHLIGHT_PADDING
from .elements import is_arrow_element, is_text_element
from .types import Element, ElementType, UnsupportedShapeError


class Theme(Enum):
    """Canvas color themes."""

    LIGHT = "light"
    DARK = "dark"


def resolve_highlight_color(theme: Theme) -> QColor:
    return QColor(BINDING_COLORS[theme.value]["highlight"])


def _draw_rectangle(painter: QPainter, element: Element, padding: float) -> None:
    painter.drawRect(
        QRectF(
            -element.width / 2 - padding,
            -element.height / 2 - padding,
            element.width + padding * 2,
            element.height + padding * 2,
        )
    )


def _draw_ellipse(painter: QPainter, element: Element, padding: float) -> None:
    painter.drawEllipse(QPointF(0.0, 0.0), element.width / 2 + padding, element.height / 2 + padding)


def _draw_diamond(painter: QPainter, element: Element, padding: float) -> None:
    hw = element.width / 2 + padding
    hh = element.height / 2 + padding
    painter.drawPolygon(
        QPolygonF([QPointF(0.0, -hh), QPointF(hw, 0.0), QPointF(0.0, hh), QPointF(-hw, 0.0)])
    )


_OUTLINES: Dict[ElementType, Callable[[QPainter, Element, float], None]] = {
    ElementType.RECTANGLE: _draw_rectangle,
    ElementType.ELLIPSE: _draw_ellipse,
    ElementType.DIAMOND: _draw_diamond,
}


def render_suggested_binding(painter: QPainter, element: Element, zoom: float, theme: Theme) -> None:
    """Stroke an outline around ``element`` to show an arrow can bind to it.

    The outline is drawn in the element's unrotated frame, so the painter
    is moved to the element center and rotated by its angle first.
    Raises UnsupportedShapeError for element kinds without an outline.
    """
    if is_arrow_element(element) or is_text_element(element):
        return

    draw = _OUTLINES.get(element.element_type)
    if draw is None:
        raise UnsupportedShapeError(f"Unhandled element type: {element.element_type.value}")

    padding = BINDING_HIGHLIGHT_PADDING / zoom
    pen = QPen(resolve_highlight_color(theme))
    pen.setWidthF(BINDING_HIGHLIGHT_LINE_WIDTH / zoom)
    pen.setStyle(Qt.SolidLine)

    cx, cy = element.center
    painter.save()
    try:
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.translate(cx, cy)
        painter.rotate(math.degrees(element.angle))
        draw(painter, element, padding)
    finally:
        painter.restore()
