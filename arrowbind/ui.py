"""Widget canvas and entry point for the arrowbind whiteboard."""

from __future__ import annotations

import logging
import math
import os
import sys
from typing import Optional, Tuple

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QPainter, QPen, QPolygonF
from PySide6.QtWidgets import QWidget

from .elements import is_bindable_element
from .highlight import Theme, render_suggested_binding
from .model import SceneModel
from .proximity import get_point_from_fixed_point, is_point_inside_shape
from .types import Arrow, BindingEndpoint, Element, ElementType, UnsupportedShapeError

logger = logging.getLogger(__name__)

# Screen-space radius for grabbing an arrow endpoint
ENDPOINT_GRAB_RADIUS = 8.0


class SceneCanvas(QWidget):
    """Paints a SceneModel and routes mouse input to it."""

    def __init__(self, model: SceneModel, theme: Theme = Theme.LIGHT, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._model = model
        self._theme = theme
        self._dragged_shape_id: Optional[str] = None
        self._drag_offset: Tuple[float, float] = (0.0, 0.0)
        self._inside_binding = False
        self.setMouseTracking(True)
        self.resize(900, 600)
        model.elementsChanged.connect(self.update)
        model.suggestedBindingChanged.connect(self.update)
        model.zoomChanged.connect(self.update)

    def _to_scene(self, pos: QPointF) -> Tuple[float, float]:
        zoom = self._model.zoom
        return pos.x() / zoom, pos.y() / zoom

    # --- Painting -----------------------------------------------------------
    def paintEvent(self, event):  # pragma: no cover - GUI entry point
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        self.paint_scene(painter)
        painter.end()

    def paint_scene(self, painter: QPainter) -> None:
        zoom = self._model.zoom
        painter.save()
        painter.scale(zoom, zoom)
        for element in self._model.elements():
            try:
                self._paint_element(painter, element)
            except UnsupportedShapeError:
                logger.exception("Skipping element %s", element.id)

        suggested = self._model.suggestedBinding()
        if suggested is not None:
            try:
                render_suggested_binding(painter, suggested, zoom, self._theme)
            except UnsupportedShapeError:
                logger.exception("Skipping binding highlight for %s", suggested.id)
        painter.restore()

    def _paint_element(self, painter: QPainter, element: Element) -> None:
        if element.element_type is ElementType.ARROW:
            self._paint_arrow(painter, element)
            return
        if element.element_type is ElementType.TEXT:
            painter.setPen(QPen(QColor("#2d3436")))
            painter.drawText(QPointF(element.x, element.y + element.height), element.text)
            return

        cx, cy = element.center
        hw = element.width / 2
        hh = element.height / 2
        painter.save()
        try:
            painter.setPen(QPen(QColor("#1b2028"), 1.5))
            painter.setBrush(QColor(getattr(element, "color", "#4a9eff")))
            painter.translate(cx, cy)
            painter.rotate(math.degrees(element.angle))
            if element.element_type is ElementType.RECTANGLE:
                painter.drawRect(QRectF(-hw, -hh, element.width, element.height))
            elif element.element_type is ElementType.ELLIPSE:
                painter.drawEllipse(QPointF(0.0, 0.0), hw, hh)
            elif element.element_type is ElementType.DIAMOND:
                painter.drawPolygon(
                    QPolygonF([QPointF(0.0, -hh), QPointF(hw, 0.0), QPointF(0.0, hh), QPointF(-hw, 0.0)])
                )
            else:
                raise UnsupportedShapeError(f"Cannot paint element type: {element.element_type.value}")
        finally:
            painter.restore()

    def _paint_arrow(self, painter: QPainter, arrow: Arrow) -> None:
        if len(arrow.points) < 2:
            return
        pen = QPen(QColor("#1b2028"), 2.0)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        polygon = QPolygonF([QPointF(arrow.x + px, arrow.y + py) for px, py in arrow.points])
        painter.drawPolyline(polygon)

    # --- Mouse input --------------------------------------------------------
    def _endpoint_at(self, x: float, y: float) -> Optional[Tuple[str, BindingEndpoint]]:
        radius = ENDPOINT_GRAB_RADIUS / self._model.zoom
        for element in reversed(self._model.elements()):
            if element.element_type is not ElementType.ARROW or len(element.points) < 2:
                continue
            for endpoint, (px, py) in (
                (BindingEndpoint.START, element.points[0]),
                (BindingEndpoint.END, element.points[-1]),
            ):
                if math.hypot(element.x + px - x, element.y + py - y) <= radius:
                    return element.id, endpoint
        return None

    def _shape_at(self, x: float, y: float) -> Optional[Element]:
        for element in reversed(self._model.elements()):
            if not is_bindable_element(element):
                continue
            if is_point_inside_shape((x, y), element):
                return element
        return None

    def mousePressEvent(self, event):  # pragma: no cover - GUI entry point
        x, y = self._to_scene(event.position())
        hit = self._endpoint_at(x, y)
        if hit is not None:
            # Alt at grab time pins the endpoint inside the target shape
            self._inside_binding = bool(event.modifiers() & Qt.AltModifier)
            self._model.startEndpointDrag(hit[0], hit[1].value)
            return
        shape = self._shape_at(x, y)
        if shape is not None:
            self._dragged_shape_id = shape.id
            self._drag_offset = (x - shape.x, y - shape.y)

    def mouseMoveEvent(self, event):  # pragma: no cover - GUI entry point
        x, y = self._to_scene(event.position())
        if self._model.isDraggingEndpoint:
            self._model.updateEndpointDrag(x, y)
        elif self._dragged_shape_id is not None:
            self._model.moveElement(self._dragged_shape_id, x - self._drag_offset[0], y - self._drag_offset[1])

    def mouseReleaseEvent(self, event):  # pragma: no cover - GUI entry point
        if self._model.isDraggingEndpoint:
            self._model.finishEndpointDrag(self._inside_binding)
        self._inside_binding = False
        self._dragged_shape_id = None

    def wheelEvent(self, event):  # pragma: no cover - GUI entry point
        step = 1.1 if event.angleDelta().y() > 0 else 1 / 1.1
        self._model.setZoom(self._model.zoom * step)


def build_demo_scene(model: SceneModel) -> None:
    """Populate ``model`` with two shapes joined by a bound arrow."""
    source = model.addShape("rectangle", 80.0, 120.0)
    target = model.addShape("ellipse", 420.0, 260.0)
    model.addShape("diamond", 420.0, 60.0)
    arrow_id = model.addArrow(0.0, 0.0, 1.0, 1.0)
    for endpoint, shape_id, ratio in (("start", source, (1.0, 0.5)), ("end", target, (0.0, 0.5))):
        shape = model.getElement(shape_id)
        anchor = get_point_from_fixed_point(ratio, shape, gap=0.0)
        model.startEndpointDrag(arrow_id, endpoint)
        model.updateEndpointDrag(*anchor)
        model.finishEndpointDrag()
    model.addArrowLabel(arrow_id, "depends on")


def main() -> int:
    """Main entry point for the standalone whiteboard."""
    from PySide6.QtWidgets import QApplication

    smoke_mode = "--smoke" in sys.argv or os.environ.get("ARROWBIND_SMOKE") == "1"
    debug = os.environ.get("ARROWBIND_DEBUG") == "1"
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)

    theme = Theme.DARK if "--dark" in sys.argv else Theme.LIGHT
    model = SceneModel()
    build_demo_scene(model)
    canvas = SceneCanvas(model, theme)
    canvas.setWindowTitle("arrowbind")

    if smoke_mode:
        return 0

    canvas.show()
    return app.exec()
