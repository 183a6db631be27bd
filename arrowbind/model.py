"""Qt model hosting a scene and driving the binding engine.

This module owns the element collection and wires pointer-level actions
(dragging an arrow endpoint, moving or deleting shapes) to the binding
engine, then notifies views of what changed.
"""

from __future__ import annotations

import logging
from itertools import count
from typing import Any, Dict, Iterable, List, Optional

from PySide6.QtCore import (
    QAbstractListModel,
    QModelIndex,
    Property,
    Qt,
    Signal,
    Slot,
)

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
from .constants import SHAPE_PRESETS
from .elements import is_arrow_element, is_bindable_element, is_text_element, mutate_element
from .proximity import BindingCandidate, get_hovered_element_for_binding
from .types import Arrow, BindingEndpoint, BindingMode, Element, Shape, TextElement

logger = logging.getLogger(__name__)


class SceneModel(QAbstractListModel):
    """Qt model exposing scene elements and arrow binding actions."""

    IdRole = Qt.UserRole + 1
    TypeRole = Qt.UserRole + 2
    XRole = Qt.UserRole + 3
    YRole = Qt.UserRole + 4
    WidthRole = Qt.UserRole + 5
    HeightRole = Qt.UserRole + 6
    AngleRole = Qt.UserRole + 7
    VersionRole = Qt.UserRole + 8
    ColorRole = Qt.UserRole + 9
    PointsRole = Qt.UserRole + 10
    TextRole = Qt.UserRole + 11
    BoundCountRole = Qt.UserRole + 12

    elementsChanged = Signal()
    suggestedBindingChanged = Signal()
    zoomChanged = Signal()

    def __init__(self):
        super().__init__()
        self._elements: List[Element] = []
        self._by_id: Dict[str, Element] = {}
        self._id_source = count()
        self._zoom: float = 1.0
        self._drag_arrow_id: Optional[str] = None
        self._drag_endpoint: Optional[BindingEndpoint] = None
        self._candidate: Optional[BindingCandidate] = None

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}_{next(self._id_source)}"

    def _append_element(self, element: Element) -> None:
        self.beginInsertRows(QModelIndex(), len(self._elements), len(self._elements))
        self._elements.append(element)
        self._by_id[element.id] = element
        self.endInsertRows()
        self.elementsChanged.emit()

    def _remove_row(self, element: Element) -> None:
        for row, existing in enumerate(self._elements):
            if existing is element:
                self.beginRemoveRows(QModelIndex(), row, row)
                self._elements.pop(row)
                self.endRemoveRows()
                break
        self._by_id.pop(element.id, None)

    def _notify(self, elements: Iterable[Element]) -> None:
        """Emit dataChanged for every touched row, then one elementsChanged."""
        touched = {element.id for element in elements}
        for row, element in enumerate(self._elements):
            if element.id in touched:
                index = self.index(row, 0)
                self.dataChanged.emit(index, index, [])
        self.elementsChanged.emit()

    # --- Qt model overrides -------------------------------------------------
    def rowCount(self, parent: QModelIndex | None = QModelIndex()) -> int:  # type: ignore[override]
        return len(self._elements)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid() or not (0 <= index.row() < len(self._elements)):
            return None

        element = self._elements[index.row()]
        if role == self.IdRole:
            return element.id
        if role == self.TypeRole:
            return element.element_type.value
        if role == self.XRole:
            return element.x
        if role == self.YRole:
            return element.y
        if role == self.WidthRole:
            return element.width
        if role == self.HeightRole:
            return element.height
        if role == self.AngleRole:
            return element.angle
        if role == self.VersionRole:
            return element.version
        if role == self.ColorRole:
            return getattr(element, "color", "")
        if role == self.PointsRole:
            return [{"x": x, "y": y} for x, y in getattr(element, "points", [])]
        if role == self.TextRole:
            return getattr(element, "text", "")
        if role == self.BoundCountRole:
            return len(element.bound_elements)
        return None

    def roleNames(self) -> Dict[int, bytes]:  # type: ignore[override]
        return {
            self.IdRole: b"elementId",
            self.TypeRole: b"elementType",
            self.XRole: b"x",
            self.YRole: b"y",
            self.WidthRole: b"width",
            self.HeightRole: b"height",
            self.AngleRole: b"angle",
            self.VersionRole: b"version",
            self.ColorRole: b"color",
            self.PointsRole: b"points",
            self.TextRole: b"text",
            self.BoundCountRole: b"boundCount",
        }

    # --- Properties ---------------------------------------------------------
    @Property(int, notify=elementsChanged)
    def count(self) -> int:
        return len(self._elements)

    @Property(str, notify=suggestedBindingChanged)
    def suggestedBindingId(self) -> str:
        return self._candidate.element.id if self._candidate else ""

    @Property(bool, notify=elementsChanged)
    def isDraggingEndpoint(self) -> bool:
        return self._drag_arrow_id is not None

    def _get_zoom(self) -> float:
        return self._zoom

    def _set_zoom(self, value: float) -> None:
        clamped = max(0.1, min(30.0, value))
        if self._zoom != clamped:
            self._zoom = clamped
            self.zoomChanged.emit()

    @Property(float, notify=zoomChanged)
    def zoom(self) -> float:
        return self._get_zoom()

    @zoom.setter  # type: ignore[no-redef]
    def zoom(self, value: float) -> None:
        self._set_zoom(value)

    @Slot(float)
    def setZoom(self, value: float) -> None:
        self._set_zoom(value)

    # --- Element management -------------------------------------------------
    @Slot(str, float, float, result=str)
    def addShape(self, preset_name: str, x: float, y: float) -> str:
        preset = SHAPE_PRESETS.get(preset_name.lower())
        if not preset:
            return ""
        shape = Shape(
            id=self._next_id(preset_name.lower()),
            element_type=preset["type"],
            x=x,
            y=y,
            width=float(preset["width"]),
            height=float(preset["height"]),
            color=str(preset["color"]),
        )
        self._append_element(shape)
        return shape.id

    @Slot(float, float, float, float, result=str)
    def addArrow(self, start_x: float, start_y: float, end_x: float, end_y: float) -> str:
        dx = end_x - start_x
        dy = end_y - start_y
        arrow = Arrow(
            id=self._next_id("arrow"),
            x=start_x,
            y=start_y,
            width=abs(dx),
            height=abs(dy),
            points=[(0.0, 0.0), (dx, dy)],
        )
        self._append_element(arrow)
        return arrow.id

    @Slot(str, str, result=str)
    def addArrowLabel(self, arrow_id: str, text: str) -> str:
        """Create a text label centered on an arrow and bind it there."""
        arrow = self.getElement(arrow_id)
        if not is_arrow_element(arrow) or not text.strip():
            return ""
        label = TextElement(id=self._next_id("text"), text=text.strip())
        self._append_element(label)
        bind_text_to_container(label, arrow)
        self._sync_arrow_labels(arrow)
        self._notify([arrow, label])
        return label.id

    @Slot(str, float, float)
    def moveElement(self, element_id: str, x: float, y: float) -> None:
        element = self.getElement(element_id)
        if element is None or (element.x == x and element.y == y):
            return
        mutate_element(element, x=x, y=y)
        self._after_transform(element)

    @Slot(str, float, float)
    def resizeElement(self, element_id: str, width: float, height: float) -> None:
        element = self.getElement(element_id)
        if element is None or is_arrow_element(element):
            return
        new_width = max(0.0, width)
        new_height = max(0.0, height)
        if element.width == new_width and element.height == new_height:
            return
        mutate_element(element, width=new_width, height=new_height)
        self._after_transform(element)

    @Slot(str, float)
    def rotateElement(self, element_id: str, angle: float) -> None:
        element = self.getElement(element_id)
        if element is None or is_arrow_element(element) or element.angle == angle:
            return
        mutate_element(element, angle=angle)
        self._after_transform(element)

    def _after_transform(self, element: Element) -> None:
        touched: List[Element] = [element]
        if is_bindable_element(element):
            update_bound_arrow_endpoints(element, self._elements)
            for entry in element.bound_elements:
                arrow = self.getElement(entry.id)
                if is_arrow_element(arrow):
                    touched.extend(self._sync_arrow_labels(arrow))
                    touched.append(arrow)
        elif is_arrow_element(element):
            update_arrow_bindings(element, self._elements)
            touched.extend(self._sync_arrow_labels(element))
        self._notify(touched)

    def _sync_arrow_labels(self, arrow: Element) -> List[Element]:
        labels = []
        mid_x, mid_y = get_arrow_midpoint(arrow)
        for entry in arrow.bound_elements:
            label = self.getElement(entry.id)
            if not is_text_element(label):
                continue
            mutate_element(label, x=mid_x - label.width / 2, y=mid_y - label.height / 2)
            labels.append(label)
        return labels

    @Slot(str)
    def removeElement(self, element_id: str) -> None:
        element = self.getElement(element_id)
        if element is None:
            return

        touched: List[Element] = []
        removed: List[Element] = [element]
        if is_bindable_element(element):
            for entry in element.bound_elements:
                bound = self.getElement(entry.id)
                if bound is not None:
                    touched.append(bound)
            unbind_all_arrows_from_shape(element, self._elements)
        elif is_arrow_element(element):
            for binding in (element.start_binding, element.end_binding):
                if binding is None:
                    continue
                target = find_bindable_element(binding.element_id, self._elements)
                if target is not None and target not in touched:
                    touched.append(target)
            unbind_arrow(element, self._elements)
            removed.extend(
                label for label in self._elements
                if is_text_element(label) and label.container_id == element.id
            )
        elif is_text_element(element) and element.container_id:
            container = self.getElement(element.container_id)
            if container is not None:
                unbind_text_from_container(element, container)
                touched.append(container)

        for item in removed:
            mutate_element(item, is_deleted=True)
            self._remove_row(item)

        if self._drag_arrow_id in {item.id for item in removed}:
            self._reset_drag_state()
        if self._candidate is not None and self._candidate.element.is_deleted:
            self._set_candidate(None)
        self._notify(item for item in touched if not item.is_deleted)

    # --- Endpoint dragging --------------------------------------------------
    @Slot(str, str)
    def startEndpointDrag(self, arrow_id: str, endpoint: str) -> None:
        arrow = self.getElement(arrow_id)
        try:
            drag_endpoint = BindingEndpoint(endpoint)
        except ValueError:
            logger.warning("Unknown arrow endpoint: %s", endpoint)
            return
        if not is_arrow_element(arrow):
            return
        self._drag_arrow_id = arrow_id
        self._drag_endpoint = drag_endpoint
        self._set_candidate(None)
        self.elementsChanged.emit()

    @Slot(float, float)
    def updateEndpointDrag(self, x: float, y: float) -> None:
        arrow = self._drag_arrow()
        if arrow is None or self._drag_endpoint is None:
            return
        move_arrow_endpoint(arrow, self._drag_endpoint, (x, y))
        labels = self._sync_arrow_labels(arrow)
        candidate = get_hovered_element_for_binding((x, y), self._elements, self._zoom, {arrow.id})
        self._set_candidate(candidate)
        self._notify([arrow, *labels])

    @Slot()
    @Slot(bool)
    def finishEndpointDrag(self, inside: bool = False) -> None:
        """Commit the dragged endpoint to the suggested shape, if any.

        With ``inside`` set the endpoint is pinned to the fixed point itself
        instead of orbiting the shape edge.
        """
        arrow = self._drag_arrow()
        endpoint = self._drag_endpoint
        if arrow is None or endpoint is None:
            self._reset_drag_state()
            return

        candidate = self._candidate
        touched: List[Element] = [arrow]
        previous = arrow.get_binding(endpoint)
        if previous is not None and (candidate is None or previous.element_id != candidate.element.id):
            unbind_arrow_endpoint(arrow, endpoint, self._elements)
            old_target = self.getElement(previous.element_id)
            if old_target is not None:
                touched.append(old_target)
        if candidate is not None:
            mode = BindingMode.INSIDE if inside else BindingMode.ORBIT
            bind_arrow_to_element(arrow, endpoint, candidate.element, candidate.fixed_point, mode)
            update_arrow_endpoint(arrow, endpoint, candidate.element)
            touched.append(candidate.element)
        touched.extend(self._sync_arrow_labels(arrow))

        self._reset_drag_state()
        self._notify(touched)

    @Slot()
    def cancelEndpointDrag(self) -> None:
        self._reset_drag_state()

    def _drag_arrow(self) -> Optional[Arrow]:
        if self._drag_arrow_id is None:
            return None
        arrow = self.getElement(self._drag_arrow_id)
        return arrow if is_arrow_element(arrow) else None

    def _set_candidate(self, candidate: Optional[BindingCandidate]) -> None:
        old_id = self._candidate.element.id if self._candidate else ""
        new_id = candidate.element.id if candidate else ""
        self._candidate = candidate
        if old_id != new_id:
            self.suggestedBindingChanged.emit()

    def _reset_drag_state(self) -> None:
        changed = self._drag_arrow_id is not None
        self._drag_arrow_id = None
        self._drag_endpoint = None
        self._set_candidate(None)
        if changed:
            self.elementsChanged.emit()

    # --- Utilities ----------------------------------------------------------
    def getElement(self, element_id: str) -> Optional[Element]:
        return self._by_id.get(element_id)

    def suggestedBinding(self) -> Optional[Element]:
        return self._candidate.element if self._candidate else None

    def elements(self) -> List[Element]:
        return list(self._elements)

    @Slot(str, result="QVariant")
    def getElementSnapshot(self, element_id: str) -> Dict[str, Any]:
        element = self.getElement(element_id)
        if element is None:
            return {}
        snapshot: Dict[str, Any] = {
            "id": element.id,
            "type": element.element_type.value,
            "x": element.x,
            "y": element.y,
            "width": element.width,
            "height": element.height,
            "angle": element.angle,
            "version": element.version,
            "boundElements": [entry.id for entry in element.bound_elements],
        }
        if is_arrow_element(element):
            snapshot["points"] = [list(point) for point in element.points]
            for key, binding in (("startBinding", element.start_binding), ("endBinding", element.end_binding)):
                snapshot[key] = (
                    {
                        "elementId": binding.element_id,
                        "fixedPoint": list(binding.fixed_point),
                        "mode": binding.mode.value,
                    }
                    if binding
                    else None
                )
        return snapshot
