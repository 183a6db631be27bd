"""Binding state management between arrow endpoints and shapes.

A binding lives on two sides: the arrow holds a ``FixedPointBinding`` per
endpoint, and the shape lists the arrow in ``bound_elements``. Every
function here keeps both sides in step. They are all safe to call
speculatively: missing elements and already-cleared bindings are no-ops.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .elements import is_arrow_element, is_bindable_element, mutate_element
from .geometry import clamp
from .types import (
    Arrow,
    BindingEndpoint,
    BindingMode,
    BoundElement,
    Element,
    ElementType,
    FixedPointBinding,
    Point,
    TextElement,
)

logger = logging.getLogger(__name__)


def _binding_field(endpoint: BindingEndpoint) -> str:
    return "start_binding" if endpoint is BindingEndpoint.START else "end_binding"


def _find_element(element_id: str, elements: Iterable[Element]) -> Optional[Element]:
    for element in elements:
        if element.id == element_id:
            return element
    return None


def _add_bound_element(target: Element, entry: BoundElement) -> None:
    if any(existing.id == entry.id for existing in target.bound_elements):
        return
    mutate_element(target, bound_elements=[*target.bound_elements, entry])


def _remove_bound_element(target: Element, element_id: str) -> None:
    mutate_element(
        target,
        bound_elements=[entry for entry in target.bound_elements if entry.id != element_id],
    )


def bind_arrow_to_element(
    arrow: Arrow,
    endpoint: BindingEndpoint,
    target: Element,
    fixed_point: Point,
    mode: BindingMode = BindingMode.ORBIT,
) -> None:
    """Bind one endpoint of ``arrow`` to ``target`` at ``fixed_point``."""
    binding = FixedPointBinding(
        element_id=target.id,
        fixed_point=(clamp(fixed_point[0], 0.0, 1.0), clamp(fixed_point[1], 0.0, 1.0)),
        mode=mode,
    )
    mutate_element(arrow, **{_binding_field(endpoint): binding})
    _add_bound_element(target, BoundElement(arrow.id, ElementType.ARROW))
    logger.debug(
        "Bound %s %s to %s at %s (%s)",
        arrow.id,
        endpoint.value,
        target.id,
        binding.fixed_point,
        mode.value,
    )


def unbind_arrow_endpoint(
    arrow: Arrow,
    endpoint: BindingEndpoint,
    elements: Iterable[Element],
) -> None:
    """Clear one endpoint binding and the matching back-reference."""
    binding = arrow.get_binding(endpoint)
    if binding is None:
        return

    mutate_element(arrow, **{_binding_field(endpoint): None})
    logger.debug("Unbound %s %s from %s", arrow.id, endpoint.value, binding.element_id)

    shape = _find_element(binding.element_id, elements)
    if shape is None:
        return
    other = arrow.get_binding(
        BindingEndpoint.END if endpoint is BindingEndpoint.START else BindingEndpoint.START
    )
    if other is not None and other.element_id == shape.id:
        # the opposite end still holds the back-reference
        return
    _remove_bound_element(shape, arrow.id)


def unbind_all_arrows_from_shape(shape: Element, elements: Iterable[Element]) -> None:
    """Detach every arrow bound to ``shape`` and empty its bound list."""
    if not shape.bound_elements:
        return

    for element in elements:
        if not is_arrow_element(element):
            continue
        if element.start_binding is not None and element.start_binding.element_id == shape.id:
            mutate_element(element, start_binding=None)
        if element.end_binding is not None and element.end_binding.element_id == shape.id:
            mutate_element(element, end_binding=None)

    mutate_element(shape, bound_elements=[])
    logger.debug("Cleared all bindings on %s", shape.id)


def unbind_arrow(arrow: Arrow, elements: Iterable[Element]) -> None:
    """Unbind both endpoints of ``arrow``."""
    elements = list(elements)
    unbind_arrow_endpoint(arrow, BindingEndpoint.START, elements)
    unbind_arrow_endpoint(arrow, BindingEndpoint.END, elements)


def find_bindable_element(element_id: str, elements: Iterable[Element]) -> Optional[Element]:
    """Return the live bindable shape with ``element_id``, if any."""
    element = _find_element(element_id, elements)
    if element is None or element.is_deleted or not is_bindable_element(element):
        return None
    return element


def bind_text_to_container(text_element: TextElement, container: Element) -> None:
    """Attach a text label to ``container``."""
    mutate_element(text_element, container_id=container.id)
    _add_bound_element(container, BoundElement(text_element.id, ElementType.TEXT))


def unbind_text_from_container(text_element: TextElement, container: Element) -> None:
    """Detach a text label from ``container``."""
    mutate_element(text_element, container_id=None)
    _remove_bound_element(container, text_element.id)
