"""Element mutation and classification helpers."""

from __future__ import annotations

from typing import Any, Optional, TypeVar

from .types import BINDABLE_TYPES, Element, ElementType

E = TypeVar("E", bound=Element)


def mutate_element(element: E, **updates: Any) -> E:
    """Apply ``updates`` to ``element`` and bump its generation counter.

    Renderers and caches compare ``version`` to decide whether an element
    needs redrawing, so every engine write goes through here.
    """
    for name, value in updates.items():
        if not hasattr(element, name):
            raise AttributeError(f"{type(element).__name__} has no field {name!r}")
        setattr(element, name, value)
    element.version += 1
    return element


def is_bindable_element(element: Optional[Element]) -> bool:
    if element is None:
        return False
    return element.element_type in BINDABLE_TYPES


def is_arrow_element(element: Optional[Element]) -> bool:
    return element is not None and element.element_type is ElementType.ARROW


def is_text_element(element: Optional[Element]) -> bool:
    return element is not None and element.element_type is ElementType.TEXT
