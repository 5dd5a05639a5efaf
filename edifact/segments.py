"""
Positional addressing into tokenized EDIFACT segments.

Positions are 1-based, as in the EDIFACT directories. Empty or missing
values come back as None; nothing here raises for out-of-range positions.
"""
from typing import Optional
from utils.schemas import Segment


def element(segment: Segment, position: int) -> Optional[str]:
    """Raw value of the element at `position`, or None if absent or empty."""
    if position < 1 or position > len(segment.elements):
        return None
    return segment.elements[position - 1].value or None


def component(segment: Segment, element_position: int, component_position: int) -> Optional[str]:
    """
    Component value inside the element at `element_position`.

    A simple element (no component breakdown) is treated as a composite with a
    single component, so `component(seg, n, 1)` returns its raw value.
    """
    if element_position < 1 or element_position > len(segment.elements):
        return None
    data_element = segment.elements[element_position - 1]

    components = data_element.components
    if components and 1 <= component_position <= len(components):
        return components[component_position - 1] or None

    if component_position == 1:
        return data_element.value or None

    return None
