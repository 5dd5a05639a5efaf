"""
Hierarchical context for the single-pass segment walk.

EDIFACT messages carry no explicit nesting markers: a NAD opens a party, a CPS
opens a package, a LIN opens a line item, and the node stays "open" until the
next opener at the same or a higher level arrives. HierarchyContext keeps one
slot per level and performs the flush/open transition; the group readers
consume segment runs that belong to a preceding anchor (CTA+COM, ALC+PCD/MOA,
TAX+MOA) and return the cursor position just past the run.
"""
from typing import Any, Callable, Dict, List, Optional, Tuple
from edifact import decoders
from utils.constants import (
    ALLOWANCE_AMOUNT_QUALIFIERS, ALLOWANCE_BASIS_QUALIFIERS,
    TAX_AMOUNT_QUALIFIERS, TAX_BASIS_QUALIFIERS
)
from utils.schemas import Segment, Contact, AllowanceCharge, Tax


HEADER = "header"
DETAIL = "detail"
SUMMARY = "summary"


class _Level:

    def __init__(self, name: str, sink: Callable[[Any], None], parent: Optional[str]):
        self.name = name
        self.sink = sink
        self.parent = parent
        self.node = None


class HierarchyContext:
    """
    One optional "open" node per hierarchy level.

    Levels are declared with the callable that receives a node when it is
    flushed, and optionally a parent level. Opening a level closes it and every
    level beneath it first (deepest first), so a new package flushes the open
    line item into the old package before the old package itself is flushed.
    """

    def __init__(self):
        self._levels: Dict[str, _Level] = {}
        self.section = HEADER

    def add_level(self, name: str, sink: Callable[[Any], None], parent: Optional[str] = None):
        if parent is not None and parent not in self._levels:
            raise ValueError(f"Unknown parent level: {parent}")
        self._levels[name] = _Level(name, sink, parent)
        return self

    def _children(self, name: str) -> List[_Level]:
        return [level for level in self._levels.values() if level.parent == name]

    def current(self, name: str):
        """Open node at `name`, or None."""
        return self._levels[name].node

    def innermost(self, *names: str):
        """First open node among `names` (most specific first)."""
        for name in names:
            node = self._levels[name].node
            if node is not None:
                return node
        return None

    def open(self, name: str, node):
        """Close `name` and its descendants, then make `node` the open node at `name`."""
        self.close(name)
        self._levels[name].node = node
        return node

    def close(self, name: str):
        """Flush the open node at `name`, after flushing every descendant level."""
        for child in self._children(name):
            self.close(child.name)
        level = self._levels[name]
        if level.node is not None:
            node, level.node = level.node, None
            level.sink(node)

    def _depth(self, name: str) -> int:
        depth = 0
        parent = self._levels[name].parent
        while parent is not None:
            depth += 1
            parent = self._levels[parent].parent
        return depth

    def close_all(self):
        """End of stream: flush every still-open level, deepest first."""
        # sorted() is stable, so levels at equal depth keep declaration order
        for name in sorted(self._levels, key=self._depth, reverse=True):
            self.close(name)


# ========================================================================
# Group readers (cursor-advancing lookahead)
# ========================================================================

def read_contact(segments: List[Segment], index: int) -> Tuple[Contact, int]:
    """
    Decode the CTA at `index` and the run of COM segments following it.

    Returns the contact and the index just past the last consumed COM.
    """
    contact = decoders.decode_CTA(segments[index])
    next_index = index + 1
    while next_index < len(segments) and segments[next_index].tag == "COM":
        communication = decoders.decode_COM(segments[next_index])
        if communication:
            contact.communications.append(communication)
        next_index += 1
    return contact, next_index


def read_allowance_charge(segments: List[Segment], index: int) -> Tuple[AllowanceCharge, int]:
    """Decode the ALC at `index` together with its trailing PCD/MOA run."""
    allowance = decoders.decode_ALC(segments[index])
    next_index = index + 1
    while next_index < len(segments):
        segment = segments[next_index]
        if segment.tag == "PCD":
            percentage = decoders.decode_PCD(segment)
            if percentage is not None:
                allowance.percentage = percentage
        elif segment.tag == "MOA":
            amount = decoders.decode_MOA(segment)
            if amount.type_qualifier in ALLOWANCE_AMOUNT_QUALIFIERS:
                allowance.amount = amount.amount
            elif amount.type_qualifier in ALLOWANCE_BASIS_QUALIFIERS:
                allowance.basis_amount = amount.amount
        else:
            break
        next_index += 1
    return allowance, next_index


def read_tax(segments: List[Segment], index: int) -> Tuple[Tax, int]:
    """Decode the TAX at `index` and at most one MOA directly after it."""
    tax = decoders.decode_TAX(segments[index])
    next_index = index + 1
    if next_index < len(segments) and segments[next_index].tag == "MOA":
        amount = decoders.decode_MOA(segments[next_index])
        if amount.type_qualifier in TAX_AMOUNT_QUALIFIERS:
            tax.amount = amount.amount
        elif amount.type_qualifier in TAX_BASIS_QUALIFIERS:
            tax.basis_amount = amount.amount
        next_index += 1
    return tax, next_index
