"""Connector geometry for the couple/children tree view.

All offsets are horizontal pixels. A unit's block is its own card, plus the
spouse gap and the spouse's card when it has a spouse. Children sit in a row
below; the vertical line into each child must land on the child's own card,
not on the middle of the child's couple block.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

try:
    from .graph import DisplayUnit, iter_units
except ImportError:  # pragma: no cover
    from graph import DisplayUnit, iter_units

CARD_WIDTH = 160
SPOUSE_GAP = 48


@dataclass(frozen=True)
class ChildConnector:
    child_id: str
    # From the child block's centre to the centre of the child's own card.
    vertical_offset: float
    left_bridge: bool
    right_bridge: bool

    @property
    def offset_bridge_width(self) -> float:
        return abs(self.vertical_offset)


@dataclass(frozen=True)
class UnitLayout:
    unit_id: str
    couple_width: float
    couple_center_offset: float
    parent_drop_offset: float
    connectors: tuple[ChildConnector, ...]


def couple_width(unit: DisplayUnit) -> float:
    if unit.has_spouse:
        return 2 * CARD_WIDTH + SPOUSE_GAP
    return CARD_WIDTH


def couple_center_offset(unit: DisplayUnit) -> float:
    if unit.has_spouse:
        return CARD_WIDTH + SPOUSE_GAP / 2
    return CARD_WIDTH / 2


def parent_drop_offset(unit: DisplayUnit) -> float:
    return couple_center_offset(unit) - couple_width(unit) / 2


def child_connector_offset(child: DisplayUnit) -> float:
    if not child.has_spouse:
        return 0
    # The child's own card is the left one in its block.
    return CARD_WIDTH / 2 - couple_center_offset(child)


def sibling_connectors(unit: DisplayUnit) -> tuple[ChildConnector, ...]:
    last = len(unit.children) - 1
    return tuple(
        ChildConnector(
            child_id=child.id,
            vertical_offset=child_connector_offset(child),
            left_bridge=i > 0,
            right_bridge=i < last,
        )
        for i, child in enumerate(unit.children)
    )


def unit_layout(unit: DisplayUnit) -> UnitLayout:
    return UnitLayout(
        unit_id=unit.id,
        couple_width=couple_width(unit),
        couple_center_offset=couple_center_offset(unit),
        parent_drop_offset=parent_drop_offset(unit),
        connectors=sibling_connectors(unit),
    )


def layout_forest(roots: Iterable[DisplayUnit]) -> dict[str, UnitLayout]:
    out: dict[str, UnitLayout] = {}
    for unit in iter_units(roots):
        if unit.id not in out:
            out[unit.id] = unit_layout(unit)
    return out
