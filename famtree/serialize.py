from __future__ import annotations

from datetime import date
from typing import Any

try:
    from .dates import calculate_age, format_date, to_input_date
    from .graph import DisplayUnit, iter_units
    from .layout import UnitLayout, unit_layout
    from .people import Person
    from .util import _compact_json
except ImportError:  # pragma: no cover
    from dates import calculate_age, format_date, to_input_date
    from graph import DisplayUnit, iter_units
    from layout import UnitLayout, unit_layout
    from people import Person
    from util import _compact_json


def _person_to_public(p: Person, *, today: date | None = None) -> dict[str, Any]:
    """Card payload for one person: the record plus display helpers.

    Empty optional fields are dropped; ``id`` and ``fullName`` always stay.
    """

    rec = p.to_record(include_history=False)
    rec["displayName"] = p.display_name
    rec["birthDateDisplay"] = format_date(p.birth_date)
    rec["birthDateInput"] = to_input_date(p.birth_date)
    rec["age"] = calculate_age(p.birth_date, today=today)
    rec["hasHistory"] = bool(p.history)

    return _compact_json(rec, keep=("id", "fullName", "hasHistory", "status")) or {}


def _child_gender_counts(unit: DisplayUnit) -> dict[str, int]:
    sons = sum(1 for c in unit.children if c.person.gender == "male")
    daughters = sum(1 for c in unit.children if c.person.gender == "female")
    return {"sons": sons, "daughters": daughters}


def _layout_to_public(lay: UnitLayout) -> dict[str, Any]:
    return {
        "coupleWidth": lay.couple_width,
        "coupleCenterOffset": lay.couple_center_offset,
        "parentDropOffset": lay.parent_drop_offset,
        "connectors": [
            {
                "childId": c.child_id,
                "verticalOffset": c.vertical_offset,
                "offsetBridgeWidth": c.offset_bridge_width,
                "leftBridge": c.left_bridge,
                "rightBridge": c.right_bridge,
            }
            for c in lay.connectors
        ],
    }


def _unit_to_public(
    unit: DisplayUnit,
    *,
    layout: UnitLayout | None = None,
    today: date | None = None,
) -> dict[str, Any]:
    """Payload for one unit; children are referenced by id."""

    return {
        "id": unit.id,
        "person": _person_to_public(unit.person, today=today),
        "spouse": _person_to_public(unit.spouse.person, today=today) if unit.spouse is not None else None,
        "expanded": unit.expanded,
        "childCounts": _child_gender_counts(unit),
        "layout": _layout_to_public(layout or unit_layout(unit)),
        "children": unit.child_ids(),
    }


def _forest_to_public(
    roots: list[DisplayUnit],
    *,
    layouts: dict[str, UnitLayout] | None = None,
    today: date | None = None,
) -> dict[str, Any]:
    """Flat tree payload: root ids plus every reachable unit keyed by id.

    Nesting is expressed only through each unit's ``children`` ids.
    """

    units: dict[str, dict[str, Any]] = {}
    for unit in iter_units(roots):
        if unit.id in units:
            continue
        lay = (layouts or {}).get(unit.id)
        units[unit.id] = _unit_to_public(unit, layout=lay, today=today)

    return {"roots": [r.id for r in roots], "units": units}
