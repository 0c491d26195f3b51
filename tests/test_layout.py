from __future__ import annotations

from typing import Callable

from famtree.graph import DisplayUnit, build_display_forest
from famtree.layout import (
    CARD_WIDTH,
    SPOUSE_GAP,
    child_connector_offset,
    couple_center_offset,
    couple_width,
    layout_forest,
    parent_drop_offset,
    sibling_connectors,
)
from famtree.people import Person


def _single(pid: str = "x") -> DisplayUnit:
    return DisplayUnit(person=Person(id=pid))


def _couple(pid: str = "x", sid: str = "y") -> DisplayUnit:
    unit = _single(pid)
    unit.spouse = _single(sid)
    return unit


def test_widths_and_centres() -> None:
    assert couple_width(_single()) == CARD_WIDTH
    assert couple_width(_couple()) == 2 * CARD_WIDTH + SPOUSE_GAP
    assert couple_center_offset(_single()) == CARD_WIDTH / 2
    assert couple_center_offset(_couple()) == CARD_WIDTH + SPOUSE_GAP / 2


def test_parent_drop_line_is_centred_on_the_block() -> None:
    assert parent_drop_offset(_single()) == 0
    assert parent_drop_offset(_couple()) == 0


def test_child_connector_points_at_own_card() -> None:
    assert child_connector_offset(_single()) == 0

    married = _couple()
    offset = child_connector_offset(married)
    assert offset == -(CARD_WIDTH + SPOUSE_GAP) / 2
    # Block centre plus the offset lands on the centre of the left (own) card.
    assert couple_width(married) / 2 + offset == CARD_WIDTH / 2


def test_sibling_bridges_only_between_neighbours() -> None:
    parent = _single("p")
    parent.children = [_single("a"), _couple("b", "bs"), _single("c")]

    connectors = sibling_connectors(parent)
    assert [c.child_id for c in connectors] == ["a", "b", "c"]
    assert [(c.left_bridge, c.right_bridge) for c in connectors] == [
        (False, True),
        (True, True),
        (True, False),
    ]
    assert connectors[0].offset_bridge_width == 0
    assert connectors[1].offset_bridge_width == (CARD_WIDTH + SPOUSE_GAP) / 2


def test_only_child_has_no_bridges() -> None:
    parent = _single("p")
    parent.children = [_single("a")]
    (conn,) = sibling_connectors(parent)
    assert not conn.left_bridge and not conn.right_bridge


def test_layout_forest_covers_every_unit(three_generations: list[Person]) -> None:
    roots = build_display_forest(three_generations)
    layouts = layout_forest(roots)

    assert set(layouts) == {"1", "3", "5", "7"}
    assert layouts["1"].couple_width == 2 * CARD_WIDTH + SPOUSE_GAP
    assert layouts["7"].couple_width == CARD_WIDTH
    assert [c.child_id for c in layouts["1"].connectors] == ["3"]
    assert layouts["1"].connectors[0].vertical_offset == -(CARD_WIDTH + SPOUSE_GAP) / 2


def test_layout_forest_handles_separate_roots(make_people: Callable[..., list[Person]]) -> None:
    roots = build_display_forest(make_people({"id": "1"}, {"id": "2", "parentId": "nobody"}))
    assert set(layout_forest(roots)) == {"1", "2"}


def test_layout_forest_on_very_long_family_line() -> None:
    chain = [Person(id="0")] + [Person(id=str(i), parent_id=str(i - 1)) for i in range(1, 2000)]

    layouts = layout_forest(build_display_forest(chain))
    assert len(layouts) == 2000
    assert [c.child_id for c in layouts["1998"].connectors] == ["1999"]
    assert layouts["1999"].connectors == ()
