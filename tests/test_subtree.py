from __future__ import annotations

from typing import Callable

from famtree.graph import build_display_forest
from famtree.people import Person
from famtree.subtree import family_choices, select_family


def _ids(people: list[Person]) -> list[str]:
    return [p.id for p in people]


def test_depth_one_stops_at_children(make_people: Callable[..., list[Person]]) -> None:
    people = make_people(
        {"id": "1"},
        {"id": "3", "parentId": "1"},
        {"id": "5", "parentId": "3"},
    )
    assert _ids(select_family(people, "1", 1)) == ["1", "3"]


def test_depth_one_brings_spouses_of_start_and_children(three_generations: list[Person]) -> None:
    assert _ids(select_family(three_generations, "1", 1)) == ["1", "2", "3", "4"]


def test_depth_two_and_three(three_generations: list[Person]) -> None:
    assert _ids(select_family(three_generations, "1", 2)) == ["1", "2", "3", "4", "5", "6"]
    assert _ids(select_family(three_generations, "1", 3)) == ["1", "2", "3", "4", "5", "6", "7"]


def test_stale_start_returns_everything(three_generations: list[Person]) -> None:
    out = select_family(three_generations, "nobody", 2)
    assert out == three_generations
    assert out is not three_generations


def test_children_recorded_against_either_spouse_are_found_once(make_people: Callable[..., list[Person]]) -> None:
    people = make_people(
        {"id": "1", "spouseId": "2"},
        {"id": "2", "spouseId": "1"},
        {"id": "3", "parentId": "1"},
        {"id": "4", "parentId": "2"},
        {"id": "9"},
    )
    out = select_family(people, "2", 1)
    assert _ids(out) == ["2", "1", "4", "3"]


def test_start_from_married_in_spouse(three_generations: list[Person]) -> None:
    # 4 married into the family; her children are recorded against 3.
    assert _ids(select_family(three_generations, "4", 1)) == ["4", "3", "5", "6"]


def test_depth_bound_holds_for_every_depth(three_generations: list[Person]) -> None:
    by_id = {p.id: p for p in three_generations}

    def hops(pid: str, origins: set[str]) -> int | None:
        n = 0
        cur = by_id[pid]
        while cur.id not in origins:
            if not cur.parent_id or cur.parent_id not in by_id:
                return None
            cur = by_id[cur.parent_id]
            n += 1
        return n

    for depth in range(1, 5):
        for p in select_family(three_generations, "1", depth):
            h = hops(p.id, {"1", "2"})
            if h is None:
                # Brought in as someone's spouse; their partner carries the bound.
                partner = by_id[p.spouse_id]
                h = hops(partner.id, {"1", "2"})
            assert h is not None and h <= depth


def test_parent_cycle_terminates(make_people: Callable[..., list[Person]]) -> None:
    people = make_people(
        {"id": "1", "parentId": "3"},
        {"id": "3", "parentId": "1"},
    )
    assert _ids(select_family(people, "1", 5)) == ["1", "3"]


def test_selection_feeds_builder_as_single_family(three_generations: list[Person]) -> None:
    selected = select_family(three_generations, "3", 1)
    assert _ids(selected) == ["3", "4", "5", "6"]

    roots = build_display_forest(selected)
    # 3's parent is outside the selection, so 3 becomes the root couple.
    assert [r.id for r in roots] == ["3"]
    assert roots[0].child_ids() == ["5"]


def test_family_choices_lists_people_with_spouses_by_name(make_people: Callable[..., list[Person]]) -> None:
    people = make_people(
        {"id": "1", "spouseId": "2", "fullName": "Zainal"},
        {"id": "2", "spouseId": "1", "fullName": "Aminah"},
        {"id": "3", "fullName": "Single"},
        {"id": "4", "spouseId": "77", "fullName": "Badrul"},
    )
    choices = family_choices(people)
    assert [c["id"] for c in choices] == ["2", "4", "1"]
    assert choices[0]["label"] == "Aminah & Zainal"
    assert choices[1]["label"] == "Badrul &"


def test_very_long_family_line() -> None:
    chain = [Person(id="0")] + [Person(id=str(i), parent_id=str(i - 1)) for i in range(1, 2000)]

    assert _ids(select_family(chain, "0", 2000)) == [str(i) for i in range(2000)]
    assert _ids(select_family(chain, "0", 1500))[-1] == "1500"
