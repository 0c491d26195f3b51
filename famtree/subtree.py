from __future__ import annotations

from typing import Any, Sequence

try:
    from .people import Person
except ImportError:  # pragma: no cover
    from people import Person


def select_family(people: Sequence[Person], start_id: str, max_depth: int) -> list[Person]:
    """Return the couple at ``start_id`` plus their descendants down to ``max_depth``.

    Direct children are depth 1. Each included descendant brings their spouse
    along. Descent runs from the start person first, then from the spouse, so
    children recorded against either parent are found; nobody is added (or
    descended into) twice.

    If ``start_id`` is not in ``people`` the selection is stale and the full
    list comes back unfiltered.
    """

    by_id: dict[str, Person] = {}
    for p in people:
        by_id.setdefault(p.id, p)

    start = by_id.get(start_id)
    if start is None:
        return list(people)

    children_of: dict[str, list[Person]] = {}
    for p in people:
        if p.parent_id:
            children_of.setdefault(p.parent_id, []).append(p)

    result: list[Person] = []
    seen: set[str] = set()

    def _add(p: Person) -> None:
        result.append(p)
        seen.add(p.id)

    _add(start)
    spouse = by_id.get(start.spouse_id) if start.spouse_id else None
    if spouse is not None and spouse.id not in seen:
        _add(spouse)

    def _descend(origin_id: str) -> None:
        if max_depth < 1:
            return
        # (remaining siblings, their depth); depth first, siblings in record order.
        stack = [(iter(children_of.get(origin_id, [])), 1)]
        while stack:
            siblings, depth = stack[-1]
            child = next(siblings, None)
            if child is None:
                stack.pop()
                continue
            if child.id in seen:
                continue
            _add(child)
            if child.spouse_id:
                child_spouse = by_id.get(child.spouse_id)
                if child_spouse is not None and child_spouse.id not in seen:
                    _add(child_spouse)
            if depth < max_depth:
                stack.append((iter(children_of.get(child.id, [])), depth + 1))

    _descend(start.id)
    if start.spouse_id:
        _descend(start.spouse_id)

    return result


def family_choices(people: Sequence[Person]) -> list[dict[str, Any]]:
    """People who can anchor family mode: anyone recording a spouse, by full name."""

    by_id = {p.id: p for p in people}
    out: list[dict[str, Any]] = []
    for p in sorted((p for p in people if p.spouse_id), key=lambda p: p.full_name.casefold()):
        spouse = by_id.get(p.spouse_id)
        spouse_name = spouse.full_name if spouse is not None else ""
        out.append(
            {
                "id": p.id,
                "spouseId": p.spouse_id,
                "label": f"{p.full_name} & {spouse_name}".strip(),
            }
        )
    return out
