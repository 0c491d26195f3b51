"""Couple-merged display forest built from flat person records.

Each person holds at most one ``parent_id`` and one ``spouse_id``. The tree view
needs something else: married couples drawn as one block, and children hung
under the couple whichever spouse their ``parent_id`` happens to name.

The forest is rebuilt from scratch on every call. Nothing here raises on bad
references: a dangling ``parent_id`` promotes the person to a root, a dangling
``spouse_id`` simply leaves them single.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

try:
    from .people import Person
except ImportError:  # pragma: no cover
    from people import Person

log = logging.getLogger(__name__)


@dataclass(eq=False)
class DisplayUnit:
    person: Person
    children: list["DisplayUnit"] = field(default_factory=list)
    # The spouse's own unit in the same forest; this unit does not own it.
    spouse: Optional["DisplayUnit"] = None
    expanded: bool = True

    @property
    def id(self) -> str:
        return self.person.id

    @property
    def has_spouse(self) -> bool:
        return self.spouse is not None

    def child_ids(self) -> list[str]:
        return [c.id for c in self.children]

    def _add_child(self, child: "DisplayUnit") -> None:
        if any(c.id == child.id for c in self.children):
            return
        self.children.append(child)

    def __repr__(self) -> str:
        spouse = f", spouse={self.spouse.id!r}" if self.spouse is not None else ""
        return f"DisplayUnit(id={self.id!r}{spouse}, children={self.child_ids()!r})"


def build_display_forest(
    people: Iterable[Person],
    *,
    expanded: Mapping[str, bool] | None = None,
) -> list[DisplayUnit]:
    """Return the root units of the display forest.

    ``expanded`` is an optional id -> collapse-state mapping owned by the caller;
    units not in it start expanded.
    """

    people = list(people)
    expanded = expanded or {}

    units: dict[str, DisplayUnit] = {}
    for p in people:
        units[p.id] = DisplayUnit(person=p, expanded=bool(expanded.get(p.id, True)))

    # Spouses. Only the side that stores spouse_id gets the link.
    for p in people:
        if p.spouse_id and p.spouse_id in units:
            units[p.id].spouse = units[p.spouse_id]

    # Children go under the anchor parent and under the anchor parent's spouse.
    for p in people:
        if not p.parent_id or p.parent_id not in units:
            continue
        parent = units[p.parent_id]
        child = units[p.id]
        parent._add_child(child)

        spouse_id = parent.person.spouse_id
        if spouse_id and spouse_id in units:
            units[spouse_id]._add_child(child)

    roots: list[DisplayUnit] = []
    root_ids: set[str] = set()
    for p in people:
        if p.parent_id and p.parent_id in units:
            continue

        # A married-in spouse is drawn next to their partner, not as a root.
        spouse = units.get(p.spouse_id) if p.spouse_id else None
        if spouse is not None:
            sp_parent = spouse.person.parent_id
            if sp_parent and sp_parent in units:
                continue

        if p.id in root_ids or (p.spouse_id and p.spouse_id in root_ids):
            continue
        roots.append(units[p.id])
        root_ids.add(p.id)

    log.debug("display forest: %d people, %d roots", len(people), len(roots))
    return roots


def iter_units(roots: Iterable[DisplayUnit]) -> Iterable[DisplayUnit]:
    """Yield every unit reachable from ``roots`` through children, depth first.

    Spouse units are not yielded on their own. A unit reached twice on the same
    path (possible only with cyclic parent references) is skipped.
    """

    for root in roots:
        yield root
        path = [root.id]
        on_path = {root.id}
        # One iterator of remaining children per unit on the current path.
        stack = [iter(root.children)]
        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                on_path.discard(path.pop())
                continue
            if child.id in on_path:
                continue
            yield child
            path.append(child.id)
            on_path.add(child.id)
            stack.append(iter(child.children))
