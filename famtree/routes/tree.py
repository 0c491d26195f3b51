from __future__ import annotations

import logging
import os
from datetime import date
from typing import Any, Literal, Optional, Sequence

from fastapi import APIRouter, Query

try:
    from ..db import db_conn
    from ..graph import build_display_forest
    from ..layout import layout_forest
    from ..people import Person
    from ..records import fetch_people
    from ..serialize import _forest_to_public
    from ..subtree import family_choices, select_family
except ImportError:  # pragma: no cover
    from db import db_conn
    from graph import build_display_forest
    from layout import layout_forest
    from people import Person
    from records import fetch_people
    from serialize import _forest_to_public
    from subtree import family_choices, select_family

log = logging.getLogger(__name__)

router = APIRouter(prefix="/tree", tags=["tree"])

_MAX_DEPTH = 10


def _default_depth() -> int:
    raw = os.environ.get("FAMTREE_DEFAULT_DEPTH", "").strip()
    try:
        depth = int(raw) if raw else 2
    except ValueError:
        log.warning("ignoring non-integer FAMTREE_DEFAULT_DEPTH=%r", raw)
        depth = 2
    return min(max(depth, 1), _MAX_DEPTH)


def _tree_payload(
    people: Sequence[Person],
    *,
    mode: str = "whole",
    family_id: str | None = None,
    depth: int | None = None,
    collapsed: Sequence[str] = (),
    today: date | None = None,
) -> dict[str, Any]:
    """Build the tree payload for the whole set or for one family."""

    depth = depth or _default_depth()
    scoped = False
    if mode == "family" and family_id:
        if any(p.id == family_id for p in people):
            people = select_family(people, family_id, depth)
            scoped = True
        else:
            log.warning("family %s not found; showing the whole tree", family_id)

    roots = build_display_forest(people, expanded={pid: False for pid in collapsed})
    layouts = layout_forest(roots)

    return {
        "mode": mode if scoped else "whole",
        "familyId": family_id if scoped else None,
        "depth": depth if scoped else None,
        "count": len(people),
        **_forest_to_public(roots, layouts=layouts, today=today),
    }


@router.get("")
def get_tree(
    mode: Literal["whole", "family"] = "whole",
    family_id: Optional[str] = None,
    depth: Optional[int] = Query(default=None, ge=1, le=_MAX_DEPTH),
    show_inactive: bool = False,
    collapsed: list[str] = Query(default=[]),
) -> dict[str, Any]:
    """Tree view: couple-merged forest with connector layout.

    ``mode=family`` scopes the tree to ``family_id`` and their descendants down to
    ``depth`` generations. ``collapsed`` lists unit ids the viewer has folded.
    """

    with db_conn() as conn:
        people = fetch_people(conn, show_inactive=show_inactive)

    return _tree_payload(people, mode=mode, family_id=family_id, depth=depth, collapsed=collapsed)


@router.get("/families")
def list_families(show_inactive: bool = False) -> dict[str, Any]:
    """Couples that can anchor family mode."""

    with db_conn() as conn:
        people = fetch_people(conn, show_inactive=show_inactive)
    return {"results": family_choices(people)}
