"""Record store: the ``person`` table behind a small CRUD facade.

Each function takes an open psycopg connection and leaves committing to the
caller (the route handler). Rows are normalized through :class:`Person` on the
way out, so numeric ids or blank cells never reach the tree builder.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

import psycopg
from psycopg.errors import UniqueViolation
from psycopg.types.json import Jsonb

try:
    from .people import TRACKED_FIELDS, EditHistory, Person, normalize_ref
except ImportError:  # pragma: no cover
    from people import TRACKED_FIELDS, EditHistory, Person, normalize_ref

log = logging.getLogger(__name__)

# (column, record key) in table order.
_COLUMNS: tuple[tuple[str, str], ...] = (
    ("id", "id"),
    ("parent_id", "parentId"),
    ("spouse_id", "spouseId"),
    ("full_name", "fullName"),
    ("nick_name", "nickName"),
    ("gender", "gender"),
    ("birth_date", "birthDate"),
    ("bio", "bio"),
    ("photo_url", "photoUrl"),
    ("status", "status"),
    ("history", "history"),
)

_SELECT_COLUMNS = ", ".join(col for col, _key in _COLUMNS)
_WRITE_COLUMNS = ", ".join(col for col, _key in _COLUMNS[1:])
_WRITE_PLACEHOLDERS = ", ".join("%s" for _ in _COLUMNS[1:])


class PersonNotFound(LookupError):
    def __init__(self, person_id: str) -> None:
        super().__init__(f"person not found: {person_id}")
        self.person_id = person_id


class PersonConflict(Exception):
    def __init__(self, person_id: str, message: str) -> None:
        super().__init__(message)
        self.person_id = person_id


class PersonExists(PersonConflict):
    def __init__(self, person_id: str) -> None:
        super().__init__(person_id, f"person already exists: {person_id}")


class PersonInactive(PersonConflict):
    def __init__(self, person_id: str) -> None:
        super().__init__(person_id, f"person is inactive: {person_id}")


def _row_to_person(r: tuple[Any, ...]) -> Person:
    return Person.from_record({key: value for (_col, key), value in zip(_COLUMNS, tuple(r))})


def _person_params(p: Person) -> tuple[Any, ...]:
    return (
        p.parent_id,
        p.spouse_id,
        p.full_name,
        p.nick_name,
        p.gender,
        p.birth_date,
        p.bio,
        p.photo_url,
        p.status,
        Jsonb([h.to_record() for h in p.history]),
    )


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def fetch_people(conn: psycopg.Connection, *, show_inactive: bool = False) -> list[Person]:
    """All records of one status, in sheet (insertion) order.

    Active records by default; with ``show_inactive`` only the inactive ones.
    """

    rows = conn.execute(
        f"""
        SELECT {_SELECT_COLUMNS}
        FROM person
        ORDER BY row_no
        """.strip()
    ).fetchall()

    out: list[Person] = []
    for r in rows:
        try:
            p = _row_to_person(r)
        except ValueError:
            log.warning("skipping person row without id: %r", r)
            continue
        if p.is_active != show_inactive:
            out.append(p)
    return out


def get_person(conn: psycopg.Connection, person_id: str) -> Person:
    row = conn.execute(
        f"""
        SELECT {_SELECT_COLUMNS}
        FROM person
        WHERE id = %s
        """.strip(),
        (person_id,),
    ).fetchone()
    if not row:
        raise PersonNotFound(person_id)
    return _row_to_person(row)


def _next_id(conn: psycopg.Connection) -> str:
    highest = 0
    for (pid,) in conn.execute("SELECT id FROM person").fetchall():
        ref = normalize_ref(pid)
        if ref is not None and ref.isdigit():
            highest = max(highest, int(ref))
    return str(highest + 1)


def create_person(conn: psycopg.Connection, data: dict[str, Any]) -> Person:
    """Insert a record. Ids run sequentially unless the caller brings one.

    Raises :class:`PersonExists` when the id is already taken.
    """

    rec = dict(data)
    rec["id"] = normalize_ref(rec.get("id")) or _next_id(conn)
    rec["status"] = rec.get("status") or "active"
    rec["history"] = []
    p = Person.from_record(rec)

    try:
        conn.execute(
            f"""
            INSERT INTO person (id, {_WRITE_COLUMNS})
            VALUES (%s, {_WRITE_PLACEHOLDERS})
            """.strip(),
            (p.id, *_person_params(p)),
        )
    except UniqueViolation as e:
        log.warning("refusing duplicate person id %s", p.id)
        raise PersonExists(p.id) from e
    log.info("created person %s", p.id)
    return p


def _write_person(conn: psycopg.Connection, p: Person) -> None:
    conn.execute(
        f"""
        UPDATE person
        SET ({_WRITE_COLUMNS}) = ({_WRITE_PLACEHOLDERS})
        WHERE id = %s
        """.strip(),
        (*_person_params(p), p.id),
    )


def _history_entries(
    before: Person,
    after: Person,
    *,
    timestamp: str,
    edited_by: str | None,
) -> list[EditHistory]:
    entries: list[EditHistory] = []
    for key in TRACKED_FIELDS:
        old, new = before.record_value(key), after.record_value(key)
        if old == new:
            continue
        entries.append(
            EditHistory(
                timestamp=timestamp,
                field=key,
                old_value=old or "",
                new_value=new or "",
                edited_by=edited_by,
            )
        )
    return entries


def update_person(
    conn: psycopg.Connection,
    person_id: str,
    changes: dict[str, Any],
    *,
    edited_by: str | None = None,
    timestamp: str | None = None,
) -> Person:
    """Apply the fields present in ``changes`` and log each tracked edit.

    A ``None`` value clears the field. Inactive records are read-only until
    reactivated (:class:`PersonInactive`).
    """

    before = get_person(conn, person_id)
    if before.status == "inactive":
        raise PersonInactive(person_id)
    after = before.with_record_values(changes)

    entries = _history_entries(before, after, timestamp=timestamp or _now_iso(), edited_by=edited_by)
    if not entries and after.status == before.status:
        return before

    after = replace(after, history=before.history + tuple(entries))
    _write_person(conn, after)
    log.info("updated person %s (%d field(s))", person_id, len(entries))
    return after


def toggle_status(conn: psycopg.Connection, person_id: str) -> Person:
    p = get_person(conn, person_id)
    status = "active" if p.status == "inactive" else "inactive"
    updated = replace(p, status=status)
    _write_person(conn, updated)
    log.info("person %s is now %s", person_id, status)
    return updated


def delete_person(conn: psycopg.Connection, person_id: str) -> int:
    """Delete a record; its children move up to the deleted person's own parent.

    Returns the number of re-parented children. Spouse references to the deleted
    id are left as they are (the tree builder ignores dangling spouses).
    """

    p = get_person(conn, person_id)

    cur = conn.execute(
        "UPDATE person SET parent_id = %s WHERE parent_id = %s",
        (p.parent_id, person_id),
    )
    moved = max(cur.rowcount or 0, 0)

    conn.execute("DELETE FROM person WHERE id = %s", (person_id,))
    log.info("deleted person %s, re-parented %d child(ren) to %s", person_id, moved, p.parent_id)
    return moved
