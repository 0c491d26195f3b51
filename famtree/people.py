"""Person record shape shared by the store, the list view and the tree builder.

Records travel as camelCase dicts (``parentId``, ``fullName`` ...), the shape the
People sheet used. Inside Python they are frozen :class:`Person` values.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any, Optional

GENDERS = ("male", "female", "other")
STATUSES = ("active", "inactive")

# Fields whose edits are recorded in a person's history, in record (camelCase) form.
TRACKED_FIELDS = (
    "fullName",
    "nickName",
    "gender",
    "birthDate",
    "bio",
    "photoUrl",
    "parentId",
    "spouseId",
)

_RECORD_TO_ATTR = {
    "id": "id",
    "parentId": "parent_id",
    "spouseId": "spouse_id",
    "fullName": "full_name",
    "nickName": "nick_name",
    "gender": "gender",
    "birthDate": "birth_date",
    "bio": "bio",
    "photoUrl": "photo_url",
    "status": "status",
}


def normalize_ref(value: Any) -> str | None:
    """Coerce an id / reference cell to a string, or None when empty.

    Spreadsheet exports hand back numbers (``3`` or ``3.0``) as often as strings.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if value != value:  # NaN
            return None
        if value.is_integer():
            return str(int(value))
        return str(value)
    s = str(value).strip()
    return s or None


def _text(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


@dataclass(frozen=True)
class EditHistory:
    timestamp: str
    field: str
    old_value: str
    new_value: str
    edited_by: Optional[str] = None

    @classmethod
    def from_record(cls, rec: dict[str, Any]) -> "EditHistory":
        return cls(
            timestamp=str(rec.get("timestamp") or ""),
            field=str(rec.get("field") or ""),
            old_value=str(rec.get("oldValue") or ""),
            new_value=str(rec.get("newValue") or ""),
            edited_by=_text(rec.get("editedBy")),
        )

    def to_record(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "timestamp": self.timestamp,
            "field": self.field,
            "oldValue": self.old_value,
            "newValue": self.new_value,
        }
        if self.edited_by:
            out["editedBy"] = self.edited_by
        return out


def _parse_history(value: Any) -> tuple[EditHistory, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return ()
    if not isinstance(value, list):
        return ()
    return tuple(EditHistory.from_record(h) for h in value if isinstance(h, dict))


@dataclass(frozen=True)
class Person:
    id: str
    full_name: str = ""
    parent_id: Optional[str] = None
    spouse_id: Optional[str] = None
    nick_name: Optional[str] = None
    gender: Optional[str] = None
    birth_date: Optional[str] = None
    bio: Optional[str] = None
    photo_url: Optional[str] = None
    status: str = "active"
    history: tuple[EditHistory, ...] = field(default=(), compare=False)

    @property
    def display_name(self) -> str:
        return self.nick_name or self.full_name

    @property
    def is_active(self) -> bool:
        return self.status != "inactive"

    @classmethod
    def from_record(cls, rec: dict[str, Any]) -> "Person":
        """Build a Person from a camelCase record, tolerating absent optional fields."""

        pid = normalize_ref(rec.get("id"))
        if pid is None:
            raise ValueError("person record has no id")

        gender = _text(rec.get("gender"))
        if gender is not None:
            gender = gender.lower()
            if gender not in GENDERS:
                gender = None

        status = (_text(rec.get("status")) or "active").lower()
        if status not in STATUSES:
            status = "active"

        return cls(
            id=pid,
            full_name=_text(rec.get("fullName")) or "",
            parent_id=normalize_ref(rec.get("parentId")),
            spouse_id=normalize_ref(rec.get("spouseId")),
            nick_name=_text(rec.get("nickName")),
            gender=gender,
            birth_date=_text(rec.get("birthDate")),
            bio=_text(rec.get("bio")),
            photo_url=_text(rec.get("photoUrl")),
            status=status,
            history=_parse_history(rec.get("history")),
        )

    def to_record(self, *, include_history: bool = True) -> dict[str, Any]:
        out: dict[str, Any] = {key: getattr(self, attr) for key, attr in _RECORD_TO_ATTR.items()}
        if include_history:
            out["history"] = [h.to_record() for h in self.history]
        return out

    def record_value(self, key: str) -> Any:
        return getattr(self, _RECORD_TO_ATTR[key])

    def with_record_values(self, changes: dict[str, Any]) -> "Person":
        """Return a copy with camelCase record fields replaced (unknown keys ignored)."""

        merged = self.to_record(include_history=False)
        for key, value in changes.items():
            if key in _RECORD_TO_ATTR and key != "id":
                merged[key] = value
        updated = Person.from_record(merged)
        return replace(updated, history=self.history)
