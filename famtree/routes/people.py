"""People CRUD routes (the list view and the member detail form)."""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

try:
    from ..db import db_conn
    from ..listing import search_people, sort_people
    from ..records import (
        PersonConflict,
        PersonNotFound,
        create_person,
        delete_person,
        fetch_people,
        get_person,
        toggle_status,
        update_person,
    )
    from ..serialize import _person_to_public
except ImportError:  # pragma: no cover
    from db import db_conn
    from listing import search_people, sort_people
    from records import (
        PersonConflict,
        PersonNotFound,
        create_person,
        delete_person,
        fetch_people,
        get_person,
        toggle_status,
        update_person,
    )
    from serialize import _person_to_public

router = APIRouter(prefix="/people", tags=["people"])

Ref = Optional[Union[str, int]]
Gender = Optional[Literal["male", "female", "other"]]


class PersonCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Ref = None
    full_name: str = Field(alias="fullName", min_length=1)
    nick_name: Optional[str] = Field(default=None, alias="nickName")
    gender: Gender = None
    parent_id: Ref = Field(default=None, alias="parentId")
    spouse_id: Ref = Field(default=None, alias="spouseId")
    birth_date: Optional[str] = Field(default=None, alias="birthDate")
    bio: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoUrl")
    status: Optional[Literal["active", "inactive"]] = None


class PersonUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: Optional[str] = Field(default=None, alias="fullName", min_length=1)
    nick_name: Optional[str] = Field(default=None, alias="nickName")
    gender: Gender = None
    parent_id: Ref = Field(default=None, alias="parentId")
    spouse_id: Ref = Field(default=None, alias="spouseId")
    birth_date: Optional[str] = Field(default=None, alias="birthDate")
    bio: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoUrl")
    edited_by: Optional[str] = Field(default=None, alias="editedBy")


def _not_found(e: PersonNotFound) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


def _conflict(e: PersonConflict) -> HTTPException:
    return HTTPException(status_code=409, detail=str(e))


@router.get("")
def list_people(
    show_inactive: bool = False,
    q: Optional[str] = None,
    sort_by: Literal["fullName", "nickName", "birthDate", "age", "gender"] = "fullName",
    order: Literal["asc", "desc"] = "asc",
) -> dict[str, Any]:
    """List view: active records (or only inactive ones), searched and sorted."""

    with db_conn() as conn:
        people = fetch_people(conn, show_inactive=show_inactive)

    people = sort_people(search_people(people, q), sort_by, order)
    return {
        "results": [_person_to_public(p) for p in people],
        "total": len(people),
    }


@router.get("/{person_id}")
def read_person(person_id: str) -> dict[str, Any]:
    with db_conn() as conn:
        try:
            p = get_person(conn, person_id)
        except PersonNotFound as e:
            raise _not_found(e) from e
    return _person_to_public(p)


@router.get("/{person_id}/history")
def read_history(person_id: str) -> dict[str, Any]:
    with db_conn() as conn:
        try:
            p = get_person(conn, person_id)
        except PersonNotFound as e:
            raise _not_found(e) from e
    return {"id": p.id, "history": [h.to_record() for h in p.history]}


@router.post("", status_code=201)
def add_person(body: PersonCreate) -> dict[str, Any]:
    with db_conn() as conn:
        try:
            p = create_person(conn, body.model_dump(by_alias=True, exclude_none=True))
        except PersonConflict as e:
            raise _conflict(e) from e
        conn.commit()
    return {"status": "success", "person": _person_to_public(p)}


@router.patch("/{person_id}")
def edit_person(person_id: str, body: PersonUpdate) -> dict[str, Any]:
    """Partial update. Fields sent as null are cleared; fields left out are kept.

    Inactive records answer 409 until their status is toggled back.
    """

    changes = body.model_dump(by_alias=True, exclude_unset=True)
    edited_by = changes.pop("editedBy", None)

    with db_conn() as conn:
        try:
            p = update_person(conn, person_id, changes, edited_by=edited_by)
        except PersonNotFound as e:
            raise _not_found(e) from e
        except PersonConflict as e:
            raise _conflict(e) from e
        conn.commit()
    return {"status": "success", "person": _person_to_public(p)}


@router.post("/{person_id}/toggle-status")
def flip_status(person_id: str) -> dict[str, Any]:
    with db_conn() as conn:
        try:
            p = toggle_status(conn, person_id)
        except PersonNotFound as e:
            raise _not_found(e) from e
        conn.commit()
    return {"status": "success", "id": p.id, "personStatus": p.status}


@router.delete("/{person_id}")
def remove_person(person_id: str) -> dict[str, Any]:
    """Delete a record; its children inherit the deleted record's parent."""

    with db_conn() as conn:
        try:
            moved = delete_person(conn, person_id)
        except PersonNotFound as e:
            raise _not_found(e) from e
        conn.commit()
    return {"status": "success", "reparented": moved}
