"""Search and sort for the flat people list."""

from __future__ import annotations

from datetime import date
from functools import cmp_to_key
from typing import Any, Callable, Literal, Sequence

try:
    from .dates import calculate_age, parse_date
    from .people import Person
except ImportError:  # pragma: no cover
    from dates import calculate_age, parse_date
    from people import Person

SortKey = Literal["fullName", "nickName", "birthDate", "age", "gender"]
SortOrder = Literal["asc", "desc"]


def search_people(people: Sequence[Person], term: str | None) -> list[Person]:
    """Case-insensitive match on full name or nickname; plain substring on birth date."""

    if not term:
        return list(people)
    needle = term.casefold()

    def _hit(p: Person) -> bool:
        if needle in p.full_name.casefold():
            return True
        if p.nick_name and needle in p.nick_name.casefold():
            return True
        return bool(p.birth_date and term in p.birth_date)

    return [p for p in people if _hit(p)]


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def _missing_last(get: Callable[[Person], Any]) -> Callable[[Person, Person], int]:
    def _compare(a: Person, b: Person) -> int:
        va, vb = get(a), get(b)
        if va is None and vb is None:
            return 0
        if va is None:
            return 1
        if vb is None:
            return -1
        return _cmp(va, vb)

    return _compare


def _comparator(sort_by: str, today: date | None) -> Callable[[Person, Person], int]:
    if sort_by == "fullName":
        return lambda a, b: _cmp(a.full_name.casefold(), b.full_name.casefold())
    if sort_by == "nickName":
        return _missing_last(lambda p: p.nick_name.casefold() if p.nick_name else None)
    if sort_by == "birthDate":
        return _missing_last(lambda p: parse_date(p.birth_date))
    if sort_by == "age":
        # Youngest first when ascending.
        return _missing_last(lambda p: calculate_age(p.birth_date, today=today))
    if sort_by == "gender":
        return _missing_last(lambda p: p.gender)
    raise ValueError(f"unknown sort key: {sort_by}")


def sort_people(
    people: Sequence[Person],
    sort_by: SortKey = "fullName",
    order: SortOrder = "asc",
    *,
    today: date | None = None,
) -> list[Person]:
    """Sort for the list view. Descending negates the whole comparison,
    so records missing the sort field move from the end to the front."""

    compare = _comparator(sort_by, today)
    if order == "desc":
        return sorted(people, key=cmp_to_key(lambda a, b: -compare(a, b)))
    return sorted(people, key=cmp_to_key(compare))
