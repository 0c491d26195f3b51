from __future__ import annotations

from datetime import date
from typing import Callable

import pytest

from famtree.people import Person


@pytest.fixture()
def fixed_today() -> date:
    # Keep tests deterministic.
    return date(2026, 1, 20)


@pytest.fixture()
def make_people() -> Callable[..., list[Person]]:
    """Build Person values from camelCase records, as the store hands them over."""

    def _make(*records: dict) -> list[Person]:
        return [Person.from_record(r) for r in records]

    return _make


@pytest.fixture()
def three_generations(make_people: Callable[..., list[Person]]) -> list[Person]:
    # 1 & 2 -> 3 (married to 4) -> 5 (married to 6) -> 7
    return make_people(
        {"id": "1", "spouseId": "2", "fullName": "Ahmad bin Sarimon", "gender": "male"},
        {"id": "2", "spouseId": "1", "fullName": "Jamilah binti Sulaiman", "gender": "female"},
        {"id": "3", "parentId": "1", "spouseId": "4", "fullName": "Hazwan", "gender": "male"},
        {"id": "4", "spouseId": "3", "fullName": "Nurul", "gender": "female"},
        {"id": "5", "parentId": "3", "spouseId": "6", "fullName": "Irfan", "gender": "male"},
        {"id": "6", "spouseId": "5", "fullName": "Sofia", "gender": "female"},
        {"id": "7", "parentId": "5", "fullName": "Adam", "gender": "male"},
    )
