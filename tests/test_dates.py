from __future__ import annotations

from datetime import date

from famtree.dates import calculate_age, format_date, parse_date, to_input_date


def test_parse_accepts_sheet_formats() -> None:
    assert parse_date("1989-08-29") == date(1989, 8, 29)
    assert parse_date("1989-08-29T00:00:00.000Z") == date(1989, 8, 29)
    assert parse_date("29-08-1989") == date(1989, 8, 29)
    assert parse_date("29/08/1989") == date(1989, 8, 29)
    assert parse_date(date(2000, 1, 2)) == date(2000, 1, 2)


def test_parse_rejects_junk() -> None:
    assert parse_date(None) is None
    assert parse_date("") is None
    assert parse_date("sometime in 1950") is None
    assert parse_date("1950-02-30") is None


def test_format_and_input_forms() -> None:
    assert format_date("1940-03-15") == "15-03-1940"
    assert format_date("nope") == ""
    assert to_input_date("15/03/1940") == "1940-03-15"
    assert to_input_date(None) == ""


def test_age_counts_whole_years(fixed_today: date) -> None:
    assert calculate_age("1940-03-15", today=fixed_today) == 85
    assert calculate_age("1940-01-20", today=fixed_today) == 86
    assert calculate_age("2000-02-29", today=date(2026, 2, 28)) == 26
    assert calculate_age(None, today=fixed_today) is None
