from __future__ import annotations

from datetime import date, datetime
import re

_ISO_DATE_RE = re.compile(r"^(?P<y>\d{4})-(?P<m>\d{2})-(?P<d>\d{2})(?:[T ].*)?$")
# Day-first dates, common in spreadsheets filled in by hand.
_DMY_RE = re.compile(r"^(?P<d>\d{1,2})[-/](?P<m>\d{1,2})[-/](?P<y>\d{4})$")


def _add_years(d: date, years: int) -> date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        # Handle Feb 29 -> Feb 28 in non-leap years.
        return d.replace(month=2, day=28, year=d.year + years)


def parse_date(value: str | date | None) -> date | None:
    """Parse a birth date cell. Returns None for anything unrecognised."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    s = str(value).strip()
    if not s:
        return None

    m = _ISO_DATE_RE.match(s) or _DMY_RE.match(s)
    if not m:
        return None
    try:
        return date(int(m.group("y")), int(m.group("m")), int(m.group("d")))
    except ValueError:
        return None


def format_date(value: str | date | None) -> str:
    """Display form, ``dd-MM-yyyy``."""
    d = parse_date(value)
    if d is None:
        return ""
    return f"{d.day:02d}-{d.month:02d}-{d.year:04d}"


def to_input_date(value: str | date | None) -> str:
    """Form-input form, ``YYYY-MM-DD``."""
    d = parse_date(value)
    if d is None:
        return ""
    return d.isoformat()


def calculate_age(value: str | date | None, *, today: date | None = None) -> int | None:
    birth = parse_date(value)
    if birth is None:
        return None
    t = today or date.today()
    age = t.year - birth.year
    if t < _add_years(birth, age):
        age -= 1
    return age
