"""Calendar arithmetic on date-only values."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Iterator

from ..errors import ValidationError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = date | datetime | str


def parse_date(value: DateLike, field: str = "date") -> date:
    """Coerce ``value`` to a calendar date.

    Datetimes are truncated to their calendar date; strings must be ``YYYY-MM-DD``.
    Anything else raises :class:`ValidationError` naming ``field``.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _ISO_DATE.match(text):
            try:
                return date.fromisoformat(text)
            except ValueError:
                pass
        raise ValidationError(field, f"expected a YYYY-MM-DD date, got {value!r}")
    raise ValidationError(field, f"expected a date, got {type(value).__name__}")


def day_difference(a: DateLike, b: DateLike) -> int:
    """Whole calendar days from ``a`` to ``b``; positive when ``b`` is later."""

    return (parse_date(b, "b") - parse_date(a, "a")).days


def iso_date(d: DateLike) -> str:
    """Format using the value's own calendar fields (no UTC shift)."""

    return parse_date(d).isoformat()


def day_of_week(d: DateLike) -> int:
    """0=Sunday .. 6=Saturday."""

    return (parse_date(d).weekday() + 1) % 7


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every calendar date from ``start`` to ``end`` inclusive."""

    cursor = start
    while cursor <= end:
        yield cursor
        cursor += timedelta(days=1)


__all__ = ["DateLike", "day_difference", "day_of_week", "iso_date", "iter_dates", "parse_date"]
