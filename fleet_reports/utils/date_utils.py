"""
Date and time helpers for UTC day windows.

Notes:
- Persisted timestamps are naive datetimes in UTC.
- Aware datetimes are converted to UTC and stripped of tzinfo; naive ones
  are assumed to already be UTC.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Tuple, Union

UTC = timezone.utc

DateLike = Union[date, datetime]


def utcnow() -> datetime:
    """Return current UTC time as a naive datetime."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_utc_naive(dt: datetime) -> datetime:
    """Normalise a datetime to naive UTC."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(UTC).replace(tzinfo=None)


def as_date(value: DateLike) -> date:
    """Return the UTC calendar day of a date or datetime."""
    if isinstance(value, datetime):
        return to_utc_naive(value).date()
    return value


def start_of_day(d: date) -> datetime:
    """Midnight (naive UTC) at the start of ``d``."""
    return datetime.combine(d, time.min)


def day_window(start: DateLike, end: DateLike) -> Tuple[datetime, datetime]:
    """
    Half-open datetime window covering whole UTC days.

    Returns ``(start 00:00, day after end 00:00)``; a timestamp ``ts`` is in
    the window when ``lower <= ts < upper``.
    """
    return start_of_day(as_date(start)), start_of_day(as_date(end) + timedelta(days=1))


def daterange(start: DateLike, end: DateLike) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end`` inclusive."""
    current = as_date(start)
    last = as_date(end)
    while current <= last:
        yield current
        current += timedelta(days=1)
