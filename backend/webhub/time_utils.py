"""Helpers for working with timestamps and calendar dates."""

from __future__ import annotations

import calendar
from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Return the current time as a naive UTC datetime, as stored in the database."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def months_before(day: date, months: int) -> date:
    """Return the date ``months`` calendar months before ``day``.

    The day of month is clamped to the length of the target month, so
    ``months_before(date(2024, 8, 31), 6)`` is ``date(2024, 2, 29)``.
    """

    if months < 0:
        raise ValueError("months must not be negative")

    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))
