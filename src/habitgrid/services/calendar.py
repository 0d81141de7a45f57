"""Calendar window helpers shared by the grid views, analytics and import/export.

Every date is normalised to its *local* calendar day: aware datetimes are
converted to the local zone first and naive datetimes are taken as local.
Day keys (``YYYY-MM-DD``) are the only form used as completion-map keys.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Union

DateLike = Union[date, datetime]
Week = list[date]

WINDOW_WEEKS = 104
EXPORT_WEEKS = 52
DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
MONTH_PREFIXES = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")
_DAY_KEY_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def as_local_date(value: DateLike) -> date:
    """Reduce a date or datetime to its local calendar date."""

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def current_date(now: DateLike | None = None) -> date:
    """Return the local calendar date for ``now`` (the wall clock when omitted)."""

    return as_local_date(now if now is not None else datetime.now())


def day_key(value: DateLike) -> str:
    """Canonical ``YYYY-MM-DD`` key for a date or datetime."""

    return as_local_date(value).isoformat()


def today_key(*, now: DateLike | None = None) -> str:
    return day_key(current_date(now))


def parse_day_key(key: str) -> date:
    """Parse a canonical day key; raises ValueError for anything else."""

    if not isinstance(key, str) or not _DAY_KEY_RE.fullmatch(key):
        raise ValueError(f"Invalid day key: {key!r}")
    return date.fromisoformat(key)


def sunday_of(value: DateLike) -> date:
    day = as_local_date(value)
    # date.weekday(): Monday=0 ... Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def day_index(value: DateLike) -> int:
    """Sunday-first day-of-week index (Sunday=0 ... Saturday=6)."""

    return (as_local_date(value).weekday() + 1) % 7


def week_of(value: DateLike) -> Week:
    """Return the Sunday-through-Saturday week containing ``value``."""

    start = sunday_of(value)
    return [start + timedelta(days=offset) for offset in range(7)]


def window(anchor: DateLike, num_weeks: int) -> list[Week]:
    """Return ``num_weeks`` weeks, index 0 holding ``anchor`` and older weeks after it."""

    if num_weeks <= 0:
        return []
    start = as_local_date(anchor)
    return [week_of(start - timedelta(days=7 * i)) for i in range(num_weeks)]


def past_weeks(*, today: DateLike | None = None, num_weeks: int = WINDOW_WEEKS) -> list[Week]:
    """The rolling display window (two years by default) anchored on today."""

    return window(current_date(today), num_weeks)


def short_day_name(value: DateLike) -> str:
    return DAY_NAMES[day_index(value)]


def is_today(value: DateLike, *, today: DateLike | None = None) -> bool:
    return as_local_date(value) == current_date(today)


def format_short(value: DateLike) -> str:
    """Human label such as ``3 Mar`` used in CSV week ranges."""

    day = as_local_date(value)
    return f"{day.day} {MONTH_PREFIXES[day.month - 1].capitalize()}"


def week_label(week: Week) -> str:
    return f"{format_short(week[0])} - {format_short(week[-1])}"


__all__ = [
    "DAY_NAMES",
    "EXPORT_WEEKS",
    "MONTH_PREFIXES",
    "WINDOW_WEEKS",
    "Week",
    "as_local_date",
    "current_date",
    "day_index",
    "day_key",
    "format_short",
    "is_today",
    "parse_day_key",
    "past_weeks",
    "short_day_name",
    "sunday_of",
    "today_key",
    "week_label",
    "week_of",
    "window",
]
