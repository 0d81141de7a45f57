"""Habit analytics: streaks and completion rates derived from a completion map."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

from ..models.habit import Habit
from .calendar import DateLike, current_date, day_index, day_key, parse_day_key, sunday_of

logger = logging.getLogger(__name__)

CompletionMap = Mapping[str, bool]


def _percent(part: int, whole: int) -> int:
    """Whole-number percentage, halves rounded up."""

    if whole <= 0:
        return 0
    value = Decimal(part * 100) / Decimal(whole)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _completed_dates(completions: CompletionMap) -> list[date]:
    days: list[date] = []
    for key, done in completions.items():
        if not done:
            continue
        try:
            days.append(parse_day_key(key))
        except ValueError:
            logger.debug("Ignoring malformed completion key %r", key)
    return sorted(days)


def current_streak(completions: CompletionMap, *, today: DateLike | None = None) -> int:
    """Length of the completed run ending today, or yesterday when today is still open."""

    cursor = current_date(today)
    if not completions.get(day_key(cursor)):
        cursor -= timedelta(days=1)

    streak = 0
    while completions.get(day_key(cursor)):
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_streak(completions: CompletionMap) -> int:
    """Longest run of consecutive completed days anywhere in the history."""

    days = _completed_dates(completions)
    if not days:
        return 0
    if len(days) == 1:
        return 1

    longest = 0
    run = 1
    for previous, current in zip(days, days[1:]):
        if current == previous + timedelta(days=1):
            run += 1
        else:
            longest = max(longest, run)
            run = 1
    return max(longest, run)


def compute_streaks(completions: CompletionMap, *, today: DateLike | None = None) -> tuple[int, int]:
    """Return (current_streak, longest_streak) for a completion map."""

    return current_streak(completions, today=today), longest_streak(completions)


def weekly_completion_rate(completions: CompletionMap, *, today: DateLike | None = None) -> int:
    """Percentage of this week's elapsed days (Sunday through today) that were completed."""

    today_date = current_date(today)
    start = sunday_of(today_date)
    elapsed = day_index(today_date) + 1
    completed = sum(
        1 for offset in range(elapsed) if completions.get(day_key(start + timedelta(days=offset)))
    )
    return _percent(completed, elapsed)


def _parse_created_at(value: str) -> date:
    created = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    return current_date(created)


def overall_completion_rate(habit: Habit, *, today: DateLike | None = None) -> int:
    """Completed days over days elapsed since creation (both ends inclusive)."""

    try:
        created_on = _parse_created_at(habit.created_at)
    except (AttributeError, TypeError, ValueError):
        logger.warning(
            "Invalid creation date for habit %r",
            habit.name,
            extra={"habit_id": habit.id, "created_at": habit.created_at},
        )
        return 0

    elapsed = max(1, (current_date(today) - created_on).days + 1)
    completed = sum(1 for done in habit.completions.values() if done)
    if completed > elapsed:
        logger.warning(
            "Habit %r has more completions than elapsed days; clamping",
            habit.name,
            extra={"habit_id": habit.id, "completed": completed, "elapsed_days": elapsed},
        )
        completed = elapsed

    return min(100, max(0, _percent(completed, elapsed)))


@dataclass(slots=True)
class HabitStats:
    """Display figures for the analytics view."""

    habit_id: str
    name: str
    current_streak: int
    longest_streak: int
    weekly_rate: int
    overall_rate: int


def habit_stats(habit: Habit, *, today: DateLike | None = None) -> HabitStats:
    today_date = current_date(today)
    current, longest = compute_streaks(habit.completions, today=today_date)
    return HabitStats(
        habit_id=habit.id,
        name=habit.name,
        current_streak=current,
        longest_streak=longest,
        weekly_rate=weekly_completion_rate(habit.completions, today=today_date),
        overall_rate=overall_completion_rate(habit, today=today_date),
    )


__all__ = [
    "HabitStats",
    "compute_streaks",
    "current_streak",
    "habit_stats",
    "longest_streak",
    "overall_completion_rate",
    "weekly_completion_rate",
]
