"""Operations over the user's habit list.

Each helper returns a new list (or habit) and leaves its inputs untouched, so
callers can hand the result straight to the habit store.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Sequence

from ..models.habit import (
    MAX_NAME_LENGTH,
    Habit,
    HabitTheme,
    ImportedHabitData,
    coerce_theme,
    validate_habit_name,
)
from .calendar import DateLike, day_key, parse_day_key

logger = logging.getLogger(__name__)


class HabitNotFoundError(LookupError):
    """Raised when a habit id or name does not match any stored habit."""


def _now_utc(now: datetime | None) -> datetime:
    return (now or datetime.now(timezone.utc)).astimezone(timezone.utc)


def _new_id(habits: Sequence[Habit], moment: datetime) -> str:
    taken = {h.id for h in habits}
    candidate = int(moment.timestamp() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_habit(
    habits: Sequence[Habit],
    name: str,
    theme: HabitTheme | str = HabitTheme.BLUE,
    *,
    now: datetime | None = None,
) -> list[Habit]:
    """Append a new habit with an empty completion map and the next display order."""

    moment = _now_utc(now)
    habit = Habit(
        id=_new_id(habits, moment),
        name=validate_habit_name(name),
        theme=coerce_theme(theme),
        created_at=_iso(moment),
        completions={},
        order=len(habits),
    )
    logger.info("Created habit %r", habit.name, extra={"habit_id": habit.id})
    return [*habits, habit]


def habit_from_import(
    habits: Sequence[Habit], data: ImportedHabitData, *, now: datetime | None = None
) -> list[Habit]:
    """Persist-shape an imported payload as a new habit at the end of the list."""

    name = (data.name or "").strip() or "Imported Habit"
    if len(name) > MAX_NAME_LENGTH:
        name = name[:MAX_NAME_LENGTH].rstrip()
    updated = create_habit(habits, name, data.theme, now=now)
    imported = replace(updated[-1], completions=dict(data.completions))
    return [*updated[:-1], imported]


def find_habit(habits: Sequence[Habit], ref: str) -> Habit:
    """Look a habit up by id, falling back to a case-insensitive name match."""

    for habit in habits:
        if habit.id == ref:
            return habit
    wanted = ref.strip().casefold()
    for habit in habits:
        if habit.name.casefold() == wanted:
            return habit
    raise HabitNotFoundError(f"No habit matches {ref!r}")


def update_habit(habits: Sequence[Habit], habit: Habit) -> list[Habit]:
    if not any(h.id == habit.id for h in habits):
        raise HabitNotFoundError(f"No habit with id {habit.id!r}")
    return [habit if h.id == habit.id else h for h in habits]


def delete_habit(habits: Sequence[Habit], habit_id: str) -> list[Habit]:
    remaining = [h for h in habits if h.id != habit_id]
    if len(remaining) == len(habits):
        raise HabitNotFoundError(f"No habit with id {habit_id!r}")
    return remaining


def toggle_completion(habits: Sequence[Habit], habit_id: str, day: DateLike | str) -> list[Habit]:
    """Flip the completion flag of one habit for one day.

    Unmarking removes the key so the map stays sparse.
    """

    key = day_key(parse_day_key(day)) if isinstance(day, str) else day_key(day)
    target = find_habit(habits, habit_id)
    completions = dict(target.completions)
    if completions.get(key):
        completions.pop(key)
    else:
        completions[key] = True
    return update_habit(habits, replace(target, completions=completions))


def reorder_habits(habits: Sequence[Habit], start_index: int, end_index: int) -> list[Habit]:
    """Move the habit at ``start_index`` to ``end_index`` and renumber display order."""

    if not 0 <= start_index < len(habits):
        raise IndexError(f"start_index {start_index} out of range")
    if not 0 <= end_index < len(habits):
        raise IndexError(f"end_index {end_index} out of range")

    result = list(habits)
    moved = result.pop(start_index)
    result.insert(end_index, moved)
    return [replace(habit, order=index) for index, habit in enumerate(result)]


def sorted_by_order(habits: Sequence[Habit]) -> list[Habit]:
    return sorted(habits, key=lambda h: h.order)


__all__ = [
    "HabitNotFoundError",
    "create_habit",
    "delete_habit",
    "find_habit",
    "habit_from_import",
    "reorder_habits",
    "sorted_by_order",
    "toggle_completion",
    "update_habit",
]
