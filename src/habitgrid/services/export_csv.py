"""CSV and JSON export helpers for habit completion history."""

from __future__ import annotations

import csv
import io
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from ..models.habit import Habit, coerce_theme
from .calendar import EXPORT_WEEKS, DateLike, current_date, day_key, week_label, window

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Week", "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
HABIT_MARKER = "HABIT_JSON_DATA:"
ALL_HABITS_MARKER = "ALL_HABITS_JSON_DATA:"
SINGLE_HABIT_TYPE = "single_habit"
ALL_HABITS_TYPE = "all_habits"


class NoHabitsError(ValueError):
    """Raised when a collection export is requested for an empty habit list."""


def _habit_record(habit: Habit) -> dict[str, Any]:
    return {
        "name": habit.name,
        "theme": coerce_theme(habit.theme).value,
        "completions": dict(habit.completions),
    }


def _compact(payload: Any) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def _export_date(now: datetime | None) -> str:
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_habit_csv(
    habit: Habit, *, today: DateLike | None = None, num_weeks: int = EXPORT_WEEKS
) -> str:
    """Render one habit as a week-per-row CSV grid.

    Rows run oldest first so the final row is the current week. The first
    cell is always a quoted ``D MMM - D MMM`` label and the remaining seven
    cells are ``0``/``1`` flags for Sunday through Saturday.
    """

    buffer = io.StringIO()
    header_writer = csv.writer(buffer, lineterminator="\n")
    header_writer.writerow(CSV_HEADERS)

    row_writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_NONNUMERIC)
    for week in reversed(window(current_date(today), num_weeks)):
        flags = [1 if habit.completions.get(day_key(day)) else 0 for day in week]
        row_writer.writerow([week_label(week), *flags])

    return buffer.getvalue()


def export_habit_payload(habit: Habit, *, today: DateLike | None = None) -> str:
    """Marker-prefixed compact JSON followed by the human-readable CSV grid."""

    payload = f"{HABIT_MARKER}{_compact(_habit_record(habit))}\n\n{build_habit_csv(habit, today=today)}"
    logger.info("Exported habit %r", habit.name, extra={"habit_id": habit.id, "format": "csv"})
    return payload


def export_all_habits_payload(habits: Sequence[Habit], *, today: DateLike | None = None) -> str:
    """Collection variant: one JSON array, then a titled CSV block per habit."""

    if not habits:
        raise NoHabitsError("There are no habits to export.")

    parts = [f"{ALL_HABITS_MARKER}{_compact([_habit_record(h) for h in habits])}\n\n"]
    for habit in habits:
        parts.append(f"\n\n--- {habit.name} ---\n")
        parts.append(build_habit_csv(habit, today=today))

    logger.info("Exported %d habits", len(habits), extra={"format": "csv"})
    return "".join(parts)


def export_habit_json(habit: Habit, *, now: datetime | None = None) -> str:
    payload = {
        **_habit_record(habit),
        "exportDate": _export_date(now),
        "type": SINGLE_HABIT_TYPE,
    }
    logger.info("Exported habit %r", habit.name, extra={"habit_id": habit.id, "format": "json"})
    return json.dumps(payload, indent=2, ensure_ascii=False)


def export_all_habits_json(habits: Sequence[Habit], *, now: datetime | None = None) -> str:
    if not habits:
        raise NoHabitsError("There are no habits to export.")

    payload = {
        "habits": [_habit_record(h) for h in habits],
        "exportDate": _export_date(now),
        "type": ALL_HABITS_TYPE,
    }
    logger.info("Exported %d habits", len(habits), extra={"format": "json"})
    return json.dumps(payload, indent=2, ensure_ascii=False)


def write_export(text: str, output_path: Path) -> Path:
    """Write an export artefact to ``output_path`` and return the path written."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        fh.write(text)
    return output_path


__all__ = [
    "ALL_HABITS_MARKER",
    "ALL_HABITS_TYPE",
    "CSV_HEADERS",
    "HABIT_MARKER",
    "NoHabitsError",
    "SINGLE_HABIT_TYPE",
    "build_habit_csv",
    "export_all_habits_json",
    "export_all_habits_payload",
    "export_habit_json",
    "export_habit_payload",
    "write_export",
]
