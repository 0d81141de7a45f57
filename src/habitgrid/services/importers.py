"""Import orchestration for pasted habit data.

Two entry points accept arbitrary pasted text: :func:`import_from_csv_text`
and :func:`import_from_json_text`. Each tries its decoders in a fixed order
and the first one that yields at least one completed day wins. When none
does, a synthetic sample history is substituted and the outcome says so.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from ..models.habit import HabitTheme, ImportedHabitData, coerce_theme
from .calendar import DateLike, current_date, day_key, parse_day_key, past_weeks
from .export_csv import ALL_HABITS_MARKER, ALL_HABITS_TYPE, HABIT_MARKER, SINGLE_HABIT_TYPE
from .import_csv import TRUTHY_CELLS, find_habit_name, parse_completion_rows

logger = logging.getLogger(__name__)

DEFAULT_HABIT_NAME = "Imported Habit"
EMPTY_INPUT_MESSAGE = "No data found in clipboard. Please copy data first."
FALLBACK_MESSAGE = "Could not read any completions from the pasted data; sample data was used instead."
FOREIGN_COMPLETION_PATHS = (("completions",), ("data", "completions"), ("habit", "completions"))


class ImportStatus(str, Enum):
    """How an import attempt ended."""

    IMPORTED = "imported"
    IMPORTED_WITH_FALLBACK = "imported_with_fallback"
    FAILED = "failed"


@dataclass
class ImportOutcome:
    """Result of an import attempt."""

    status: ImportStatus
    data: Optional[ImportedHabitData]
    strategy: Optional[str] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is not ImportStatus.FAILED

    @property
    def used_fallback(self) -> bool:
        return self.status is ImportStatus.IMPORTED_WITH_FALLBACK


@dataclass
class _Decoded:
    name: Optional[str] = None
    theme: Optional[HabitTheme] = None
    completions: dict[str, bool] = field(default_factory=dict)

    @property
    def has_completions(self) -> bool:
        return any(self.completions.values())


Strategy = Callable[[str], Optional[_Decoded]]


def _as_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in TRUTHY_CELLS


def _clean_completions(raw: Any) -> Optional[dict[str, bool]]:
    """Copy a decoded completion map, keeping only canonical day keys."""

    if not isinstance(raw, Mapping):
        return None
    cleaned: dict[str, bool] = {}
    for key, value in raw.items():
        try:
            parse_day_key(key)
        except ValueError:
            logger.debug("Dropping malformed completion key %r", key)
            continue
        cleaned[key] = _as_flag(value)
    return cleaned


def _known_theme(value: Any) -> Optional[HabitTheme]:
    if isinstance(value, str) and value.strip().lower() in {t.value for t in HabitTheme}:
        return HabitTheme(value.strip().lower())
    return None


def _from_record(record: Any) -> Optional[_Decoded]:
    if not isinstance(record, Mapping):
        return None
    name = record.get("name")
    completions = _clean_completions(record.get("completions"))
    return _Decoded(
        name=name if isinstance(name, str) and name.strip() else None,
        theme=_known_theme(record.get("theme")),
        completions=completions or {},
    )


def _marker_json(text: str, marker: str) -> Any:
    """Decode the JSON that follows ``marker`` up to the next blank line.

    Returns None when the marker is absent or unterminated; JSON errors
    propagate to the caller.
    """

    start = text.find(marker)
    if start == -1:
        return None
    start += len(marker)
    end = text.find("\n\n", start)
    if end <= start:
        return None
    return json.loads(text[start:end])


def _single_marker(text: str) -> Optional[_Decoded]:
    try:
        payload = _marker_json(text, HABIT_MARKER)
    except ValueError as exc:
        logger.debug("Embedded single-habit JSON did not parse: %s", exc)
        return None
    return _from_record(payload) if payload is not None else None


def _all_marker(text: str) -> Optional[_Decoded]:
    try:
        payload = _marker_json(text, ALL_HABITS_MARKER)
    except ValueError as exc:
        logger.debug("Embedded all-habits JSON did not parse: %s", exc)
        return None
    if not isinstance(payload, list) or not payload:
        return None
    if len(payload) > 1:
        logger.info("Payload holds %d habits; importing the first only", len(payload))
    return _from_record(payload[0])


def _lookup(payload: Mapping[str, Any], path: tuple[str, ...]) -> Any:
    node: Any = payload
    for part in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(part)
    return node


def _whole_json(text: str) -> Optional[_Decoded]:
    try:
        payload = json.loads(text)
    except ValueError as exc:
        logger.debug("Pasted text is not a JSON document: %s", exc)
        return None

    if isinstance(payload, list):
        return _from_record(payload[0]) if payload else None
    if not isinstance(payload, Mapping):
        return None

    kind = payload.get("type")
    if kind == SINGLE_HABIT_TYPE:
        return _from_record(payload)
    if kind == ALL_HABITS_TYPE:
        habits = payload.get("habits")
        if isinstance(habits, list) and habits:
            if len(habits) > 1:
                logger.info("Payload holds %d habits; importing the first only", len(habits))
            return _from_record(habits[0])
        return None

    # Foreign shape: look for a completion map in the usual places.
    decoded = _from_record({"name": payload.get("name"), "theme": payload.get("theme")})
    for path in FOREIGN_COMPLETION_PATHS:
        completions = _clean_completions(_lookup(payload, path))
        if completions is not None:
            decoded.completions = completions
            break
    return decoded


def _csv_grid(today: DateLike | None) -> Strategy:
    def _decode(text: str) -> Optional[_Decoded]:
        if "," not in text:
            return None
        return _Decoded(
            name=find_habit_name(text),
            completions=parse_completion_rows(text, today=today),
        )

    return _decode


def sample_completions(*, today: DateLike | None = None) -> dict[str, bool]:
    """Synthetic history over the 104-week display window.

    Even-indexed weeks mark Sunday, Tuesday, Thursday and Saturday; odd-indexed
    weeks mark Monday, Wednesday and Friday. Yesterday, today and tomorrow are
    always marked so the substitution is easy to spot.
    """

    today_date = current_date(today)
    completions: dict[str, bool] = {}
    for week_index, week in enumerate(past_weeks(today=today_date)):
        pattern = (0, 2, 4, 6) if week_index % 2 == 0 else (1, 3, 5)
        for day_index in pattern:
            completions[day_key(week[day_index])] = True

    for offset in (-1, 0, 1):
        completions[day_key(today_date + timedelta(days=offset))] = True
    return completions


def _run(
    text: Optional[str],
    strategies: list[tuple[str, Strategy]],
    *,
    theme: HabitTheme | str,
    today: DateLike | None,
) -> ImportOutcome:
    if text is None or not text.strip():
        logger.warning("Import requested with empty input")
        return ImportOutcome(status=ImportStatus.FAILED, data=None, message=EMPTY_INPUT_MESSAGE)

    text = text.replace("\r\n", "\n")
    default_theme = coerce_theme(theme)
    hint: Optional[_Decoded] = None

    for label, strategy in strategies:
        decoded = strategy(text)
        if decoded is None:
            continue
        if decoded.has_completions:
            data = ImportedHabitData(
                name=decoded.name or DEFAULT_HABIT_NAME,
                theme=decoded.theme or default_theme,
                completions=decoded.completions,
            )
            logger.info(
                "Imported %d completions for %r",
                data.completed_days,
                data.name,
                extra={"strategy": label},
            )
            return ImportOutcome(
                status=ImportStatus.IMPORTED,
                data=data,
                strategy=label,
                message=f"Imported {data.completed_days} completed days for {data.name!r}.",
            )
        if hint is None and decoded.name:
            hint = decoded

    logger.warning("No completions found in pasted data; substituting sample data")
    data = ImportedHabitData(
        name=(hint.name if hint else None) or DEFAULT_HABIT_NAME,
        theme=(hint.theme if hint else None) or default_theme,
        completions=sample_completions(today=today),
    )
    return ImportOutcome(
        status=ImportStatus.IMPORTED_WITH_FALLBACK,
        data=data,
        strategy="sample",
        message=FALLBACK_MESSAGE,
    )


def import_from_csv_text(
    text: Optional[str],
    *,
    theme: HabitTheme | str = HabitTheme.BLUE,
    today: DateLike | None = None,
) -> ImportOutcome:
    """Decode CSV-oriented pasted text (embedded JSON markers are preferred)."""

    strategies: list[tuple[str, Strategy]] = [
        ("habit_marker", _single_marker),
        ("all_habits_marker", _all_marker),
        ("csv_grid", _csv_grid(today)),
    ]
    return _run(text, strategies, theme=theme, today=today)


def import_from_json_text(
    text: Optional[str],
    *,
    theme: HabitTheme | str = HabitTheme.BLUE,
    today: DateLike | None = None,
) -> ImportOutcome:
    """Decode JSON-oriented pasted text: markers first, then the whole text as JSON."""

    strategies: list[tuple[str, Strategy]] = [
        ("habit_marker", _single_marker),
        ("all_habits_marker", _all_marker),
        ("json_document", _whole_json),
    ]
    return _run(text, strategies, theme=theme, today=today)


__all__ = [
    "DEFAULT_HABIT_NAME",
    "EMPTY_INPUT_MESSAGE",
    "FALLBACK_MESSAGE",
    "ImportOutcome",
    "ImportStatus",
    "import_from_csv_text",
    "import_from_json_text",
    "sample_completions",
]
