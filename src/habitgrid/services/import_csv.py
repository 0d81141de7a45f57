"""Free-text CSV ingestion for week-per-row habit grids."""

from __future__ import annotations

import csv
import logging
import re
from datetime import date, timedelta
from typing import Sequence

from .calendar import MONTH_PREFIXES, DateLike, current_date, day_key

logger = logging.getLogger(__name__)

TRUTHY_CELLS = frozenset({"1", "true", "yes", "y", "x"})
MIN_ROW_CELLS = 8
_BLOCK_TITLE_RE = re.compile(r"--- (.+) ---")
_LEADING_DIGITS_RE = re.compile(r"\s*(\d+)")


def find_header(lines: Sequence[str]) -> int:
    """Index of the first line that looks like a ``Week,Sunday,...`` header, or -1."""

    for index, line in enumerate(lines):
        lowered = line.lower()
        if "week" in lowered and ("sun" in lowered or "mon" in lowered) and "," in lowered:
            return index
    return -1


def find_habit_name(text: str) -> str | None:
    """Title of the first ``--- name ---`` block in a collection export."""

    match = _BLOCK_TITLE_RE.search(text)
    return match.group(1) if match else None


def parse_week_start(cell: str, *, year: int) -> date | None:
    """Read the start date out of a ``D MMM - D MMM`` label.

    Month names match on their three-letter prefix, case-insensitively. The
    label carries no year, so ``year`` is used. Day numbers past the end of
    the month roll forward into the next month.
    """

    label = cell.replace('"', "").strip()
    if "-" not in label:
        return None

    start_part = label.split("-")[0].strip()
    if " " not in start_part:
        return None

    day_text, month_text = start_part.split(" ")[:2]
    month_index = next(
        (i for i, prefix in enumerate(MONTH_PREFIXES) if month_text.lower().startswith(prefix)),
        None,
    )
    if month_index is None:
        return None

    digits = _LEADING_DIGITS_RE.match(day_text)
    if digits is None:
        return None
    try:
        return date(year, month_index + 1, 1) + timedelta(days=int(digits.group(1)) - 1)
    except OverflowError:
        return None


def _split_cells(line: str) -> list[str]:
    return next(csv.reader([line], skipinitialspace=True))


def parse_completion_rows(text: str, *, today: DateLike | None = None) -> dict[str, bool]:
    """Extract completions from a pasted CSV grid.

    Returns an empty map when no header is found or no row marks a completed
    day. Rows whose label has no recognisable date are placed relative to
    today by their distance from the end of the pasted lines.
    """

    today_date = current_date(today)
    lines = [line for line in text.splitlines() if line.strip()]
    header_index = find_header(lines)
    if header_index == -1:
        logger.debug("No CSV header found in %d lines", len(lines))
        return {}

    completions: dict[str, bool] = {}
    parsed_rows = 0
    for index in range(header_index + 1, len(lines)):
        line = lines[index]
        if "," not in line:
            continue

        try:
            cells = _split_cells(line)
        except csv.Error as exc:
            logger.debug("Skipping unreadable CSV line %d: %s", index, exc)
            continue
        if len(cells) < MIN_ROW_CELLS:
            continue

        week_start = parse_week_start(cells[0], year=today_date.year)
        if week_start is None:
            week_start = today_date - timedelta(days=(len(lines) - index) * 7)

        marked = 0
        for offset, cell in enumerate(cells[1:MIN_ROW_CELLS]):
            if cell.strip() in TRUTHY_CELLS:
                completions[day_key(week_start + timedelta(days=offset))] = True
                marked += 1
        if marked:
            parsed_rows += 1

    logger.debug(
        "Parsed %d CSV rows with completions",
        parsed_rows,
        extra={"header_line": header_index, "completions": len(completions)},
    )
    return completions


__all__ = [
    "TRUTHY_CELLS",
    "find_habit_name",
    "find_header",
    "parse_completion_rows",
    "parse_week_start",
]
