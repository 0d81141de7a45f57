"""Tests for CSV and JSON export helpers."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone

import pytest

from habitgrid.models import HabitTheme
from habitgrid.services import export_csv

NOW = datetime(2024, 6, 12, 8, 30, tzinfo=timezone.utc)


def test_build_habit_csv_has_header_and_52_weeks(habit_factory, today):
    habit = habit_factory(completions={"2024-06-10": True, "2024-06-12": True})

    text = export_csv.build_habit_csv(habit, today=today)
    lines = text.splitlines()

    assert lines[0] == "Week,Sunday,Monday,Tuesday,Wednesday,Thursday,Friday,Saturday"
    assert len(lines) == 53
    # Oldest week first; the final row is the current week
    assert lines[-1] == '"9 Jun - 15 Jun",0,1,0,1,0,0,0'
    assert lines[1].startswith('"18 Jun - 24 Jun"')


def test_build_habit_csv_rows_parse_as_csv(habit_factory, today):
    habit = habit_factory(completions={"2024-06-09": True})

    rows = list(csv.reader(io.StringIO(export_csv.build_habit_csv(habit, today=today))))

    assert all(len(row) == 8 for row in rows)
    assert rows[-1][1:] == ["1", "0", "0", "0", "0", "0", "0"]
    assert {cell for row in rows[1:] for cell in row[1:]} <= {"0", "1"}


def test_export_habit_payload_embeds_compact_json(habit_factory, today):
    habit = habit_factory(name="Read", theme=HabitTheme.GREEN, completions={"2024-06-01": True})

    payload = export_csv.export_habit_payload(habit, today=today)

    assert payload.startswith(export_csv.HABIT_MARKER)
    json_part, csv_part = payload[len(export_csv.HABIT_MARKER):].split("\n\n", 1)
    assert json.loads(json_part) == {
        "name": "Read",
        "theme": "green",
        "completions": {"2024-06-01": True},
    }
    assert " " not in json_part
    assert csv_part.startswith("Week,Sunday")


def test_export_all_habits_payload_has_titled_blocks(habit_factory, today):
    habits = [habit_factory(name="Read"), habit_factory(name="Run")]

    payload = export_csv.export_all_habits_payload(habits, today=today)

    assert payload.startswith(export_csv.ALL_HABITS_MARKER)
    json_part = payload[len(export_csv.ALL_HABITS_MARKER):].split("\n\n", 1)[0]
    assert [h["name"] for h in json.loads(json_part)] == ["Read", "Run"]
    assert "\n\n--- Read ---\nWeek,Sunday" in payload
    assert "\n\n--- Run ---\nWeek,Sunday" in payload


def test_export_habit_json_shape(habit_factory):
    habit = habit_factory(name="Read", theme=HabitTheme.BLUE, completions={"2024-06-01": True})

    payload = json.loads(export_csv.export_habit_json(habit, now=NOW))

    assert payload == {
        "name": "Read",
        "theme": "blue",
        "completions": {"2024-06-01": True},
        "exportDate": "2024-06-12T08:30:00.000Z",
        "type": "single_habit",
    }


def test_export_all_habits_json_shape(habit_factory):
    habits = [habit_factory(name="Read"), habit_factory(name="Run", theme=HabitTheme.RED)]

    payload = json.loads(export_csv.export_all_habits_json(habits, now=NOW))

    assert payload["type"] == "all_habits"
    assert payload["exportDate"] == "2024-06-12T08:30:00.000Z"
    assert payload["habits"][1] == {"name": "Run", "theme": "red", "completions": {}}


@pytest.mark.parametrize(
    "exporter", [export_csv.export_all_habits_json, export_csv.export_all_habits_payload]
)
def test_collection_exports_reject_empty_lists(exporter):
    with pytest.raises(export_csv.NoHabitsError):
        exporter([])


def test_write_export_creates_file(tmp_path):
    output_path = tmp_path / "exports" / "read.txt"

    written = export_csv.write_export("HABIT_JSON_DATA:{}\n\n", output_path)

    assert written == output_path
    assert output_path.read_text(encoding="utf-8") == "HABIT_JSON_DATA:{}\n\n"
