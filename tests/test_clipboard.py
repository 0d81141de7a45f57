"""Tests for the clipboard boundary."""

from __future__ import annotations

import logging

import pytest

from habitgrid.services.clipboard import (
    GENERIC_FAILURE_MESSAGE,
    ClipboardError,
    FileClipboard,
    MemoryClipboard,
    export_to_clipboard,
    import_from_clipboard,
)
from habitgrid.services.export_csv import export_habit_json, export_habit_payload
from habitgrid.services.importers import ImportStatus


class BrokenClipboard:
    def read_text(self) -> str:
        raise OSError("clipboard daemon not running")

    def write_text(self, text: str) -> None:
        raise OSError("clipboard daemon not running")


def test_export_then_import_through_memory_clipboard(habit_factory, today):
    clipboard = MemoryClipboard()
    habit = habit_factory(name="Read", completions={"2024-06-10": True})

    export_to_clipboard(clipboard, export_habit_payload(habit, today=today))
    outcome = import_from_clipboard(clipboard, today=today)

    assert outcome.status is ImportStatus.IMPORTED
    assert outcome.data.name == "Read"
    assert outcome.data.completions == {"2024-06-10": True}


def test_json_format_uses_json_entry_point(habit_factory, today):
    clipboard = MemoryClipboard(export_habit_json(habit_factory(name="Run", completions={"2024-06-01": True})))

    outcome = import_from_clipboard(clipboard, fmt="json", today=today)

    assert outcome.strategy == "json_document"
    assert outcome.data.name == "Run"


def test_empty_clipboard_reports_failure(today):
    outcome = import_from_clipboard(MemoryClipboard(), today=today)

    assert outcome.status is ImportStatus.FAILED
    assert outcome.data is None


def test_unsupported_format(today):
    with pytest.raises(ValueError):
        import_from_clipboard(MemoryClipboard("x"), fmt="xml", today=today)


def test_host_errors_become_generic_clipboard_errors(today, caplog):
    with caplog.at_level(logging.ERROR, logger="habitgrid.services.clipboard"):
        with pytest.raises(ClipboardError) as excinfo:
            import_from_clipboard(BrokenClipboard(), today=today)

    assert str(excinfo.value) == GENERIC_FAILURE_MESSAGE
    assert isinstance(excinfo.value.__cause__, OSError)
    assert "Clipboard read failed" in caplog.text

    with pytest.raises(ClipboardError):
        export_to_clipboard(BrokenClipboard(), "payload")


def test_file_clipboard_round_trip(tmp_path):
    clipboard = FileClipboard(tmp_path / "nested" / "clip.txt")

    assert clipboard.read_text() == ""
    clipboard.write_text("Week,Sunday\n")
    assert clipboard.read_text() == "Week,Sunday\n"


def test_file_clipboard_strips_byte_order_mark(tmp_path):
    path = tmp_path / "clip.txt"
    path.write_bytes("\ufeffHABIT_JSON_DATA:{}".encode("utf-8"))

    assert FileClipboard(path).read_text() == "HABIT_JSON_DATA:{}"
