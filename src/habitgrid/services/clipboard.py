"""Text clipboard boundary used by import and export actions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal, Protocol

from ..models.habit import HabitTheme
from .calendar import DateLike
from .importers import ImportOutcome, import_from_csv_text, import_from_json_text

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Could not access the clipboard. Please try again."

ImportFormat = Literal["csv", "json"]


class ClipboardError(RuntimeError):
    """Raised when the host clipboard cannot be read or written."""


class Clipboard(Protocol):
    """Host-supplied plain-text clipboard."""

    def read_text(self) -> str:  # pragma: no cover - interface
        ...

    def write_text(self, text: str) -> None:  # pragma: no cover - interface
        ...


class MemoryClipboard:
    """In-process clipboard, handy for embedding and tests."""

    def __init__(self, text: str = "") -> None:
        self.text = text

    def read_text(self) -> str:
        return self.text

    def write_text(self, text: str) -> None:
        self.text = text


class FileClipboard:
    """A text file standing in for the system clipboard.

    A missing file reads as an empty clipboard.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def read_text(self) -> str:
        if not self.path.exists():
            return ""
        return self.path.read_text(encoding="utf-8-sig")

    def write_text(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", newline="", encoding="utf-8") as fh:
            fh.write(text)


def read_clipboard(clipboard: Clipboard) -> str:
    try:
        return clipboard.read_text() or ""
    except Exception as exc:
        logger.exception("Clipboard read failed")
        raise ClipboardError(GENERIC_FAILURE_MESSAGE) from exc


def write_clipboard(clipboard: Clipboard, text: str) -> None:
    try:
        clipboard.write_text(text)
    except Exception as exc:
        logger.exception("Clipboard write failed")
        raise ClipboardError(GENERIC_FAILURE_MESSAGE) from exc


def import_from_clipboard(
    clipboard: Clipboard,
    *,
    fmt: ImportFormat = "csv",
    theme: HabitTheme | str = HabitTheme.BLUE,
    today: DateLike | None = None,
) -> ImportOutcome:
    """Read the clipboard once and decode it with the chosen entry point."""

    text = read_clipboard(clipboard)
    logger.debug("Clipboard content length: %d", len(text))
    if fmt == "json":
        return import_from_json_text(text, theme=theme, today=today)
    if fmt == "csv":
        return import_from_csv_text(text, theme=theme, today=today)
    raise ValueError(f"Unsupported import format: {fmt!r}")


def export_to_clipboard(clipboard: Clipboard, payload: str) -> None:
    write_clipboard(clipboard, payload)
    logger.info("Copied %d characters to clipboard", len(payload))


__all__ = [
    "Clipboard",
    "ClipboardError",
    "FileClipboard",
    "GENERIC_FAILURE_MESSAGE",
    "MemoryClipboard",
    "export_to_clipboard",
    "import_from_clipboard",
    "read_clipboard",
    "write_clipboard",
]
