"""Service module exports."""

from . import calendar, clipboard, collection, export_csv, habits, import_csv, importers

__all__ = [
    "calendar",
    "clipboard",
    "collection",
    "export_csv",
    "habits",
    "import_csv",
    "importers",
]
