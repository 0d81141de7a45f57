"""Habit tracking data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

MAX_NAME_LENGTH = 30


class HabitTheme(str, Enum):
    """Cosmetic colour tag for a habit."""

    RED = "red"
    BLUE = "blue"
    GREEN = "green"


def coerce_theme(value: Any, default: HabitTheme = HabitTheme.BLUE) -> HabitTheme:
    """Return ``value`` as a HabitTheme, or ``default`` when it is not a known theme."""

    if isinstance(value, HabitTheme):
        return value
    if isinstance(value, str):
        try:
            return HabitTheme(value.strip().lower())
        except ValueError:
            return default
    return default


def validate_habit_name(name: str) -> str:
    """Strip and validate a display name, raising ValueError when out of bounds."""

    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("Habit name cannot be empty")
    if len(cleaned) > MAX_NAME_LENGTH:
        raise ValueError(f"Habit name must be at most {MAX_NAME_LENGTH} characters")
    return cleaned


@dataclass(slots=True)
class Habit:
    """A user-defined habit and its sparse day-by-day completion map."""

    id: str
    name: str
    theme: HabitTheme = HabitTheme.BLUE
    created_at: str = ""
    completions: dict[str, bool] = field(default_factory=dict)
    order: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the storage wire keys."""

        return {
            "id": self.id,
            "name": self.name,
            "theme": coerce_theme(self.theme).value,
            "createdAt": self.created_at,
            "completions": dict(self.completions),
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Habit":
        completions = payload.get("completions") or {}
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name", "")),
            theme=coerce_theme(payload.get("theme")),
            created_at=str(payload.get("createdAt") or payload.get("created_at") or ""),
            completions={str(k): bool(v) for k, v in dict(completions).items()},
            order=int(payload.get("order", 0)),
        )


@dataclass(slots=True)
class ImportedHabitData:
    """Decoded interchange content; carries no identity or ordering."""

    name: str
    theme: HabitTheme
    completions: dict[str, bool] = field(default_factory=dict)

    @property
    def completed_days(self) -> int:
        return sum(1 for done in self.completions.values() if done)
