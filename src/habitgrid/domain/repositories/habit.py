"""Habit store protocol."""

from __future__ import annotations

from typing import Protocol

from ...models.habit import Habit


class HabitStore(Protocol):
    """Opaque load/save of the whole habit list."""

    def load_habits(self) -> list[Habit]:
        """Return every stored habit (empty when nothing is stored yet)."""
        ...

    def save_habits(self, habits: list[Habit]) -> None:
        """Replace the stored habit list."""
        ...
