"""Domain data structures and SQLModel table exports."""

from .habit import (
    MAX_NAME_LENGTH,
    Habit,
    HabitTheme,
    ImportedHabitData,
    coerce_theme,
    validate_habit_name,
)
from .storage import StoredValue

__all__ = [
    "MAX_NAME_LENGTH",
    "Habit",
    "HabitTheme",
    "ImportedHabitData",
    "StoredValue",
    "coerce_theme",
    "validate_habit_name",
]
