"""Concrete repository implementations using SQLModel."""

from .habit import HABITS_KEY, SQLModelHabitStore

__all__ = ["HABITS_KEY", "SQLModelHabitStore"]
