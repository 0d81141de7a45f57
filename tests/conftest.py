"""Pytest configuration and shared fixtures for HabitGrid tests.

Fixtures pin the reference date, build habits without touching storage, and
provide an isolated in-memory database for the habit store and CLI tests.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest
from sqlmodel import SQLModel

from habitgrid.config import TestingConfig
from habitgrid.context import create_app_context
from habitgrid.infra.database import create_db_engine, create_session_factory, init_database
from habitgrid.models import Habit, HabitTheme
from habitgrid.services.clipboard import MemoryClipboard

# Wednesday; its week runs Sunday 2024-06-09 through Saturday 2024-06-15.
PINNED_TODAY = date(2024, 6, 12)


@pytest.fixture
def today() -> date:
    """Fixed reference date so streak and window maths is deterministic."""
    return PINNED_TODAY


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(today):
    """Factory for building in-memory habits.

    Returns:
        Callable: Function that creates Habit instances
    """

    counter = {"next": 1}

    def _create_habit(
        name: str = "Test Habit",
        theme: HabitTheme = HabitTheme.BLUE,
        completions: dict[str, bool] | None = None,
        created_at: str | None = None,
        order: int | None = None,
    ) -> Habit:
        """Create a habit with sensible defaults.

        Args:
            name: Habit display name
            theme: Colour tag
            completions: Completion map (defaults to empty)
            created_at: ISO creation timestamp (defaults to 30 days before today)
            order: Display order (defaults to creation sequence)
        """
        index = counter["next"]
        counter["next"] += 1
        if created_at is None:
            created_at = f"{(today - timedelta(days=30)).isoformat()}T09:00:00"
        return Habit(
            id=f"habit-{index}",
            name=name,
            theme=theme,
            created_at=created_at,
            completions=dict(completions or {}),
            order=index - 1 if order is None else order,
        )

    return _create_habit


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def config(tmp_path):
    """Testing configuration rooted in a temporary data directory."""
    return TestingConfig(data_dir=tmp_path)


@pytest.fixture
def db_engine(config):
    """Create an isolated in-memory SQLite database for each test."""
    engine = create_db_engine(config)
    init_database(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory matching the one repositories expect."""
    return create_session_factory(db_engine)


@pytest.fixture
def clipboard():
    return MemoryClipboard()


@pytest.fixture
def app_context(config, clipboard):
    """Fully wired application context backed by an in-memory database."""
    ctx = create_app_context(config, clipboard=clipboard)
    yield ctx
    ctx.engine.dispose()
