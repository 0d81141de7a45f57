"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from .config import BaseConfig
from .domain.repositories import HabitStore
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelHabitStore
from .services.clipboard import Clipboard, FileClipboard


@dataclass
class AppContext:
    """Centralized application context with services and state."""

    config: BaseConfig
    engine: Any
    session_factory: Callable[[], Any]
    habit_store: HabitStore
    clipboard: Clipboard


def create_app_context(
    config: Optional[BaseConfig] = None, *, clipboard: Optional[Clipboard] = None
) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        habit_store=SQLModelHabitStore(session_factory),
        clipboard=clipboard or FileClipboard(config.CLIPBOARD_FILE),
    )
