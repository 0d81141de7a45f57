"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from sqlalchemy.pool import StaticPool

load_dotenv()

THEMES = ("red", "blue", "green")


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HabitGrid"
    DB_FILENAME = "habitgrid.db"
    CLIPBOARD_FILENAME = "clipboard.txt"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HABITGRID_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("HABITGRID_DATABASE_URL", self._build_sqlite_url())
        self.CLIPBOARD_FILE = Path(
            os.getenv("HABITGRID_CLIPBOARD_FILE", str(self.DATA_DIR / self.CLIPBOARD_FILENAME))
        ).expanduser()
        self.DEFAULT_THEME = os.getenv("HABITGRID_DEFAULT_THEME", "blue").strip().lower()
        if self.DEFAULT_THEME not in THEMES:
            raise ValueError(
                f"HABITGRID_DEFAULT_THEME must be one of {', '.join(THEMES)}; "
                f"got {self.DEFAULT_THEME!r}."
            )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the database and exports live."""

        data_root = os.getenv("HABITGRID_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to user-local storage.
            fallback_path = Path.home() / f".{self.APP_NAME.lower()}"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        connect_args: dict[str, Any] = {}
        engine_options: dict[str, Any] = {"connect_args": connect_args}
        if self.DATABASE_URL.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        if self.DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection so every session sees the same in-memory database
            engine_options["poolclass"] = StaticPool
        return engine_options


class DevConfig(BaseConfig):
    """Development configuration: local SQLite with verbose logging forced on."""

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = True


class TestingConfig(BaseConfig):
    """Configuration used by the test-suite: in-memory database, quiet console."""

    def __init__(self, data_dir: Path | str | None = None) -> None:
        self._data_dir_override = Path(data_dir) if data_dir is not None else None
        super().__init__()
        self.DEV_MODE = False
        self.DATABASE_URL = "sqlite://"

    def _resolve_data_dir(self) -> Path:
        if self._data_dir_override is None:
            return super()._resolve_data_dir()
        self._data_dir_override.mkdir(parents=True, exist_ok=True)
        return self._data_dir_override.resolve()
