"""Tests for environment-driven configuration."""

from __future__ import annotations

import pytest
from sqlalchemy.pool import StaticPool

from habitgrid import config as settings
from habitgrid.config import BaseConfig, DevConfig


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in (
        "HABITGRID_DATABASE_URL",
        "HABITGRID_DEV_MODE",
        "HABITGRID_CLIPBOARD_FILE",
        "HABITGRID_DEFAULT_THEME",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HABITGRID_DATA_DIR", str(tmp_path / "data"))
    return tmp_path / "data"


def test_defaults_live_under_data_dir(clean_env):
    config = BaseConfig()

    assert config.DATA_DIR == clean_env.resolve()
    assert config.DATA_DIR.is_dir()
    assert config.DEV_MODE is True
    assert config.DATABASE_URL == f"sqlite:///{config.DATA_DIR / 'habitgrid.db'}"
    assert config.CLIPBOARD_FILE == config.DATA_DIR / "clipboard.txt"
    assert config.DEFAULT_THEME == "blue"


def test_environment_overrides(clean_env, monkeypatch, tmp_path):
    monkeypatch.setenv("HABITGRID_DEV_MODE", "off")
    monkeypatch.setenv("HABITGRID_DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("HABITGRID_CLIPBOARD_FILE", str(tmp_path / "paste.txt"))
    monkeypatch.setenv("HABITGRID_DEFAULT_THEME", " Green ")

    config = BaseConfig()

    assert config.DEV_MODE is False
    assert config.DATABASE_URL == "sqlite:///:memory:"
    assert config.CLIPBOARD_FILE == tmp_path / "paste.txt"
    assert config.DEFAULT_THEME == "green"


def test_unknown_default_theme_is_rejected(clean_env, monkeypatch):
    monkeypatch.setenv("HABITGRID_DEFAULT_THEME", "purple")

    with pytest.raises(ValueError, match="HABITGRID_DEFAULT_THEME"):
        BaseConfig()


def test_file_database_engine_options(clean_env):
    options = BaseConfig().sqlalchemy_engine_options()

    assert options["connect_args"] == {"check_same_thread": False}
    assert "poolclass" not in options


def test_testing_config_uses_shared_memory_database(tmp_path):
    config = settings.TestingConfig(data_dir=tmp_path / "t")

    assert config.DATA_DIR == (tmp_path / "t").resolve()
    assert config.DEV_MODE is False
    assert config.DATABASE_URL == "sqlite://"
    assert config.sqlalchemy_engine_options()["poolclass"] is StaticPool


def test_dev_config_forces_dev_mode(clean_env, monkeypatch):
    monkeypatch.setenv("HABITGRID_DEV_MODE", "false")

    assert BaseConfig().DEV_MODE is False
    assert DevConfig().DEV_MODE is True
