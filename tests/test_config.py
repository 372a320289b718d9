"""Tests for configuration loading."""

from __future__ import annotations

import pytest

from habitflow import create_app
from habitflow.config import BaseConfig, DevConfig, TestConfig


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITFLOW_DATA_DIR", str(tmp_path))
    for name in (
        "HABITFLOW_DATABASE_URL",
        "HABITFLOW_DEV_MODE",
        "HABITFLOW_SECRET_KEY",
        "HABITFLOW_COMPLETION_WINDOW_DAYS",
        "HABITFLOW_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path):
    config = BaseConfig()
    assert config.DATA_DIR == tmp_path.resolve()
    assert config.DATABASE_URL == f"sqlite:///{tmp_path.resolve() / 'habitflow.db'}"
    assert config.COMPLETION_WINDOW_DAYS == 30
    assert config.DEV_MODE is True
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_database_url_override(monkeypatch):
    monkeypatch.setenv("HABITFLOW_DATABASE_URL", "postgresql://localhost/habits")
    config = BaseConfig()
    assert config.DATABASE_URL == "postgresql://localhost/habits"
    assert config.sqlalchemy_engine_options() == {"pool_pre_ping": True}


@pytest.mark.parametrize(("raw", "expected"), [("1", True), ("yes", True), ("off", False), ("0", False)])
def test_dev_mode_parsing(monkeypatch, raw, expected):
    monkeypatch.setenv("HABITFLOW_DEV_MODE", raw)
    monkeypatch.setenv("HABITFLOW_SECRET_KEY", "s3cret")
    assert BaseConfig().DEV_MODE is expected


def test_secret_required_outside_dev(monkeypatch):
    monkeypatch.setenv("HABITFLOW_DEV_MODE", "false")
    with pytest.raises(ValueError, match="HABITFLOW_SECRET_KEY"):
        BaseConfig()


@pytest.mark.parametrize("raw", ["0", "-3", "thirty"])
def test_window_days_validated(monkeypatch, raw):
    monkeypatch.setenv("HABITFLOW_COMPLETION_WINDOW_DAYS", raw)
    with pytest.raises(ValueError, match="HABITFLOW_COMPLETION_WINDOW_DAYS"):
        BaseConfig()


def test_window_days_reaches_service(monkeypatch):
    monkeypatch.setenv("HABITFLOW_COMPLETION_WINDOW_DAYS", "7")
    app = create_app("testing")
    try:
        assert app.extensions["habitflow"].habits.window_days == 7
    finally:
        app.extensions["habitflow"].engine.dispose()


def test_named_configs():
    assert DevConfig.DEBUG is True
    assert TestConfig().TESTING is True
    app = create_app("testing")
    try:
        assert app.config["TESTING"] is True
        assert isinstance(app.config["HABITFLOW_CONFIG"], TestConfig)
    finally:
        app.extensions["habitflow"].engine.dispose()
