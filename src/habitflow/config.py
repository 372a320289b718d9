"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, *, minimum: int = 1) -> int:
    """Read a positive integer from the environment."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    if parsed < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {parsed}")
    return parsed


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Habitflow"
    DB_FILENAME = "habitflow.db"
    DEBUG = False
    TESTING = False
    SQLITE_PRAGMAS = {"foreign_keys": "on"}

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("HABITFLOW_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HABITFLOW_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("HABITFLOW_DATABASE_URL", self._build_sqlite_url())
        self.COMPLETION_WINDOW_DAYS = _env_int("HABITFLOW_COMPLETION_WINDOW_DAYS", 30)
        self.LOG_LEVEL = os.getenv("HABITFLOW_LOG_LEVEL", "INFO").upper()
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("HABITFLOW_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("HABITFLOW_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite and `create_app("testing")`."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = True
