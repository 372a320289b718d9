"""Pytest configuration and shared fixtures for Habitflow tests.

Provides a throwaway SQLite database per test, repository/service fixtures,
unsaved habit builders for the pure scheduling core, and a Flask test app.
"""

from __future__ import annotations

import tempfile
from datetime import date, datetime
from pathlib import Path

import pytest

from habitflow import create_app
from habitflow.infra.database import configure_sqlite_engine, create_session_factory, init_database
from habitflow.infra.repositories import SQLModelHabitRepository, SQLModelNotificationRepository
from habitflow.models import Habit
from habitflow.services.habits import HabitService
from habitflow.services.notifications import NotificationService
from sqlmodel import create_engine

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with all tables created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    configure_sqlite_engine(engine)
    init_database(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Transactional session factory matching the one used by the app."""
    return create_session_factory(db_engine)


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def notification_repo(session_factory) -> SQLModelNotificationRepository:
    return SQLModelNotificationRepository(session_factory)


@pytest.fixture
def service(habit_repo) -> HabitService:
    return HabitService(habit_repo)


@pytest.fixture
def notifications(notification_repo) -> NotificationService:
    return NotificationService(notification_repo)


# =============================================================================
# Test Data Factories
# =============================================================================


def build_habit(
    frequency: str | None = "daily",
    created: date | datetime = date(2024, 1, 1),
    custom_schedule=None,
    habit_id: str = "habit-1",
    name: str = "Test Habit",
) -> Habit:
    """Unsaved habit for exercising the pure scheduling functions."""

    created_at = created if isinstance(created, datetime) else datetime.combine(created, datetime.min.time())
    return Habit(
        id=habit_id,
        name=name,
        category="Health & Fitness",
        frequency=frequency,
        custom_schedule=custom_schedule,
        created_at=created_at,
    )


@pytest.fixture
def habit_builder():
    """Return the unsaved-habit builder."""
    return build_habit


@pytest.fixture
def habit_factory(service):
    """Factory for creating persisted habits through the service.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        category: str = "Health & Fitness",
        frequency: str = "daily",
        created: datetime | None = None,
        **extra,
    ) -> Habit:
        habit = service.create_habit(name=name, category=category, frequency=frequency, **extra)
        if created is not None:
            habit.created_at = created
            habit = service.repository.update_habit(habit)
        return habit

    return _create_habit


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Flask app backed by a SQLite file under ``tmp_path``."""
    monkeypatch.setenv("HABITFLOW_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("HABITFLOW_DATABASE_URL", raising=False)
    monkeypatch.delenv("HABITFLOW_COMPLETION_WINDOW_DAYS", raising=False)
    app = create_app("testing")
    yield app
    app.extensions["habitflow"].engine.dispose()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
