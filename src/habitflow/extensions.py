"""Per-application wiring of database, repositories and services."""

from __future__ import annotations

from dataclasses import dataclass

from flask import Flask, current_app
from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelHabitRepository, SQLModelNotificationRepository
from .services.habits import HabitService
from .services.notifications import NotificationService

EXTENSION_KEY = "habitflow"


@dataclass(slots=True)
class AppServices:
    """Handles owned by one Flask app; nothing is process-global."""

    engine: Engine
    session_factory: SessionFactory
    habits: HabitService
    notifications: NotificationService


def init_services(app: Flask, config: BaseConfig) -> AppServices:
    """Create the engine and services for ``app`` and attach them to it."""

    engine, session_factory = bootstrap_database(config)
    services = AppServices(
        engine=engine,
        session_factory=session_factory,
        habits=HabitService(
            SQLModelHabitRepository(session_factory),
            window_days=config.COMPLETION_WINDOW_DAYS,
        ),
        notifications=NotificationService(SQLModelNotificationRepository(session_factory)),
    )
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> AppServices:
    """Return the services bound to the current app."""

    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError:  # pragma: no cover - misconfigured app
        raise RuntimeError("habitflow services not initialized; call init_services()") from None


def habit_service() -> HabitService:
    return get_services().habits


def notification_service() -> NotificationService:
    return get_services().notifications
