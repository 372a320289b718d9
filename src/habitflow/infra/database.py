"""Database engine and session helpers."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator, Mapping

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig

SessionFactory = Callable[[], ContextManager[Session]]


def create_db_engine(config: BaseConfig) -> Engine:
    """Create SQLModel engine from configuration."""
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    if engine.dialect.name == "sqlite":
        configure_sqlite_engine(engine, config.SQLITE_PRAGMAS)
    return engine


def configure_sqlite_engine(engine: Engine, pragmas: Mapping[str, str] | None = None) -> None:
    """Apply pragmas and issue ``BEGIN IMMEDIATE`` for every transaction.

    pysqlite otherwise defers BEGIN until the first write and SQLite ignores
    ``FOR UPDATE``; with this a transaction holds the write lock from its
    first read until commit.
    """
    pragmas = dict(pragmas or {})

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _record) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        for key, value in pragmas.items():
            cursor.execute(f"PRAGMA {key}={value}")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(connection) -> None:
        connection.exec_driver_sql("BEGIN IMMEDIATE")


def init_database(engine: Engine) -> None:
    """Create any missing tables."""
    # Import all models to ensure they're registered
    from .. import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def create_session_factory(engine: Engine) -> SessionFactory:
    """Create a session factory yielding transactional sessions."""

    @contextmanager
    def factory() -> Iterator[Session]:
        session = Session(engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


def bootstrap_database(config: BaseConfig | None = None) -> tuple[Engine, SessionFactory]:
    """Create engine + session factory with schema initialised.

    Used by the app factory and tests to get consistent engine options.
    """

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    init_database(engine)
    return engine, create_session_factory(engine)
