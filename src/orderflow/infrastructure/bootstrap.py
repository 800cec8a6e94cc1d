"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from orderflow.infrastructure.config import DATA_DIR, Settings
from orderflow.infrastructure.notifications.logging_publisher import LoggingEventPublisher
from orderflow.infrastructure.persistence.engine import (
    create_engine_from_url,
    create_session_factory,
    create_tables,
)
from orderflow.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork
from orderflow.logging_config import configure_logging


@lru_cache(maxsize=1)
def settings() -> Settings:
    current = Settings.from_env()
    configure_logging(level=current.log_level)
    return current


@lru_cache(maxsize=1)
def engine() -> Engine:
    current = settings()
    if current.uses_default_database:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
    return create_engine_from_url(current.database_url, echo=current.sql_echo)


@lru_cache(maxsize=1)
def session_factory() -> sessionmaker[Session]:
    return create_session_factory(engine())


def init_database() -> None:
    create_tables(engine())


def unit_of_work() -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(session_factory())


def admin_role_id() -> int:
    return settings().admin_role_id


def event_publisher() -> LoggingEventPublisher:
    return LoggingEventPublisher()


def reset() -> None:
    """Drop cached settings and dispose the engine.  Used by tests."""
    if engine.cache_info().currsize:
        engine().dispose()
    session_factory.cache_clear()
    engine.cache_clear()
    settings.cache_clear()
