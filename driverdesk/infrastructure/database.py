"""
Async SQLAlchemy engine and session factory for the payment notification
store.

Production runs on PostgreSQL via ``asyncpg``.  ``build_engine`` only
applies pool sizing to server databases, so the same helper serves the
in-memory SQLite store used by the test-suite.
"""

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from driverdesk.config import settings


def build_engine(url: str, **kwargs: Any) -> AsyncEngine:
    if make_url(url).get_backend_name() != "sqlite":
        kwargs.setdefault("pool_size", 5)
        kwargs.setdefault("max_overflow", 5)
        kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(url, echo=False, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.database_url)
async_session_factory = build_session_factory(engine)


class Base(DeclarativeBase):
    """Declarative base for the notification store models."""
