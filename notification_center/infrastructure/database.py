"""Database engines and session management."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import Table
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

logger = logging.getLogger(__name__)

_ASYNC_DRIVERS = {
    "sqlite": "sqlite+aiosqlite",
    "postgresql": "postgresql+asyncpg",
    "postgres": "postgresql+asyncpg",
}


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


def normalize_database_url(url: str) -> str:
    """Return ``url`` with an async driver when a bare dialect was configured."""

    scheme, separator, rest = url.partition("://")
    if not separator or "+" in scheme:
        return url
    driver = _ASYNC_DRIVERS.get(scheme)
    if driver is None:
        return url
    return f"{driver}://{rest}"


def build_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine for ``url``."""

    database_url = normalize_database_url(url)
    if database_url.startswith("sqlite"):
        return create_async_engine(
            database_url,
            echo=echo,
            poolclass=NullPool,
            connect_args={"timeout": 30},
        )
    return create_async_engine(database_url, echo=echo, pool_pre_ping=True)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Return a session factory bound to ``engine``."""

    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def initialize_database(
    engine: AsyncEngine, tables: Sequence[Table] | None = None
) -> None:
    """Ensure ``tables`` (all models when omitted) exist in ``engine``."""

    from notification_center.infrastructure import models  # noqa: F401  # ensure models are imported

    async with engine.begin() as connection:
        await connection.run_sync(
            Base.metadata.create_all,
            tables=list(tables) if tables is not None else None,
            checkfirst=True,
        )
    logger.debug("Database tables ensured for %s", engine.url.render_as_string())


__all__ = [
    "Base",
    "build_engine",
    "build_session_factory",
    "initialize_database",
    "normalize_database_url",
]
