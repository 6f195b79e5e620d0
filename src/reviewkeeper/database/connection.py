"""Database connection management for Reviewkeeper.

This module provides factory functions for creating SQLAlchemy async engines
and session factories, configured from the application's DatabaseConfig.

The production driver is asyncpg. SQLite URLs (used by the test suite and
for local experiments) skip the pool sizing options, which the SQLite
pools do not accept.

Example usage:
    >>> from reviewkeeper.config import DatabaseConfig
    >>> from reviewkeeper.database.connection import get_engine, get_session_factory
    >>>
    >>> engine = get_engine(DatabaseConfig(url="postgresql+asyncpg://localhost/reviewkeeper"))
    >>> SessionFactory = get_session_factory(engine)
    >>>
    >>> async with SessionFactory() as session, session.begin():
    ...     team = await get_team(session, "backend")
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from reviewkeeper.config import DatabaseConfig
from reviewkeeper.database.models.base import Base


def get_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create an async SQLAlchemy engine from database configuration.

    Args:
        config: Database configuration containing URL, pool settings,
                and SQL echo preference.

    Returns:
        Configured AsyncEngine instance.
    """
    if config.url.startswith("sqlite"):
        return create_async_engine(config.url, echo=config.echo)

    return create_async_engine(
        config.url,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_pre_ping=True,
        echo=config.echo,
    )


def get_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the given engine.

    Sessions use expire_on_commit=False so result objects stay readable
    after the engine's transaction commits.

    Args:
        engine: AsyncEngine to bind sessions to.

    Returns:
        Configured async_sessionmaker that produces AsyncSession instances.
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create every table (and seed statuses) directly from the models.

    Intended for development databases and tests; production schemas are
    managed by Alembic.

    Args:
        engine: AsyncEngine to create the schema on.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
