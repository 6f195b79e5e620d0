"""Database layer for Reviewkeeper.

This module handles database connections, session management, and the
SQLAlchemy async engine configuration for PostgreSQL.

Public API:
    get_engine: Create an AsyncEngine from DatabaseConfig.
    get_session_factory: Create an async_sessionmaker from an engine.
    create_schema: Create all tables from the ORM metadata.
    Base: SQLAlchemy declarative base for all models.
"""

from reviewkeeper.database.connection import create_schema, get_engine, get_session_factory
from reviewkeeper.database.models import (
    Base,
    PullRequest,
    PullRequestStatus,
    ReviewerAssignment,
    Status,
    Team,
    User,
)

__all__ = [
    "get_engine",
    "get_session_factory",
    "create_schema",
    "Base",
    "Team",
    "User",
    "Status",
    "PullRequest",
    "PullRequestStatus",
    "ReviewerAssignment",
]
