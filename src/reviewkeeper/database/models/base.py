"""SQLAlchemy declarative base and shared column mixins for Reviewkeeper.

Identities in this schema are natural keys (team names, externally issued
user and pull request IDs), so the mixin only contributes a creation
timestamp rather than a surrogate primary key.

Example:
    >>> class MyModel(CreatedAtMixin, Base):
    ...     __tablename__ = "my_table"
    ...     id: Mapped[str] = mapped_column(Text, primary_key=True)
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy 2.0 declarative base for all Reviewkeeper models."""

    pass


class CreatedAtMixin:
    """Mixin providing a database-stamped created_at column.

    List it before Base in the class hierarchy so the column lands in the
    model's table definition.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
