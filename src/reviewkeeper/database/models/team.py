"""Team and User models for Reviewkeeper.

A team is identified by its unique name. Membership is expressed on the
user row (``users.team_name``); deactivation flips ``is_active`` and never
removes the row.
"""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from reviewkeeper.database.models.base import Base, CreatedAtMixin


class Team(CreatedAtMixin, Base):
    """A named group of users that review each other's pull requests.

    Attributes:
        name: Unique team name (primary key).
        created_at: Row creation timestamp (from CreatedAtMixin).
    """

    __tablename__ = "teams"

    name: Mapped[str] = mapped_column(Text, primary_key=True)


class User(Base):
    """A developer who can author and review pull requests.

    Attributes:
        id: Externally issued user ID.
        name: Display name.
        team_name: Owning team, or None for unaffiliated users.
        is_active: Whether the user may currently be assigned as a reviewer.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    team_name: Mapped[str | None] = mapped_column(
        ForeignKey("teams.name"),
        nullable=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )
