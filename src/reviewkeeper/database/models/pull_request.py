"""Pull request, status, and reviewer assignment models for Reviewkeeper.

Statuses live in their own lookup table (``statuses``) and are seeded with
``OPEN`` and ``MERGED`` whenever the table is created, so both Alembic
migrations and ``Base.metadata.create_all`` produce a usable schema.
Reviewer assignments use a composite primary key on
``(pull_request_id, user_id)``, which makes double assignment impossible.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, Table, Text, event, func
from sqlalchemy.engine import Connection
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reviewkeeper.database.models.base import Base, CreatedAtMixin


class PullRequestStatus(enum.Enum):
    """Lifecycle status for a pull request.

    States:
        OPEN: Under review; reviewers may be reassigned.
        MERGED: Terminal; direct reassignment is refused.
    """

    OPEN = "OPEN"
    MERGED = "MERGED"


# Stable lookup IDs written by the seed and by migration 001
STATUS_IDS: dict[PullRequestStatus, int] = {
    PullRequestStatus.OPEN: 1,
    PullRequestStatus.MERGED: 2,
}


class Status(Base):
    """Row of the pull request status lookup table."""

    __tablename__ = "statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)


@event.listens_for(Status.__table__, "after_create")
def _seed_statuses(target: Table, connection: Connection, **kw: Any) -> None:
    connection.execute(
        target.insert(),
        [{"id": status_id, "name": status.value} for status, status_id in STATUS_IDS.items()],
    )


class PullRequest(CreatedAtMixin, Base):
    """A pull request awaiting or finished with review.

    Attributes:
        id: Caller-supplied pull request ID.
        name: Pull request title.
        author_id: Foreign key to the authoring user.
        status_id: Foreign key to the statuses lookup table.
        created_at: Row creation timestamp (from CreatedAtMixin).
        merged_at: Set iff the pull request is MERGED.
        status_row: Eagerly joined status lookup row.
    """

    __tablename__ = "pull_requests"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    status_id: Mapped[int] = mapped_column(
        ForeignKey("statuses.id"),
        nullable=False,
    )
    merged_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    status_row: Mapped[Status] = relationship(
        "Status",
        lazy="joined",
        innerjoin=True,
    )

    @property
    def status(self) -> PullRequestStatus:
        """Lifecycle status resolved from the lookup row."""
        return PullRequestStatus(self.status_row.name)


class ReviewerAssignment(Base):
    """Review responsibility of one user for one pull request.

    Attributes:
        pull_request_id: Pull request under review.
        user_id: Assigned reviewer.
        assigned_at: When this assignment was made.
    """

    __tablename__ = "reviewers"

    pull_request_id: Mapped[str] = mapped_column(
        ForeignKey("pull_requests.id"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"),
        primary_key=True,
        index=True,
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
