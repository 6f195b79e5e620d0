"""SQLAlchemy ORM models for Reviewkeeper.

This module defines the relational schema: teams, users, the pull request
status lookup, pull requests, and reviewer assignments.

All models use SQLAlchemy 2.0 declarative style with Mapped[] type annotations.
"""

from reviewkeeper.database.models.base import Base, CreatedAtMixin
from reviewkeeper.database.models.pull_request import (
    STATUS_IDS,
    PullRequest,
    PullRequestStatus,
    ReviewerAssignment,
    Status,
)
from reviewkeeper.database.models.team import Team, User

__all__ = [
    "Base",
    "CreatedAtMixin",
    "Team",
    "User",
    "Status",
    "STATUS_IDS",
    "PullRequest",
    "PullRequestStatus",
    "ReviewerAssignment",
]
