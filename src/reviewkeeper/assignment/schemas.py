"""Result models returned by the reviewer assignment engines.

The engines hand these Pydantic models back to callers (the HTTP routes and
the CLI) so no ORM instance escapes its transaction. Field names follow the
public JSON contract, which is why they read ``pull_request_id`` rather
than ``id``.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from reviewkeeper.database.models.pull_request import PullRequest
from reviewkeeper.database.queries.reviewer import get_reviewer_ids
from reviewkeeper.database.queries.team import list_team_members


class TeamMember(BaseModel):
    """A member entry inside a team view."""

    user_id: str = Field(..., min_length=1)
    username: str
    is_active: bool = True


class TeamView(BaseModel):
    """A team and all of its members, active or not."""

    team_name: str
    members: list[TeamMember] = Field(default_factory=list)


class UserView(BaseModel):
    user_id: str
    username: str
    team_name: str | None
    is_active: bool


class PullRequestView(BaseModel):
    """Full pull request state including its current reviewer set.

    Attributes:
        pull_request_id: Caller-supplied ID.
        pull_request_name: Title.
        author_id: Authoring user.
        status: ``OPEN`` or ``MERGED``.
        assigned_reviewers: Current reviewer IDs (order not significant).
        created_at: Creation timestamp.
        merged_at: Merge timestamp, present iff status is ``MERGED``.
    """

    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str
    assigned_reviewers: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    merged_at: datetime | None = None


class PullRequestShort(BaseModel):
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str


class ReassignmentNote(BaseModel):
    """One reviewer replaced during a deactivation cascade."""

    pull_request_id: str
    old_reviewer_id: str
    replaced_by: str


class ReassignResult(BaseModel):
    pr: PullRequestView
    replaced_by: str


class DeactivationResult(BaseModel):
    """Team state after a deactivation cascade plus the replacements it made."""

    team: TeamView
    pull_requests: list[ReassignmentNote] = Field(default_factory=list)


class UserReviews(BaseModel):
    user_id: str
    pull_requests: list[PullRequestShort] = Field(default_factory=list)


async def load_team_view(session: AsyncSession, team_name: str) -> TeamView:
    """Read a team's current membership into a TeamView."""
    members = await list_team_members(session, team_name)
    return TeamView(
        team_name=team_name,
        members=[
            TeamMember(user_id=m.id, username=m.name, is_active=m.is_active)
            for m in members
        ],
    )


async def load_pull_request_view(
    session: AsyncSession,
    pull_request: PullRequest,
) -> PullRequestView:
    """Read a pull request's reviewer set into a PullRequestView."""
    reviewers = await get_reviewer_ids(session, pull_request.id)
    return PullRequestView(
        pull_request_id=pull_request.id,
        pull_request_name=pull_request.name,
        author_id=pull_request.author_id,
        status=pull_request.status.value,
        assigned_reviewers=reviewers,
        created_at=pull_request.created_at,
        merged_at=pull_request.merged_at,
    )


def short_view(pull_request: PullRequest) -> PullRequestShort:
    return PullRequestShort(
        pull_request_id=pull_request.id,
        pull_request_name=pull_request.name,
        author_id=pull_request.author_id,
        status=pull_request.status.value,
    )
