"""Team endpoints for Reviewkeeper.

- POST /team/add - create a team and upsert its members
- GET /team/get - read a team with all of its members
- POST /team/deactivate - deactivate members and repair their open reviews
  (admin token required when one is configured)
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi import status as http_status
from pydantic import BaseModel, Field

from reviewkeeper.assignment import (
    DeactivationCascade,
    DeactivationResult,
    TeamMember,
    TeamMembershipManager,
    TeamView,
)
from reviewkeeper.web.dependencies import (
    get_cascade,
    get_membership,
    require_admin_token,
)


class TeamAddRequest(BaseModel):
    """Request body for creating a team.

    Attributes:
        team_name: Unique team name
        members: Users to create or move into the team
    """

    team_name: str = Field(..., min_length=1)
    members: list[TeamMember] = Field(default_factory=list)


class TeamDeactivateRequest(BaseModel):
    """Request body for deactivating team members.

    Attributes:
        team_name: Team every listed user must belong to
        users: IDs of the users to deactivate
    """

    team_name: str = Field(..., min_length=1)
    users: list[str] = Field(..., min_length=1)


class TeamResponse(BaseModel):
    team: TeamView


def create_teams_router() -> APIRouter:
    """Create the /team router."""
    router = APIRouter(prefix="/team", tags=["teams"])

    @router.post(
        "/add",
        response_model=TeamResponse,
        status_code=http_status.HTTP_201_CREATED,
    )
    async def add_team(
        body: TeamAddRequest,
        membership: TeamMembershipManager = Depends(get_membership),  # noqa: B008
    ) -> dict[str, Any]:
        team = await membership.add_team(body.team_name, body.members)
        return {"team": team}

    @router.get("/get", response_model=TeamView)
    async def get_team(
        team_name: str = Query(..., min_length=1),
        membership: TeamMembershipManager = Depends(get_membership),  # noqa: B008
    ) -> TeamView:
        return await membership.get_team(team_name)

    @router.post(
        "/deactivate",
        response_model=DeactivationResult,
        dependencies=[Depends(require_admin_token)],
    )
    async def deactivate_members(
        body: TeamDeactivateRequest,
        cascade: DeactivationCascade = Depends(get_cascade),  # noqa: B008
    ) -> DeactivationResult:
        return await cascade.deactivate_team_members(body.team_name, body.users)

    return router
