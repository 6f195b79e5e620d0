"""User endpoints for Reviewkeeper.

- POST /users/setIsActive - toggle a user's active flag (admin)
- GET /users/getReview - pull requests a user currently reviews
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from reviewkeeper.assignment import TeamMembershipManager, UserReviews, UserView
from reviewkeeper.web.dependencies import get_membership, require_admin_token


class SetIsActiveRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    is_active: bool


class UserResponse(BaseModel):
    user: UserView


def create_users_router() -> APIRouter:
    """Create the /users router."""
    router = APIRouter(prefix="/users", tags=["users"])

    @router.post(
        "/setIsActive",
        response_model=UserResponse,
        dependencies=[Depends(require_admin_token)],
    )
    async def set_is_active(
        body: SetIsActiveRequest,
        membership: TeamMembershipManager = Depends(get_membership),  # noqa: B008
    ) -> dict[str, Any]:
        user = await membership.set_is_active(body.user_id, body.is_active)
        return {"user": user}

    @router.get("/getReview", response_model=UserReviews)
    async def get_review(
        user_id: str = Query(..., min_length=1),
        membership: TeamMembershipManager = Depends(get_membership),  # noqa: B008
    ) -> UserReviews:
        return await membership.get_user_reviews(user_id)

    return router
