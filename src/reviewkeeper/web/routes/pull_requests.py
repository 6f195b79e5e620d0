"""Pull request endpoints for Reviewkeeper.

- POST /pullRequest/create - open a pull request and assign reviewers
- POST /pullRequest/merge - merge (idempotent)
- POST /pullRequest/reassign - replace one reviewer with a teammate

Timestamps are serialized as RFC 3339; ``merged_at`` is also exposed under
the ``mergedAt`` key used by existing clients of the merge endpoint.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from fastapi import status as http_status
from pydantic import BaseModel, Field, computed_field

from reviewkeeper.assignment import (
    PullRequestLifecycle,
    PullRequestView,
    ReviewerAssigner,
    ReviewerReassigner,
)
from reviewkeeper.web.dependencies import (
    get_assigner,
    get_lifecycle,
    get_reassigner,
)


class PullRequestCreateRequest(BaseModel):
    pull_request_id: str = Field(..., min_length=1)
    pull_request_name: str = Field(..., min_length=1)
    author_id: str = Field(..., min_length=1)


class PullRequestMergeRequest(BaseModel):
    pull_request_id: str = Field(..., min_length=1)


class PullRequestReassignRequest(BaseModel):
    pull_request_id: str = Field(..., min_length=1)
    old_reviewer_id: str = Field(..., min_length=1)


class PullRequestBody(PullRequestView):
    """Pull request as rendered on the wire."""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def mergedAt(self) -> datetime | None:  # noqa: N802
        return self.merged_at


class PullRequestResponse(BaseModel):
    pr: PullRequestBody


class ReassignResponse(BaseModel):
    pr: PullRequestBody
    replaced_by: str


def _body(view: PullRequestView) -> PullRequestBody:
    return PullRequestBody.model_validate(view.model_dump())


def create_pull_requests_router() -> APIRouter:
    """Create the /pullRequest router."""
    router = APIRouter(prefix="/pullRequest", tags=["pull_requests"])

    @router.post(
        "/create",
        response_model=PullRequestResponse,
        status_code=http_status.HTTP_201_CREATED,
    )
    async def create_pull_request(
        body: PullRequestCreateRequest,
        assigner: ReviewerAssigner = Depends(get_assigner),  # noqa: B008
    ) -> dict[str, Any]:
        view = await assigner.create_pull_request(
            body.pull_request_id,
            body.pull_request_name,
            body.author_id,
        )
        return {"pr": _body(view)}

    @router.post("/merge", response_model=PullRequestResponse)
    async def merge_pull_request(
        body: PullRequestMergeRequest,
        lifecycle: PullRequestLifecycle = Depends(get_lifecycle),  # noqa: B008
    ) -> dict[str, Any]:
        view = await lifecycle.merge_pull_request(body.pull_request_id)
        return {"pr": _body(view)}

    @router.post("/reassign", response_model=ReassignResponse)
    async def reassign_reviewer(
        body: PullRequestReassignRequest,
        reassigner: ReviewerReassigner = Depends(get_reassigner),  # noqa: B008
    ) -> dict[str, Any]:
        result = await reassigner.reassign_reviewer(
            body.pull_request_id,
            body.old_reviewer_id,
        )
        return {"pr": _body(result.pr), "replaced_by": result.replaced_by}

    return router
