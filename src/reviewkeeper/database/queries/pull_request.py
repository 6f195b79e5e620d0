"""Pull request query functions for Reviewkeeper.

Provides lookups, creation, status changes, and the per-reviewer listing
used by the user review endpoint. The caller owns the transaction.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from reviewkeeper.database.models.pull_request import (
    STATUS_IDS,
    PullRequest,
    PullRequestStatus,
    ReviewerAssignment,
)


async def pull_request_exists(session: AsyncSession, pull_request_id: str) -> bool:
    """Return True if a pull request with this ID exists."""
    stmt = select(exists().where(PullRequest.id == pull_request_id))
    return bool(await session.scalar(stmt))


async def get_pull_request(
    session: AsyncSession,
    pull_request_id: str,
    lock: bool = False,
) -> PullRequest | None:
    """Retrieve a pull request by ID with its status row loaded.

    Args:
        session: Active async database session.
        pull_request_id: ID of the pull request.
        lock: Lock the pull request row (not the status lookup) for update.

    Returns:
        The PullRequest if found, None otherwise.
    """
    stmt = select(PullRequest).where(PullRequest.id == pull_request_id)
    if lock:
        stmt = stmt.with_for_update(of=PullRequest)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_pull_request(
    session: AsyncSession,
    pull_request_id: str,
    name: str,
    author_id: str,
) -> PullRequest:
    """Insert a new OPEN pull request.

    Args:
        session: Active async database session.
        pull_request_id: Caller-supplied unique ID.
        name: Pull request title.
        author_id: ID of the authoring user.

    Returns:
        The newly created PullRequest, refreshed with server defaults.
    """
    pull_request = PullRequest(
        id=pull_request_id,
        name=name,
        author_id=author_id,
        status_id=STATUS_IDS[PullRequestStatus.OPEN],
    )
    session.add(pull_request)
    await session.flush()
    await session.refresh(pull_request)
    return pull_request


async def set_pull_request_status(
    session: AsyncSession,
    pull_request: PullRequest,
    status: PullRequestStatus,
    merged_at: datetime | None = None,
) -> PullRequest:
    """Persist a new status (and merge timestamp) on a pull request.

    Args:
        session: Active async database session.
        pull_request: Loaded pull request to update.
        status: Target status.
        merged_at: Merge timestamp; must be set iff status is MERGED.

    Returns:
        The refreshed PullRequest.
    """
    stmt = (
        update(PullRequest)
        .where(PullRequest.id == pull_request.id)
        .values(status_id=STATUS_IDS[status], merged_at=merged_at)
        .execution_options(synchronize_session=False)
    )
    await session.execute(stmt)
    await session.refresh(pull_request)
    return pull_request


async def list_pull_requests_reviewed_by(
    session: AsyncSession,
    user_id: str,
) -> list[PullRequest]:
    """List every pull request the user is currently assigned to review.

    Args:
        session: Active async database session.
        user_id: Reviewer ID.

    Returns:
        Pull requests ordered by creation time, then ID.
    """
    stmt = (
        select(PullRequest)
        .join(ReviewerAssignment, ReviewerAssignment.pull_request_id == PullRequest.id)
        .where(ReviewerAssignment.user_id == user_id)
        .order_by(PullRequest.created_at, PullRequest.id)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
