"""Reviewer assignment query functions for Reviewkeeper.

Assignments are read as plain ID columns and written with Core insert and
delete statements, so no assignment entity ever lives in the session's
identity map. A delete followed by an insert for the same pull request is
therefore always safe inside one transaction.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewkeeper.database.models.pull_request import ReviewerAssignment


async def get_reviewer_ids(
    session: AsyncSession,
    pull_request_id: str,
    lock: bool = False,
) -> list[str]:
    """Get the IDs of all reviewers currently assigned to a pull request.

    Args:
        session: Active async database session.
        pull_request_id: Pull request to inspect.
        lock: Lock the assignment rows for update.

    Returns:
        Reviewer IDs sorted ascending.
    """
    stmt = (
        select(ReviewerAssignment.user_id)
        .where(ReviewerAssignment.pull_request_id == pull_request_id)
        .order_by(ReviewerAssignment.user_id)
    )
    if lock:
        stmt = stmt.with_for_update()
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def add_reviewer(
    session: AsyncSession,
    pull_request_id: str,
    user_id: str,
) -> None:
    """Insert a reviewer assignment stamped with the current time."""
    await session.execute(
        insert(ReviewerAssignment).values(
            pull_request_id=pull_request_id,
            user_id=user_id,
            assigned_at=datetime.now(timezone.utc),
        )
    )


async def remove_reviewer(
    session: AsyncSession,
    pull_request_id: str,
    user_id: str,
) -> int:
    """Delete a reviewer assignment.

    Returns:
        Number of rows deleted (0 or 1).
    """
    result = await session.execute(
        delete(ReviewerAssignment).where(
            ReviewerAssignment.pull_request_id == pull_request_id,
            ReviewerAssignment.user_id == user_id,
        )
    )
    return result.rowcount


async def list_assignments_for_users(
    session: AsyncSession,
    user_ids: list[str],
    lock: bool = False,
) -> list[tuple[str, str]]:
    """List the (pull_request_id, user_id) assignments held by any of the users.

    Args:
        session: Active async database session.
        user_ids: Reviewers to look up.
        lock: Lock the assignment rows for update.

    Returns:
        Pairs ordered by pull request ID, then user ID.
    """
    if not user_ids:
        return []
    stmt = (
        select(ReviewerAssignment.pull_request_id, ReviewerAssignment.user_id)
        .where(ReviewerAssignment.user_id.in_(user_ids))
        .order_by(ReviewerAssignment.pull_request_id, ReviewerAssignment.user_id)
    )
    if lock:
        stmt = stmt.with_for_update()
    result = await session.execute(stmt)
    return [(row.pull_request_id, row.user_id) for row in result.all()]
