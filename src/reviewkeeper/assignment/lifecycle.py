"""Pull request lifecycle: status transitions and read access.

The lifecycle has one transition, ``OPEN -> MERGED``, and MERGED is
terminal. Merging never touches the reviewer set. Merging a pull request
that is already merged is a no-op that keeps the original merge timestamp.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from reviewkeeper.assignment.schemas import PullRequestView, load_pull_request_view
from reviewkeeper.database.models.pull_request import PullRequest, PullRequestStatus
from reviewkeeper.database.queries.pull_request import (
    get_pull_request,
    set_pull_request_status,
)
from reviewkeeper.errors import InvalidTransitionError, PullRequestNotFoundError

logger = structlog.get_logger(__name__)

SessionFactory = Callable[[], AsyncSession]

# Authoritative state machine definition
VALID_TRANSITIONS: dict[PullRequestStatus, set[PullRequestStatus]] = {
    PullRequestStatus.OPEN: {PullRequestStatus.MERGED},
    PullRequestStatus.MERGED: set(),  # Terminal state
}


def validate_transition(current: PullRequestStatus, target: PullRequestStatus) -> bool:
    """Return True if VALID_TRANSITIONS allows current -> target."""
    return target in VALID_TRANSITIONS.get(current, set())


class PullRequestLifecycle:
    """Applies status transitions to pull requests.

    Attributes:
        session_factory: Callable that produces async database sessions.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self.session_factory = session_factory
        self._logger = logger.bind(component="PullRequestLifecycle")

    async def transition(
        self,
        session: AsyncSession,
        pull_request: PullRequest,
        target_status: PullRequestStatus,
    ) -> PullRequest:
        """Move a pull request to target_status inside the caller's transaction.

        Args:
            session: Session with an active transaction.
            pull_request: Loaded pull request.
            target_status: Desired status.

        Returns:
            The refreshed pull request.

        Raises:
            InvalidTransitionError: If VALID_TRANSITIONS forbids the move.
        """
        current_status = pull_request.status
        if not validate_transition(current_status, target_status):
            raise InvalidTransitionError(
                current_status.value, target_status.value, pull_request.id
            )

        merged_at = (
            datetime.now(timezone.utc)
            if target_status is PullRequestStatus.MERGED
            else None
        )
        await set_pull_request_status(session, pull_request, target_status, merged_at)

        self._logger.info(
            "pull_request_transition",
            pull_request_id=pull_request.id,
            from_status=current_status.value,
            to_status=target_status.value,
            merged_at=merged_at.isoformat() if merged_at else None,
        )
        return pull_request

    async def merge_pull_request(self, pull_request_id: str) -> PullRequestView:
        """Mark a pull request as MERGED.

        Args:
            pull_request_id: Pull request to merge.

        Returns:
            View of the merged pull request.

        Raises:
            PullRequestNotFoundError: No such pull request.
        """
        async with self.session_factory() as session, session.begin():
            pull_request = await get_pull_request(session, pull_request_id, lock=True)
            if pull_request is None:
                self._logger.warning(
                    "pull_request_not_found", pull_request_id=pull_request_id
                )
                raise PullRequestNotFoundError(pull_request_id)

            if pull_request.status is PullRequestStatus.MERGED:
                self._logger.info(
                    "pull_request_already_merged",
                    pull_request_id=pull_request_id,
                    merged_at=pull_request.merged_at.isoformat()
                    if pull_request.merged_at
                    else None,
                )
            else:
                await self.transition(session, pull_request, PullRequestStatus.MERGED)

            return await load_pull_request_view(session, pull_request)

    async def get_pull_request(self, pull_request_id: str) -> PullRequestView:
        """Read a pull request and its current reviewers.

        Raises:
            PullRequestNotFoundError: No such pull request.
        """
        async with self.session_factory() as session, session.begin():
            pull_request = await get_pull_request(session, pull_request_id)
            if pull_request is None:
                raise PullRequestNotFoundError(pull_request_id)
            return await load_pull_request_view(session, pull_request)
