"""On-demand replacement of a single reviewer on an open pull request.

Preconditions are evaluated in a fixed order and the first failure wins:
pull request exists, is not merged, the old reviewer exists, and is
currently assigned. A replacement must share the old reviewer's team, be
active, and be neither the old reviewer, the author, nor an existing
reviewer. The swap is one delete plus one insert, so the reviewer count is
unchanged.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from reviewkeeper.assignment.schemas import ReassignResult, load_pull_request_view
from reviewkeeper.assignment.selection import ReviewerPicker, eligible_candidates
from reviewkeeper.database.models.pull_request import PullRequestStatus
from reviewkeeper.database.queries.pull_request import get_pull_request
from reviewkeeper.database.queries.reviewer import (
    add_reviewer,
    get_reviewer_ids,
    remove_reviewer,
)
from reviewkeeper.database.queries.team import get_active_member_ids
from reviewkeeper.database.queries.user import get_user
from reviewkeeper.errors import (
    NoAvailableReviewerError,
    PullRequestMergedError,
    PullRequestNotFoundError,
    ReviewerNotAssignedError,
    UserNotFoundError,
)

logger = structlog.get_logger(__name__)

SessionFactory = Callable[[], AsyncSession]


class ReviewerReassigner:
    """Swaps one reviewer on a pull request for an eligible teammate.

    Attributes:
        session_factory: Callable that produces async database sessions.
        picker: Random source for replacement selection.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        picker: ReviewerPicker | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.picker = picker or ReviewerPicker()
        self._logger = logger.bind(component="ReviewerReassigner")

    async def reassign_reviewer(
        self,
        pull_request_id: str,
        old_reviewer_id: str,
    ) -> ReassignResult:
        """Replace old_reviewer_id on the pull request.

        Args:
            pull_request_id: Pull request to modify.
            old_reviewer_id: Reviewer to take off the pull request.

        Returns:
            The updated pull request view and the new reviewer's ID.

        Raises:
            PullRequestNotFoundError: No such pull request.
            PullRequestMergedError: The pull request is already merged.
            UserNotFoundError: old_reviewer_id does not exist.
            ReviewerNotAssignedError: old_reviewer_id does not review it.
            NoAvailableReviewerError: No eligible replacement; nothing changed.
        """
        async with self.session_factory() as session, session.begin():
            pull_request = await get_pull_request(session, pull_request_id, lock=True)
            if pull_request is None:
                self._logger.warning(
                    "pull_request_not_found", pull_request_id=pull_request_id
                )
                raise PullRequestNotFoundError(pull_request_id)

            if pull_request.status is PullRequestStatus.MERGED:
                self._logger.warning(
                    "reassign_on_merged_pull_request", pull_request_id=pull_request_id
                )
                raise PullRequestMergedError(pull_request_id)

            old_reviewer = await get_user(session, old_reviewer_id)
            if old_reviewer is None:
                self._logger.warning("reviewer_not_found", user_id=old_reviewer_id)
                raise UserNotFoundError(old_reviewer_id)

            current_reviewers = await get_reviewer_ids(session, pull_request_id, lock=True)
            if old_reviewer_id not in current_reviewers:
                self._logger.warning(
                    "reviewer_not_assigned",
                    pull_request_id=pull_request_id,
                    user_id=old_reviewer_id,
                )
                raise ReviewerNotAssignedError(pull_request_id, old_reviewer_id)

            candidates: list[str] = []
            if old_reviewer.team_name is not None:
                team_members = await get_active_member_ids(session, old_reviewer.team_name)
                candidates = eligible_candidates(
                    team_members,
                    exclude=[old_reviewer_id, pull_request.author_id, *current_reviewers],
                )

            new_reviewer_id = self.picker.choose(candidates)
            if new_reviewer_id is None:
                self._logger.warning(
                    "no_available_reviewer",
                    pull_request_id=pull_request_id,
                    old_reviewer_id=old_reviewer_id,
                )
                raise NoAvailableReviewerError(pull_request_id, old_reviewer_id)

            await remove_reviewer(session, pull_request_id, old_reviewer_id)
            await add_reviewer(session, pull_request_id, new_reviewer_id)

            view = await load_pull_request_view(session, pull_request)

        self._logger.info(
            "reviewer_reassigned",
            pull_request_id=pull_request_id,
            old_reviewer_id=old_reviewer_id,
            new_reviewer_id=new_reviewer_id,
            candidate_count=len(candidates),
        )
        return ReassignResult(pr=view, replaced_by=new_reviewer_id)
