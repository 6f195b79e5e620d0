"""Initial reviewer assignment for newly opened pull requests.

When a pull request is created, up to ``reviewers_per_pull_request`` active
teammates of the author (never the author) are picked uniformly at random
and assigned in the same transaction that inserts the pull request row.

All preconditions are checked before any write. The teammate snapshot is
read with ``SELECT ... FOR UPDATE`` so two pull requests opened against the
same team at the same moment serialize on the member rows instead of
selecting from the same unlocked snapshot.

Example:
    >>> assigner = ReviewerAssigner(session_factory, ReviewerPicker(seed=1))
    >>> view = await assigner.create_pull_request("pr-1", "Add login", "u1")
    >>> view.assigned_reviewers
    ['u3', 'u2']
"""

from __future__ import annotations

from collections.abc import Callable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from reviewkeeper.assignment.schemas import PullRequestView, load_pull_request_view
from reviewkeeper.assignment.selection import ReviewerPicker
from reviewkeeper.database.queries.pull_request import (
    create_pull_request,
    pull_request_exists,
)
from reviewkeeper.database.queries.reviewer import add_reviewer
from reviewkeeper.database.queries.team import get_active_member_ids
from reviewkeeper.database.queries.user import get_user
from reviewkeeper.errors import (
    PullRequestAlreadyExistsError,
    TeamNotFoundError,
    UserNotFoundError,
)

logger = structlog.get_logger(__name__)

SessionFactory = Callable[[], AsyncSession]

DEFAULT_REVIEWERS_PER_PULL_REQUEST = 2


class ReviewerAssigner:
    """Creates pull requests together with their initial reviewer set.

    Attributes:
        session_factory: Callable that produces async database sessions.
        picker: Random source for reviewer selection.
        reviewers_per_pull_request: Upper bound K on initial reviewers.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        picker: ReviewerPicker | None = None,
        reviewers_per_pull_request: int = DEFAULT_REVIEWERS_PER_PULL_REQUEST,
    ) -> None:
        self.session_factory = session_factory
        self.picker = picker or ReviewerPicker()
        self.reviewers_per_pull_request = reviewers_per_pull_request
        self._logger = logger.bind(component="ReviewerAssigner")

    async def create_pull_request(
        self,
        pull_request_id: str,
        name: str,
        author_id: str,
    ) -> PullRequestView:
        """Open a pull request and assign its initial reviewers.

        Args:
            pull_request_id: Caller-supplied unique ID.
            name: Pull request title.
            author_id: ID of the authoring user.

        Returns:
            View of the new OPEN pull request; ``assigned_reviewers`` holds
            the IDs picked by this call.

        Raises:
            PullRequestAlreadyExistsError: The ID is already taken.
            UserNotFoundError: The author does not exist.
            TeamNotFoundError: The author has no team, or no active teammate.
        """
        async with self.session_factory() as session, session.begin():
            if await pull_request_exists(session, pull_request_id):
                self._logger.warning(
                    "pull_request_already_exists",
                    pull_request_id=pull_request_id,
                )
                raise PullRequestAlreadyExistsError(pull_request_id)

            author = await get_user(session, author_id)
            if author is None:
                self._logger.warning("author_not_found", author_id=author_id)
                raise UserNotFoundError(author_id)

            if author.team_name is None:
                self._logger.warning("author_without_team", author_id=author_id)
                raise TeamNotFoundError(None, f"author {author_id} has no team")

            teammates = await get_active_member_ids(
                session,
                author.team_name,
                exclude=[author_id],
                lock=True,
            )
            if not teammates:
                self._logger.warning(
                    "no_active_teammates",
                    author_id=author_id,
                    team_name=author.team_name,
                )
                raise TeamNotFoundError(
                    author.team_name,
                    f"no active teammates for author {author_id}",
                )

            reviewers = self.picker.sample(teammates, self.reviewers_per_pull_request)

            pull_request = await create_pull_request(
                session,
                pull_request_id=pull_request_id,
                name=name,
                author_id=author_id,
            )
            for reviewer_id in reviewers:
                await add_reviewer(session, pull_request_id, reviewer_id)

            view = await load_pull_request_view(session, pull_request)

        self._logger.info(
            "pull_request_created",
            pull_request_id=pull_request_id,
            author_id=author_id,
            team_name=author.team_name,
            reviewers=reviewers,
            candidate_count=len(teammates),
        )
        return view
