"""Deactivation cascade: retire team members and repair their reviews.

Deactivating a batch of users is all-or-nothing. Once every user is
confirmed to belong to the team, the whole batch is flagged inactive and
each of their reviewer assignments is resolved independently:

- if an active teammate exists who is neither the pull request's author nor
  one of its other current reviewers, one is picked at random and takes
  over the assignment (a reassignment note is recorded);
- otherwise the assignment is dropped and the pull request keeps fewer
  reviewers.

Pull request status is not consulted. Deactivation is a membership event,
so merged pull requests have inactive reviewers removed as well.

Example:
    >>> cascade = DeactivationCascade(session_factory, ReviewerPicker(seed=3))
    >>> result = await cascade.deactivate_team_members("backend", ["u2"])
    >>> [note.replaced_by for note in result.pull_requests]
    ['u4']
"""

from __future__ import annotations

from collections.abc import Callable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from reviewkeeper.assignment.schemas import (
    DeactivationResult,
    ReassignmentNote,
    load_team_view,
)
from reviewkeeper.assignment.selection import ReviewerPicker, eligible_candidates
from reviewkeeper.database.queries.pull_request import get_pull_request
from reviewkeeper.database.queries.reviewer import (
    add_reviewer,
    get_reviewer_ids,
    list_assignments_for_users,
    remove_reviewer,
)
from reviewkeeper.database.queries.team import get_active_member_ids, team_exists
from reviewkeeper.database.queries.user import find_team_user_ids, set_users_active
from reviewkeeper.errors import TeamCompatibilityError, TeamNotFoundError

logger = structlog.get_logger(__name__)

SessionFactory = Callable[[], AsyncSession]


class DeactivationCascade:
    """Deactivates team members and reassigns or drops their reviews.

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
        self._logger = logger.bind(component="DeactivationCascade")

    async def deactivate_team_members(
        self,
        team_name: str,
        user_ids: list[str],
    ) -> DeactivationResult:
        """Deactivate a batch of team members in one transaction.

        Args:
            team_name: Team the users must all belong to.
            user_ids: Users to deactivate. Duplicates are ignored.

        Returns:
            The team's membership after the cascade and one note per
            assignment that was handed to a new reviewer.

        Raises:
            TeamNotFoundError: The team does not exist.
            TeamCompatibilityError: Some user is not in the team; nothing changed.
        """
        async with self.session_factory() as session, session.begin():
            return await self.run(session, team_name, user_ids)

    async def run(
        self,
        session: AsyncSession,
        team_name: str,
        user_ids: list[str],
    ) -> DeactivationResult:
        """Execute the cascade inside a transaction owned by the caller.

        Args:
            session: Session with an active transaction.
            team_name: Team the users must all belong to.
            user_ids: Users to deactivate.

        Returns:
            DeactivationResult for the batch.
        """
        requested = list(dict.fromkeys(user_ids))

        if not await team_exists(session, team_name):
            self._logger.warning("team_not_found", team_name=team_name)
            raise TeamNotFoundError(team_name)

        members = await find_team_user_ids(session, team_name, requested, lock=True)
        outsiders = [user_id for user_id in requested if user_id not in members]
        if outsiders:
            self._logger.warning(
                "users_outside_team",
                team_name=team_name,
                user_ids=outsiders,
            )
            raise TeamCompatibilityError(team_name, outsiders)

        await set_users_active(session, requested, False)

        active_members = await get_active_member_ids(session, team_name)
        affected = await list_assignments_for_users(session, requested, lock=True)

        notes: list[ReassignmentNote] = []
        dropped = 0
        for pull_request_id, old_reviewer_id in affected:
            pull_request = await get_pull_request(session, pull_request_id)
            other_reviewers = [
                reviewer_id
                for reviewer_id in await get_reviewer_ids(session, pull_request_id, lock=True)
                if reviewer_id != old_reviewer_id
            ]
            exclude = list(other_reviewers)
            if pull_request is not None:
                exclude.append(pull_request.author_id)

            new_reviewer_id = self.picker.choose(
                eligible_candidates(active_members, exclude=exclude)
            )

            await remove_reviewer(session, pull_request_id, old_reviewer_id)
            if new_reviewer_id is None:
                dropped += 1
                self._logger.info(
                    "reviewer_dropped",
                    pull_request_id=pull_request_id,
                    old_reviewer_id=old_reviewer_id,
                )
                continue

            await add_reviewer(session, pull_request_id, new_reviewer_id)
            notes.append(
                ReassignmentNote(
                    pull_request_id=pull_request_id,
                    old_reviewer_id=old_reviewer_id,
                    replaced_by=new_reviewer_id,
                )
            )

        team = await load_team_view(session, team_name)

        self._logger.info(
            "team_members_deactivated",
            team_name=team_name,
            user_ids=requested,
            affected_assignments=len(affected),
            reassigned=len(notes),
            dropped=dropped,
        )
        return DeactivationResult(team=team, pull_requests=notes)
