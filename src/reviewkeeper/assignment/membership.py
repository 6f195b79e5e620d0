"""Team membership management.

Creates teams, reads their membership, toggles individual users' active
flag, and lists the pull requests a user currently reviews. Deactivating a
user who belongs to a team goes through the deactivation cascade for that
single user, so no open pull request is left with an inactive reviewer.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from reviewkeeper.assignment.cascade import DeactivationCascade
from reviewkeeper.assignment.schemas import (
    TeamMember,
    TeamView,
    UserReviews,
    UserView,
    load_team_view,
    short_view,
)
from reviewkeeper.assignment.selection import ReviewerPicker
from reviewkeeper.database.queries.pull_request import list_pull_requests_reviewed_by
from reviewkeeper.database.queries.team import create_team, team_exists
from reviewkeeper.database.queries.user import get_user, set_users_active, upsert_user
from reviewkeeper.errors import (
    TeamAlreadyExistsError,
    TeamNotFoundError,
    UserNotFoundError,
)

logger = structlog.get_logger(__name__)

SessionFactory = Callable[[], AsyncSession]


class TeamMembershipManager:
    """Owns teams, users and their active status.

    Attributes:
        session_factory: Callable that produces async database sessions.
        cascade: Deactivation cascade used when a single user is deactivated.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        picker: ReviewerPicker | None = None,
        cascade: DeactivationCascade | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.cascade = cascade or DeactivationCascade(session_factory, picker)
        self._logger = logger.bind(component="TeamMembershipManager")

    async def add_team(self, team_name: str, members: list[TeamMember]) -> TeamView:
        """Create a team and upsert its members.

        Existing users named in members are moved into this team with the
        given name and active flag.

        Args:
            team_name: Unique team name.
            members: Members to create or update.

        Returns:
            The created team with its full membership.

        Raises:
            TeamAlreadyExistsError: A team with this name exists.
        """
        async with self.session_factory() as session, session.begin():
            if await team_exists(session, team_name):
                self._logger.warning("team_already_exists", team_name=team_name)
                raise TeamAlreadyExistsError(team_name)

            await create_team(session, team_name)
            for member in members:
                await upsert_user(
                    session,
                    user_id=member.user_id,
                    name=member.username,
                    team_name=team_name,
                    is_active=member.is_active,
                )

            team = await load_team_view(session, team_name)

        self._logger.info(
            "team_created",
            team_name=team_name,
            member_count=len(team.members),
        )
        return team

    async def get_team(self, team_name: str) -> TeamView:
        """Read a team and all of its members.

        Raises:
            TeamNotFoundError: No such team.
        """
        async with self.session_factory() as session, session.begin():
            if not await team_exists(session, team_name):
                self._logger.warning("team_not_found", team_name=team_name)
                raise TeamNotFoundError(team_name)
            return await load_team_view(session, team_name)

    async def set_is_active(self, user_id: str, is_active: bool) -> UserView:
        """Activate or deactivate one user.

        Args:
            user_id: User to update.
            is_active: New flag value.

        Returns:
            The updated user.

        Raises:
            UserNotFoundError: No such user.
        """
        async with self.session_factory() as session, session.begin():
            user = await get_user(session, user_id, lock=True)
            if user is None:
                self._logger.warning("user_not_found", user_id=user_id)
                raise UserNotFoundError(user_id)

            reassigned = 0
            if not is_active and user.team_name is not None:
                result = await self.cascade.run(session, user.team_name, [user_id])
                reassigned = len(result.pull_requests)
            else:
                await set_users_active(session, [user_id], is_active)

            await session.refresh(user)
            view = UserView(
                user_id=user.id,
                username=user.name,
                team_name=user.team_name,
                is_active=user.is_active,
            )

        self._logger.info(
            "user_activity_updated",
            user_id=user_id,
            is_active=is_active,
            reassigned=reassigned,
        )
        return view

    async def get_user_reviews(self, user_id: str) -> UserReviews:
        """List pull requests currently assigned to the user for review.

        Raises:
            UserNotFoundError: No such user.
        """
        async with self.session_factory() as session, session.begin():
            user = await get_user(session, user_id)
            if user is None:
                self._logger.warning("user_not_found", user_id=user_id)
                raise UserNotFoundError(user_id)

            pull_requests = await list_pull_requests_reviewed_by(session, user_id)
            reviews = UserReviews(
                user_id=user_id,
                pull_requests=[short_view(pr) for pr in pull_requests],
            )

        self._logger.info(
            "user_reviews_retrieved",
            user_id=user_id,
            reviews_count=len(reviews.pull_requests),
        )
        return reviews
