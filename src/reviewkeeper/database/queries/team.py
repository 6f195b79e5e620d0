"""Team and membership query functions for Reviewkeeper.

These helpers run inside a transaction owned by the caller; none of them
begins, commits, or rolls back.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewkeeper.database.models.team import Team, User


async def team_exists(session: AsyncSession, name: str) -> bool:
    """Return True if a team row with this name exists."""
    stmt = select(exists().where(Team.name == name))
    return bool(await session.scalar(stmt))


async def create_team(session: AsyncSession, name: str) -> Team:
    """Insert a new team row.

    Args:
        session: Active async database session.
        name: Unique team name.

    Returns:
        The newly created Team instance.
    """
    team = Team(name=name)
    session.add(team)
    await session.flush()
    return team


async def list_team_members(session: AsyncSession, name: str) -> list[User]:
    """List every user whose team_name matches, active or not.

    Args:
        session: Active async database session.
        name: Team name.

    Returns:
        Users ordered by ID.
    """
    stmt = select(User).where(User.team_name == name).order_by(User.id)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_active_member_ids(
    session: AsyncSession,
    team_name: str,
    exclude: Iterable[str] = (),
    lock: bool = False,
) -> list[str]:
    """Get IDs of active members of a team.

    Args:
        session: Active async database session.
        team_name: Team whose members to read.
        exclude: User IDs to leave out of the result.
        lock: Take row-level locks (SELECT ... FOR UPDATE) on the rows read.

    Returns:
        Active member IDs sorted ascending.
    """
    excluded = list(exclude)
    stmt = (
        select(User.id)
        .where(User.team_name == team_name)
        .where(User.is_active.is_(True))
        .order_by(User.id)
    )
    if excluded:
        stmt = stmt.where(User.id.not_in(excluded))
    if lock:
        stmt = stmt.with_for_update()

    result = await session.execute(stmt)
    return list(result.scalars().all())
