"""User query functions for Reviewkeeper.

These helpers run inside a transaction owned by the caller.
"""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from reviewkeeper.database.models.team import User


async def get_user(
    session: AsyncSession,
    user_id: str,
    lock: bool = False,
) -> User | None:
    """Retrieve a user by ID.

    Args:
        session: Active async database session.
        user_id: ID of the user to retrieve.
        lock: Lock the row for update.

    Returns:
        The User instance if found, None otherwise.
    """
    stmt = select(User).where(User.id == user_id)
    if lock:
        stmt = stmt.with_for_update()
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def upsert_user(
    session: AsyncSession,
    user_id: str,
    name: str,
    team_name: str | None,
    is_active: bool,
) -> User:
    """Insert a user or overwrite the name, team and active flag of an existing one.

    Args:
        session: Active async database session.
        user_id: Externally issued user ID.
        name: Display name.
        team_name: Team to place the user in.
        is_active: Active flag to store.

    Returns:
        The inserted or updated User instance.
    """
    user = await session.get(User, user_id)
    if user is None:
        user = User(id=user_id, name=name, team_name=team_name, is_active=is_active)
        session.add(user)
    else:
        user.name = name
        user.team_name = team_name
        user.is_active = is_active

    await session.flush()
    return user


async def find_team_user_ids(
    session: AsyncSession,
    team_name: str,
    user_ids: list[str],
    lock: bool = False,
) -> set[str]:
    """Return the subset of user_ids that belong to the team."""
    if not user_ids:
        return set()
    stmt = (
        select(User.id)
        .where(User.team_name == team_name)
        .where(User.id.in_(user_ids))
    )
    if lock:
        stmt = stmt.with_for_update()
    result = await session.execute(stmt)
    return set(result.scalars().all())


async def set_users_active(
    session: AsyncSession,
    user_ids: list[str],
    is_active: bool,
) -> int:
    """Set the active flag on a batch of users.

    Args:
        session: Active async database session.
        user_ids: Users to update.
        is_active: New flag value.

    Returns:
        Number of rows updated.
    """
    if not user_ids:
        return 0
    stmt = (
        update(User)
        .where(User.id.in_(user_ids))
        .values(is_active=is_active)
        .execution_options(synchronize_session="fetch")
    )
    result = await session.execute(stmt)
    return result.rowcount
