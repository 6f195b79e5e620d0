"""Pytest fixtures for integration tests.

The engines run against an in-memory SQLite database through aiosqlite.
StaticPool keeps a single connection so every session created by the
engines sees the same database. SQLite ignores ``FOR UPDATE``, which is
fine here: these tests exercise the rules, not lock contention.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from reviewkeeper.assignment import (
    DeactivationCascade,
    PullRequestLifecycle,
    ReviewerAssigner,
    ReviewerPicker,
    ReviewerReassigner,
    TeamMember,
    TeamMembershipManager,
)
from reviewkeeper.config import AssignmentConfig, ReviewkeeperConfig
from reviewkeeper.database.connection import create_schema
from reviewkeeper.database.queries.pull_request import create_pull_request
from reviewkeeper.database.queries.reviewer import add_reviewer, get_reviewer_ids
from reviewkeeper.web.app import create_app


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite engine with the full schema."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(test_engine)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def picker() -> ReviewerPicker:
    """Seeded picker so random choices repeat across runs."""
    return ReviewerPicker(seed=1234)


@pytest.fixture
def membership(session_factory, picker) -> TeamMembershipManager:
    return TeamMembershipManager(session_factory, picker)


@pytest.fixture
def assigner(session_factory, picker) -> ReviewerAssigner:
    return ReviewerAssigner(session_factory, picker)


@pytest.fixture
def reassigner(session_factory, picker) -> ReviewerReassigner:
    return ReviewerReassigner(session_factory, picker)


@pytest.fixture
def cascade(session_factory, picker) -> DeactivationCascade:
    return DeactivationCascade(session_factory, picker)


@pytest.fixture
def lifecycle(session_factory) -> PullRequestLifecycle:
    return PullRequestLifecycle(session_factory)


@pytest.fixture
def make_team(membership: TeamMembershipManager):
    """Factory fixture: ``await make_team("backend", "u1", "u2", inactive=["u2"])``."""

    async def _make_team(team_name: str, *user_ids: str, inactive: tuple[str, ...] = ()):
        members = [
            TeamMember(
                user_id=user_id,
                username=f"user {user_id}",
                is_active=user_id not in inactive,
            )
            for user_id in user_ids
        ]
        return await membership.add_team(team_name, members)

    return _make_team


@pytest.fixture
def test_config() -> ReviewkeeperConfig:
    return ReviewkeeperConfig(assignment=AssignmentConfig(random_seed=1234))


@pytest_asyncio.fixture
async def async_client(
    test_config: ReviewkeeperConfig,
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for an app wired to the test database.

    ASGITransport does not run the lifespan, so the session factory is
    placed on app.state directly.
    """
    app = create_app(test_config)
    app.state.session_factory = session_factory
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def seed_pull_request(session_factory):
    """Factory fixture inserting an OPEN pull request with a fixed reviewer set."""

    async def _seed(pull_request_id: str, author_id: str, reviewers: list[str]) -> None:
        async with session_factory() as session, session.begin():
            await create_pull_request(
                session,
                pull_request_id=pull_request_id,
                name=f"Change {pull_request_id}",
                author_id=author_id,
            )
            for reviewer_id in reviewers:
                await add_reviewer(session, pull_request_id, reviewer_id)

    return _seed


@pytest.fixture
def read_reviewers(session_factory):
    """Factory fixture returning the sorted reviewer IDs of a pull request."""

    async def _read(pull_request_id: str) -> list[str]:
        async with session_factory() as session:
            return await get_reviewer_ids(session, pull_request_id)

    return _read
