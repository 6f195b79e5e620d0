"""Integration tests for initial reviewer assignment."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from reviewkeeper.assignment import ReviewerAssigner, ReviewerPicker
from reviewkeeper.database.models import PullRequest
from reviewkeeper.database.queries.user import upsert_user
from reviewkeeper.errors import (
    PullRequestAlreadyExistsError,
    TeamNotFoundError,
    UserNotFoundError,
)


async def _count_pull_requests(session_factory) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(PullRequest))


@pytest.mark.integration
class TestCreatePullRequest:
    async def test_three_member_team_gets_both_teammates(self, make_team, assigner, read_reviewers):
        await make_team("backend", "A", "B", "C")

        view = await assigner.create_pull_request("pr1", "Add search", "A")

        assert sorted(view.assigned_reviewers) == ["B", "C"]
        assert view.status == "OPEN"
        assert view.author_id == "A"
        assert view.pull_request_name == "Add search"
        assert view.merged_at is None
        assert view.created_at is not None
        assert await read_reviewers("pr1") == ["B", "C"]

    @pytest.mark.parametrize(
        "members,inactive,expected_count",
        [
            (("A", "B"), (), 1),
            (("A", "B", "C"), (), 2),
            (("A", "B", "C", "D", "E"), (), 2),
            (("A", "B", "C", "D"), ("B", "C"), 1),
        ],
    )
    async def test_reviewer_count_is_min_of_two_and_active_teammates(
        self, make_team, assigner, members, inactive, expected_count
    ):
        await make_team("backend", *members, inactive=inactive)

        view = await assigner.create_pull_request("pr1", "Refactor", "A")

        assert len(view.assigned_reviewers) == expected_count
        assert "A" not in view.assigned_reviewers
        assert not set(view.assigned_reviewers) & set(inactive)

    async def test_reviewers_come_from_authors_team_only(self, make_team, assigner):
        await make_team("backend", "A", "B")
        await make_team("frontend", "F1", "F2", "F3")

        view = await assigner.create_pull_request("pr1", "Fix login", "A")

        assert view.assigned_reviewers == ["B"]

    async def test_configured_reviewer_limit(self, make_team, session_factory):
        await make_team("backend", "A", "B", "C", "D", "E")
        assigner = ReviewerAssigner(
            session_factory,
            ReviewerPicker(seed=7),
            reviewers_per_pull_request=3,
        )

        view = await assigner.create_pull_request("pr1", "Wide review", "A")

        assert len(view.assigned_reviewers) == 3

    async def test_seeded_pickers_make_same_choice(self, make_team, session_factory):
        await make_team("backend", "A", "B", "C", "D", "E", "F")

        first = await ReviewerAssigner(session_factory, ReviewerPicker(seed=99)).create_pull_request(
            "pr1", "One", "A"
        )
        second = await ReviewerAssigner(session_factory, ReviewerPicker(seed=99)).create_pull_request(
            "pr2", "Two", "A"
        )

        assert sorted(first.assigned_reviewers) == sorted(second.assigned_reviewers)


@pytest.mark.integration
class TestCreatePullRequestFailures:
    async def test_duplicate_id(self, make_team, assigner, read_reviewers):
        await make_team("backend", "A", "B", "C")
        await assigner.create_pull_request("pr1", "First", "A")
        before = await read_reviewers("pr1")

        with pytest.raises(PullRequestAlreadyExistsError) as exc_info:
            await assigner.create_pull_request("pr1", "Second", "B")

        assert exc_info.value.code == "PR_EXISTS"
        assert await read_reviewers("pr1") == before

    async def test_duplicate_checked_before_author(self, make_team, assigner):
        await make_team("backend", "A", "B")
        await assigner.create_pull_request("pr1", "First", "A")

        with pytest.raises(PullRequestAlreadyExistsError):
            await assigner.create_pull_request("pr1", "Second", "ghost")

    async def test_unknown_author(self, assigner, session_factory):
        with pytest.raises(UserNotFoundError):
            await assigner.create_pull_request("pr1", "Orphan", "ghost")

        assert await _count_pull_requests(session_factory) == 0

    async def test_author_without_team(self, assigner, session_factory):
        async with session_factory() as session, session.begin():
            await upsert_user(
                session, user_id="loner", name="Loner", team_name=None, is_active=True
            )

        with pytest.raises(TeamNotFoundError) as exc_info:
            await assigner.create_pull_request("pr1", "Alone", "loner")

        assert exc_info.value.code == "NOT_FOUND"
        assert exc_info.value.team_name is None
        assert await _count_pull_requests(session_factory) == 0

    async def test_author_alone_in_team(self, make_team, assigner, session_factory):
        await make_team("solo", "S")

        with pytest.raises(TeamNotFoundError):
            await assigner.create_pull_request("pr1", "Alone", "S")

        assert await _count_pull_requests(session_factory) == 0

    async def test_all_teammates_inactive(self, make_team, assigner, session_factory):
        await make_team("backend", "A", "B", "C", inactive=("B", "C"))

        with pytest.raises(TeamNotFoundError):
            await assigner.create_pull_request("pr1", "Nobody home", "A")

        assert await _count_pull_requests(session_factory) == 0
