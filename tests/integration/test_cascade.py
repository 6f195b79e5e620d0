"""Integration tests for the deactivation cascade."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from reviewkeeper.database.models import User
from reviewkeeper.errors import TeamCompatibilityError, TeamNotFoundError


async def _active_flags(session_factory, *user_ids: str) -> dict[str, bool]:
    async with session_factory() as session:
        result = await session.execute(
            select(User.id, User.is_active).where(User.id.in_(user_ids))
        )
        return {user_id: is_active for user_id, is_active in result.all()}


@pytest.mark.integration
class TestDeactivateTeamMembers:
    async def test_reviewer_dropped_when_only_author_remains(
        self, make_team, assigner, cascade, read_reviewers
    ):
        await make_team("backend", "A", "B", "C")
        created = await assigner.create_pull_request("pr1", "Add search", "A")
        assert sorted(created.assigned_reviewers) == ["B", "C"]

        result = await cascade.deactivate_team_members("backend", ["B"])

        assert result.pull_requests == []
        assert await read_reviewers("pr1") == ["C"]
        members = {m.user_id: m.is_active for m in result.team.members}
        assert members == {"A": True, "B": False, "C": True}

    async def test_reviewer_replaced_by_remaining_teammate(
        self, make_team, seed_pull_request, cascade, read_reviewers
    ):
        await make_team("backend", "A", "B", "C", "D")
        await seed_pull_request("pr1", "A", ["B", "C"])

        result = await cascade.deactivate_team_members("backend", ["B"])

        assert len(result.pull_requests) == 1
        note = result.pull_requests[0]
        assert note.pull_request_id == "pr1"
        assert note.old_reviewer_id == "B"
        assert note.replaced_by == "D"
        assert await read_reviewers("pr1") == ["C", "D"]

    async def test_batch_across_several_pull_requests(
        self, make_team, seed_pull_request, cascade, read_reviewers
    ):
        await make_team("backend", "A", "B", "C", "D", "E", "F")
        await seed_pull_request("pr1", "A", ["B", "C"])
        await seed_pull_request("pr2", "D", ["B", "E"])
        await seed_pull_request("pr3", "E", ["C", "F"])

        result = await cascade.deactivate_team_members("backend", ["B", "C"])

        # Four affected assignments, each with at least one candidate
        assert len(result.pull_requests) == 4
        deactivated = {"B", "C"}
        for pull_request_id, author in (("pr1", "A"), ("pr2", "D"), ("pr3", "E")):
            reviewers = await read_reviewers(pull_request_id)
            assert len(reviewers) == 2
            assert not deactivated & set(reviewers)
            assert author not in reviewers
        for note in result.pull_requests:
            assert note.old_reviewer_id in deactivated
            assert note.replaced_by not in deactivated

    async def test_both_reviewers_deactivated_together(
        self, make_team, seed_pull_request, cascade, read_reviewers
    ):
        await make_team("backend", "A", "B", "C", "D")
        await seed_pull_request("pr1", "A", ["B", "C"])

        result = await cascade.deactivate_team_members("backend", ["B", "C"])

        # Only D is eligible; it takes one slot and the other is dropped
        assert [note.replaced_by for note in result.pull_requests] == ["D"]
        assert await read_reviewers("pr1") == ["D"]

    async def test_merged_pull_requests_are_repaired_too(
        self, make_team, seed_pull_request, lifecycle, cascade, read_reviewers
    ):
        await make_team("backend", "A", "B", "C", "D")
        await seed_pull_request("pr1", "A", ["B", "C"])
        await lifecycle.merge_pull_request("pr1")

        result = await cascade.deactivate_team_members("backend", ["B"])

        assert [(n.pull_request_id, n.replaced_by) for n in result.pull_requests] == [
            ("pr1", "D")
        ]
        assert await read_reviewers("pr1") == ["C", "D"]

    async def test_second_call_is_idempotent(
        self, make_team, seed_pull_request, cascade, read_reviewers
    ):
        await make_team("backend", "A", "B", "C", "D")
        await seed_pull_request("pr1", "A", ["B", "C"])
        await cascade.deactivate_team_members("backend", ["B"])
        reviewers_after_first = await read_reviewers("pr1")

        result = await cascade.deactivate_team_members("backend", ["B"])

        assert result.pull_requests == []
        assert await read_reviewers("pr1") == reviewers_after_first

    async def test_duplicate_ids_are_collapsed(
        self, make_team, seed_pull_request, cascade, session_factory
    ):
        await make_team("backend", "A", "B", "C", "D")
        await seed_pull_request("pr1", "A", ["B"])

        result = await cascade.deactivate_team_members("backend", ["B", "B"])

        assert len(result.pull_requests) == 1
        assert await _active_flags(session_factory, "B") == {"B": False}

    async def test_user_without_assignments(self, make_team, cascade, session_factory):
        await make_team("backend", "A", "B")

        result = await cascade.deactivate_team_members("backend", ["B"])

        assert result.pull_requests == []
        assert await _active_flags(session_factory, "A", "B") == {"A": True, "B": False}


@pytest.mark.integration
class TestDeactivateTeamMembersFailures:
    async def test_unknown_team(self, cascade):
        with pytest.raises(TeamNotFoundError):
            await cascade.deactivate_team_members("ghosts", ["u1"])

    async def test_outsider_fails_whole_batch(
        self, make_team, seed_pull_request, cascade, read_reviewers, session_factory
    ):
        await make_team("backend", "A", "B", "C", "D")
        await make_team("frontend", "F1", "F2")
        await seed_pull_request("pr1", "A", ["B", "C"])

        with pytest.raises(TeamCompatibilityError) as exc_info:
            await cascade.deactivate_team_members("backend", ["B", "F1", "ghost"])

        assert exc_info.value.code == "TEAM_COMPATIBILITY"
        assert exc_info.value.user_ids == ["F1", "ghost"]
        assert await _active_flags(session_factory, "B", "F1") == {"B": True, "F1": True}
        assert await read_reviewers("pr1") == ["B", "C"]
