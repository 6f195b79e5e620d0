"""Unit tests for the pull request state machine.

Tests cover:
- VALID_TRANSITIONS covering every status
- Allowed and forbidden transitions
- merged_at stamping when a pull request is merged
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from reviewkeeper.assignment.lifecycle import (
    VALID_TRANSITIONS,
    PullRequestLifecycle,
    validate_transition,
)
from reviewkeeper.database.models.pull_request import PullRequestStatus
from reviewkeeper.errors import InvalidTransitionError


class TestValidTransitions:
    def test_every_status_is_defined(self) -> None:
        assert set(VALID_TRANSITIONS) == set(PullRequestStatus)

    def test_merged_is_terminal(self) -> None:
        assert VALID_TRANSITIONS[PullRequestStatus.MERGED] == set()

    @pytest.mark.parametrize(
        "current,target,expected",
        [
            (PullRequestStatus.OPEN, PullRequestStatus.MERGED, True),
            (PullRequestStatus.OPEN, PullRequestStatus.OPEN, False),
            (PullRequestStatus.MERGED, PullRequestStatus.OPEN, False),
            (PullRequestStatus.MERGED, PullRequestStatus.MERGED, False),
        ],
    )
    def test_validate_transition(
        self,
        current: PullRequestStatus,
        target: PullRequestStatus,
        expected: bool,
    ) -> None:
        assert validate_transition(current, target) is expected


def _pull_request(status: PullRequestStatus) -> MagicMock:
    pull_request = MagicMock()
    pull_request.id = "pr-1"
    pull_request.status = status
    return pull_request


class TestTransition:
    """Test PullRequestLifecycle.transition against a mocked session."""

    async def test_merge_sets_merged_at(self) -> None:
        lifecycle = PullRequestLifecycle(session_factory=MagicMock())
        session = AsyncMock()
        pull_request = _pull_request(PullRequestStatus.OPEN)

        with patch(
            "reviewkeeper.assignment.lifecycle.set_pull_request_status",
            new_callable=AsyncMock,
        ) as set_status:
            result = await lifecycle.transition(session, pull_request, PullRequestStatus.MERGED)

        assert result is pull_request
        set_status.assert_awaited_once()
        args = set_status.await_args.args
        assert args[0] is session
        assert args[2] is PullRequestStatus.MERGED
        assert args[3] is not None
        assert args[3].tzinfo is not None

    async def test_merged_cannot_reopen(self) -> None:
        lifecycle = PullRequestLifecycle(session_factory=MagicMock())
        pull_request = _pull_request(PullRequestStatus.MERGED)

        with patch(
            "reviewkeeper.assignment.lifecycle.set_pull_request_status",
            new_callable=AsyncMock,
        ) as set_status:
            with pytest.raises(InvalidTransitionError) as exc_info:
                await lifecycle.transition(AsyncMock(), pull_request, PullRequestStatus.OPEN)

        set_status.assert_not_awaited()
        assert exc_info.value.current == "MERGED"
        assert exc_info.value.target == "OPEN"
        assert exc_info.value.code == "INVALID_TRANSITION"
        assert "pr-1" in exc_info.value.message
