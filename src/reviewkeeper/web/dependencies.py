"""FastAPI dependencies for Reviewkeeper routes.

Engines are cheap, stateless wrappers around the session factory and the
shared reviewer picker held in ``app.state``, so a fresh one is built per
request. Tests swap ``app.state.session_factory`` to point the whole API at
a disposable database.
"""

from __future__ import annotations

import hmac

from fastapi import Header, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from reviewkeeper.assignment import (
    DeactivationCascade,
    PullRequestLifecycle,
    ReviewerAssigner,
    ReviewerPicker,
    ReviewerReassigner,
    TeamMembershipManager,
)
from reviewkeeper.config import ReviewkeeperConfig
from reviewkeeper.errors import UnauthorizedError
from reviewkeeper.logging import get_logger

logger = get_logger(__name__)


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Dependency that retrieves session factory from app state."""
    return request.app.state.session_factory  # type: ignore[no-any-return]


def get_config(request: Request) -> ReviewkeeperConfig:
    return request.app.state.config  # type: ignore[no-any-return]


def get_picker(request: Request) -> ReviewerPicker:
    return request.app.state.picker  # type: ignore[no-any-return]


def get_assigner(request: Request) -> ReviewerAssigner:
    return ReviewerAssigner(
        get_session_factory(request),
        get_picker(request),
        get_config(request).assignment.reviewers_per_pull_request,
    )


def get_reassigner(request: Request) -> ReviewerReassigner:
    return ReviewerReassigner(get_session_factory(request), get_picker(request))


def get_cascade(request: Request) -> DeactivationCascade:
    return DeactivationCascade(get_session_factory(request), get_picker(request))


def get_lifecycle(request: Request) -> PullRequestLifecycle:
    return PullRequestLifecycle(get_session_factory(request))


def get_membership(request: Request) -> TeamMembershipManager:
    return TeamMembershipManager(
        get_session_factory(request),
        cascade=get_cascade(request),
    )


async def require_admin_token(
    request: Request,
    x_admin_token: str | None = Header(default=None),
) -> None:
    """Reject the request unless X-Admin-Token matches the configured token.

    When no admin token is configured the check is disabled.

    Raises:
        UnauthorizedError: The token is missing or wrong (401).
    """
    expected = get_config(request).web.admin_token
    if expected is None:
        return

    if x_admin_token is None or not hmac.compare_digest(x_admin_token, expected):
        logger.warning("admin_token_rejected", path=request.url.path)
        raise UnauthorizedError()
