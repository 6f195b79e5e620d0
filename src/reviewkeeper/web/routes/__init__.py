"""Route factories for the Reviewkeeper HTTP API."""

from __future__ import annotations

from reviewkeeper.web.routes.health import create_health_router
from reviewkeeper.web.routes.pull_requests import create_pull_requests_router
from reviewkeeper.web.routes.teams import create_teams_router
from reviewkeeper.web.routes.users import create_users_router

__all__ = [
    "create_health_router",
    "create_teams_router",
    "create_users_router",
    "create_pull_requests_router",
]
