"""Database query functions for Reviewkeeper.

Async helpers over an AsyncSession for every entity:
- Team existence, creation and membership reads
- User lookup, upsert and activation flags
- Pull request lookup, creation and status updates
- Reviewer assignment reads and writes

None of these functions manages transactions; the assignment engines wrap
each operation in a single ``session.begin()`` block.
"""

from reviewkeeper.database.queries.pull_request import (
    create_pull_request,
    get_pull_request,
    list_pull_requests_reviewed_by,
    pull_request_exists,
    set_pull_request_status,
)
from reviewkeeper.database.queries.reviewer import (
    add_reviewer,
    get_reviewer_ids,
    list_assignments_for_users,
    remove_reviewer,
)
from reviewkeeper.database.queries.team import (
    create_team,
    get_active_member_ids,
    list_team_members,
    team_exists,
)
from reviewkeeper.database.queries.user import (
    find_team_user_ids,
    get_user,
    set_users_active,
    upsert_user,
)

__all__ = [
    # Team queries
    "team_exists",
    "create_team",
    "list_team_members",
    "get_active_member_ids",
    # User queries
    "get_user",
    "upsert_user",
    "find_team_user_ids",
    "set_users_active",
    # Pull request queries
    "pull_request_exists",
    "get_pull_request",
    "create_pull_request",
    "set_pull_request_status",
    "list_pull_requests_reviewed_by",
    # Reviewer queries
    "get_reviewer_ids",
    "add_reviewer",
    "remove_reviewer",
    "list_assignments_for_users",
]
