"""Lookup indexes for Reviewkeeper.

Covers the membership scan used for candidate selection, the author lookup
and the per-user reviewer scan used by deactivation and review listings.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_index("ix_users_team_name", "users", ["team_name"])
    op.create_index("ix_pull_requests_author_id", "pull_requests", ["author_id"])
    op.create_index("ix_reviewers_user_id", "reviewers", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_reviewers_user_id", table_name="reviewers")
    op.drop_index("ix_pull_requests_author_id", table_name="pull_requests")
    op.drop_index("ix_users_team_name", table_name="users")
