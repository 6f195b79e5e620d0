"""Initial schema for Reviewkeeper.

Creates teams, users, the statuses lookup table (seeded with OPEN and
MERGED), pull_requests and the reviewers assignment table.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("name", sa.Text(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("team_name", sa.Text(), sa.ForeignKey("teams.name"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    statuses = op.create_table(
        "statuses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False, unique=True),
    )
    # IDs must match STATUS_IDS in reviewkeeper.database.models.pull_request
    op.bulk_insert(
        statuses,
        [
            {"id": 1, "name": "OPEN"},
            {"id": 2, "name": "MERGED"},
        ],
    )

    op.create_table(
        "pull_requests",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("author_id", sa.Text(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status_id", sa.Integer(), sa.ForeignKey("statuses.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("merged_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "reviewers",
        sa.Column(
            "pull_request_id",
            sa.Text(),
            sa.ForeignKey("pull_requests.id"),
            primary_key=True,
        ),
        sa.Column("user_id", sa.Text(), sa.ForeignKey("users.id"), primary_key=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("reviewers")
    op.drop_table("pull_requests")
    op.drop_table("statuses")
    op.drop_table("users")
    op.drop_table("teams")
