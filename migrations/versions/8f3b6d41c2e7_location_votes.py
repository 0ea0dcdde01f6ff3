"""location votes

Revision ID: 8f3b6d41c2e7
Revises: 5c1e2a7d9b30
Create Date: 2026-10-19 14:37:02.604115

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8f3b6d41c2e7"
down_revision: Union[str, Sequence[str], None] = "5c1e2a7d9b30"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the per-location upvote ledger."""
    op.create_table(
        "location_votes",
        sa.Column("location_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["location_id"], ["locations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("location_id", "user_id"),
    )
    op.create_index("ix_location_votes_user_id", "location_votes", ["user_id"])


def downgrade() -> None:
    """Drop the location upvote ledger."""
    op.drop_index("ix_location_votes_user_id", table_name="location_votes")
    op.drop_table("location_votes")
