"""Create the local_user table.

Revision ID: 0001_create_local_user
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from dirsync.adapters.sqlalchemy.mappings import UTCDateTime

revision = "0001_create_local_user"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "local_user",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("last_synced_display_name", sa.String(), nullable=True),
        sa.Column("disabled", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column(
            "last_synced_disabled", sa.Boolean(), server_default=sa.false(), nullable=False
        ),
        sa.Column("deleted", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_local_user")),
    )
    op.create_index("ix_local_user_deleted", "local_user", ["deleted"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_local_user_deleted", table_name="local_user")
    op.drop_table("local_user")
