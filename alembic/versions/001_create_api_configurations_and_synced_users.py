"""Create api_configurations and synced_users tables.

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
    # ── api_configurations ───────────────────────────────────
    op.create_table(
        "api_configurations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("system_name", sa.String(255), nullable=False),
        sa.Column("api_url", sa.Text(), nullable=False),
        sa.Column("http_method", sa.String(10), nullable=False, server_default="GET"),
        sa.Column("headers", sa.JSON(), nullable=True),
        sa.Column("query_params", sa.JSON(), nullable=True),
        sa.Column("request_body", sa.Text(), nullable=True),
        sa.Column("field_mappings", sa.JSON(), nullable=False),
        sa.Column("data_path", sa.Text(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    # At most one active configuration per system
    op.create_index(
        "uq_api_configurations_active_system_name",
        "api_configurations",
        ["system_name"],
        unique=True,
        postgresql_where=sa.text("active"),
        sqlite_where=sa.text("active"),
    )

    # ── synced_users ─────────────────────────────────────────
    op.create_table(
        "synced_users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("external_id", sa.String(512), nullable=True),
        sa.Column("system_name", sa.String(255), nullable=False),
        sa.Column("name", sa.String(512), nullable=True),
        sa.Column("email", sa.String(512), nullable=True),
        sa.Column("phone_number", sa.String(100), nullable=True),
        sa.Column("timezone", sa.String(100), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("scheduling_url", sa.Text(), nullable=True),
        sa.Column("additional_data", sa.Text(), nullable=True),
        sa.Column("fetched_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_synced_users_system_name", "synced_users", ["system_name"])
    op.create_index("ix_synced_users_system_external_id", "synced_users", ["system_name", "external_id"])


def downgrade() -> None:
    op.drop_index("ix_synced_users_system_external_id", table_name="synced_users")
    op.drop_index("ix_synced_users_system_name", table_name="synced_users")
    op.drop_table("synced_users")
    op.drop_index("uq_api_configurations_active_system_name", table_name="api_configurations")
    op.drop_table("api_configurations")
