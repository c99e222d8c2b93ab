"""create tenant_infos table

Revision ID: 3c1f2a7d9e40
Revises:
Create Date: 2026-10-18 09:41:06.512907

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3c1f2a7d9e40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "tenant_infos",
        sa.Column("tenant_id", sa.String(length=64), nullable=False),
        sa.Column("internal_id", sa.Uuid(), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("type", sa.String(length=64), nullable=True),
        sa.Column("region", sa.String(length=64), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_soft_deleted", sa.Boolean(), nullable=False),
        sa.Column("state", sa.String(length=32), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("parent_id", sa.String(length=64), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("tenant_id", name="pk_tenant_infos"),
        sa.UniqueConstraint("internal_id", name="uq_tenant_infos_internal_id"),
    )
    # Store lookups match tenant ids case-insensitively
    op.create_index(
        "ix_tenant_infos_tenant_id_lower",
        "tenant_infos",
        [sa.text("lower(tenant_id)")],
        unique=True,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_tenant_infos_tenant_id_lower", table_name="tenant_infos")
    op.drop_table("tenant_infos")
