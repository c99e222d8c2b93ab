"""SQLAlchemy ORM model for the tenant registry.

The registry lists every tenant with its lifecycle state. It is shared by all
tenants, so it is marked as a global entity and never tenant filtered.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Boolean, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin
from shared_kernel.entity_markers import GlobalEntity


class TenantInfoModel(GlobalEntity, Base, TimestampMixin):
    """ORM model for the tenant_infos table."""

    __tablename__ = "tenant_infos"

    tenant_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    internal_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True, unique=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    region: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_soft_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    state: Mapped[str] = mapped_column(String(32), nullable=False, default="active")
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    parent_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    # "metadata" is reserved on declarative classes
    tenant_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TenantInfoModel(tenant_id={self.tenant_id}, state={self.state})>"
