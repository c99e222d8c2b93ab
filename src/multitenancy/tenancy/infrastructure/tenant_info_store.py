"""SQLAlchemy implementation of ITenantInfoStore.

Stores tenant records in the ``tenant_infos`` table. Lookups by public id are
case-insensitive, matching how tenant ids are compared everywhere else.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.value_objects import TenantInfo, TenantState
from tenancy.infrastructure.models import TenantInfoModel
from tenancy.infrastructure.observability import (
    DefaultTenantInfoStoreProbe,
    TenantInfoStoreProbe,
)


def _as_utc(value: datetime | None) -> datetime | None:
    # Some drivers (SQLite) return naive datetimes for timezone-aware columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlAlchemyTenantInfoStore:
    """Tenant store backed by a SQLAlchemy async session.

    The store flushes but never commits; the caller owns the transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: TenantInfoStoreProbe | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            session: AsyncSession bound to the registry database
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTenantInfoStoreProbe()

    async def find_by_id(self, tenant_id: str) -> TenantInfo | None:
        """Retrieve a tenant record by its public id.

        Args:
            tenant_id: Public tenant identifier (case-insensitive)

        Returns:
            The tenant record, or None if the tenant does not exist
        """
        if not tenant_id or not tenant_id.strip():
            return None

        model = await self._get_model(tenant_id.strip())
        if model is None:
            self._probe.tenant_not_found(tenant_id)
            return None

        self._probe.tenant_retrieved(model.tenant_id)
        return self._to_domain(model)

    async def save(self, tenant: TenantInfo) -> None:
        """Insert or update a tenant record.

        Args:
            tenant: Record to persist
        """
        model = await self._get_model(tenant.tenant_id)
        if model is None:
            model = TenantInfoModel(tenant_id=tenant.tenant_id)
            model.created_at = tenant.created_at
            self._session.add(model)

        model.internal_id = tenant.internal_id
        model.name = tenant.name
        model.type = tenant.type
        model.region = tenant.region
        model.is_active = tenant.is_active
        model.is_soft_deleted = tenant.is_soft_deleted
        model.state = tenant.state.value
        model.expires_at = tenant.expires_at
        model.parent_id = tenant.parent_id
        model.tenant_metadata = dict(tenant.metadata)

        await self._session.flush()
        self._probe.tenant_saved(tenant.tenant_id)

    async def list_tenants(self, include_inactive: bool = False) -> list[TenantInfo]:
        """List tenant records ordered by creation time.

        Args:
            include_inactive: Also return disabled, soft-deleted, suspended
                and not yet provisioned tenants

        Returns:
            Tenant records, oldest first
        """
        stmt = select(TenantInfoModel).order_by(
            TenantInfoModel.created_at, TenantInfoModel.tenant_id
        )
        if not include_inactive:
            stmt = stmt.where(
                TenantInfoModel.is_active.is_(True),
                TenantInfoModel.is_soft_deleted.is_(False),
                TenantInfoModel.state == TenantState.ACTIVE.value,
            )
        result = await self._session.execute(stmt)
        tenants = [self._to_domain(model) for model in result.scalars().all()]
        self._probe.tenants_listed(len(tenants))
        return tenants

    async def _get_model(self, tenant_id: str) -> TenantInfoModel | None:
        stmt = select(TenantInfoModel).where(
            func.lower(TenantInfoModel.tenant_id) == tenant_id.lower()
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: TenantInfoModel) -> TenantInfo:
        fields = {
            "tenant_id": model.tenant_id,
            "internal_id": model.internal_id,
            "name": model.name,
            "type": model.type,
            "region": model.region,
            "is_active": model.is_active,
            "is_soft_deleted": model.is_soft_deleted,
            "expires_at": _as_utc(model.expires_at),
            "parent_id": model.parent_id,
            "state": TenantState(model.state),
            "metadata": dict(model.tenant_metadata or {}),
        }
        created_at = _as_utc(model.created_at)
        if created_at is not None:
            fields["created_at"] = created_at
        return TenantInfo(**fields)
