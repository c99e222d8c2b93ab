"""Tenant record protocols (ports) for the tenancy bounded context.

The store is the source of truth for tenant records; the cache keeps
recently validated records close to the resolver.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tenancy.domain.value_objects import TenantInfo


@runtime_checkable
class ITenantInfoStore(Protocol):
    """Source of truth for tenant records."""

    async def find_by_id(self, tenant_id: str) -> TenantInfo | None:
        """Retrieve a tenant record by its public id.

        Args:
            tenant_id: Public tenant identifier

        Returns:
            The tenant record, or None if the tenant does not exist
        """
        ...


@runtime_checkable
class ITenantInfoCache(Protocol):
    """Cache of tenant records keyed by public id."""

    async def get(self, tenant_id: str) -> TenantInfo | None:
        """Retrieve a cached tenant record.

        Args:
            tenant_id: Public tenant identifier

        Returns:
            The cached record, or None on a miss or after expiry
        """
        ...

    async def set(self, tenant: TenantInfo, ttl: float | None = None) -> None:
        """Cache a tenant record.

        Args:
            tenant: Record to cache under its tenant id
            ttl: Seconds until the entry expires; None keeps the cache default
        """
        ...
