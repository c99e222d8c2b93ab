"""Tenant context produced by resolution and consumed downstream."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from tenancy.domain.value_objects import (
    ResolutionConfidence,
    ResolutionResult,
    ResolutionSource,
    TenantInfo,
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TenantContext:
    """The tenant an operation runs for, with its provenance.

    ``tenant`` is replaced and ``is_validated`` flipped when a context created
    before validation (lazy validation) is validated later. Everything else is
    fixed at creation.

    Attributes:
        tenant: Tenant record (a stub when validation did not find the tenant).
        resolution: Result that produced the tenant id.
        correlation_id: Correlation id of the operation, when known.
        resolved_at: Time the context was created (UTC).
        is_validated: True once the tenant was confirmed to exist.
    """

    tenant: TenantInfo
    resolution: ResolutionResult
    correlation_id: str | None = None
    resolved_at: datetime = field(default_factory=_utc_now)
    is_validated: bool = False

    @property
    def tenant_id(self) -> str:
        return self.tenant.tenant_id

    @property
    def source(self) -> ResolutionSource:
        return self.resolution.source

    @property
    def confidence(self) -> ResolutionConfidence:
        return self.resolution.confidence

    @classmethod
    def for_tenant(
        cls,
        tenant: TenantInfo,
        source: ResolutionSource = ResolutionSource.DEFAULT,
        correlation_id: str | None = None,
    ) -> TenantContext:
        """Create a validated context for a tenant known to the caller.

        Used by background jobs and migrations that iterate tenants rather
        than resolving them from a request.
        """
        return cls(
            tenant=tenant,
            resolution=ResolutionResult.resolved(tenant.tenant_id, source),
            correlation_id=correlation_id,
            is_validated=True,
        )
