"""Runtime options for tenant resolution, validation and enforcement.

``TenancyOptions`` is the in-code counterpart of ``MultitenancySettings``:
it adds the values that cannot come from the environment (fallback tenant
record, host selector) and uses domain enums throughout.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from tenancy.domain.value_objects import (
    ResolutionSource,
    TenantInfo,
    ValidationMode,
)

HostTenantSelector = Callable[[str], str | None]

DEFAULT_RESOLUTION_ORDER: tuple[ResolutionSource, ...] = (
    ResolutionSource.ROUTE,
    ResolutionSource.HOST,
    ResolutionSource.HEADER,
    ResolutionSource.QUERY_STRING,
    ResolutionSource.CLAIM,
    ResolutionSource.DEFAULT,
)


@dataclass(frozen=True)
class TenancyOptions:
    """Options shared by providers, the strategy, the resolver and enforcement.

    Durations are in seconds.
    """

    header_names: tuple[str, ...] = ("X-Tenant-ID",)
    route_parameter_name: str = "tenantId"
    query_parameter_name: str = "tenantId"
    claim_type: str = "tenant_id"
    fallback_tenant: TenantInfo | None = None
    fallback_tenant_id: str | None = None
    host_tenant_selector: HostTenantSelector | None = None
    resolution_order: tuple[ResolutionSource, ...] = DEFAULT_RESOLUTION_ORDER
    include_unordered_providers: bool = True
    require_match_across_sources: bool = False
    resolution_timeout: float | None = None
    validation_mode: ValidationMode = ValidationMode.NONE
    resolution_cache_ttl: float | None = 300.0
    require_tenant_by_default: bool = True
    allow_anonymous: bool = True
    add_tenant_to_log_scope: bool = True
    log_scope_key: str = "tenant_id"

    @property
    def fallback_id(self) -> str | None:
        """Tenant id used by the default provider, if any."""
        if self.fallback_tenant is not None:
            return self.fallback_tenant.tenant_id
        if self.fallback_tenant_id and self.fallback_tenant_id.strip():
            return self.fallback_tenant_id.strip()
        return None
