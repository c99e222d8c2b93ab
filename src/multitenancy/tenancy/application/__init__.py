"""Application layer of the tenancy bounded context."""

from tenancy.application.current_tenant import CurrentTenantAccessor
from tenancy.application.providers import (
    ClaimTenantProvider,
    DefaultTenantProvider,
    DelegateTenantProvider,
    HeaderTenantProvider,
    HostTenantProvider,
    QueryTenantProvider,
    RouteTenantProvider,
    default_host_selector,
)
from tenancy.application.serialization import TenantContextSerializer
from tenancy.application.services import (
    CompositeTenantResolutionStrategy,
    TenantEnforcer,
    TenantResolver,
)

__all__ = [
    "ClaimTenantProvider",
    "CompositeTenantResolutionStrategy",
    "CurrentTenantAccessor",
    "DefaultTenantProvider",
    "DelegateTenantProvider",
    "HeaderTenantProvider",
    "HostTenantProvider",
    "QueryTenantProvider",
    "RouteTenantProvider",
    "TenantContextSerializer",
    "TenantEnforcer",
    "TenantResolver",
    "default_host_selector",
]
