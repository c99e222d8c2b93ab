"""Application services of the tenancy bounded context."""

from tenancy.application.services.enforcement import TenantEnforcer
from tenancy.application.services.resolution_strategy import (
    CompositeTenantResolutionStrategy,
    order_providers,
)
from tenancy.application.services.tenant_resolver import TenantResolver

__all__ = [
    "CompositeTenantResolutionStrategy",
    "TenantEnforcer",
    "TenantResolver",
    "order_providers",
]
