"""Domain probes for tenancy application services."""

from tenancy.application.observability.enforcement_probe import (
    DefaultEnforcementProbe,
    EnforcementProbe,
)
from tenancy.application.observability.resolution_probe import (
    DefaultResolutionProbe,
    ResolutionProbe,
)
from tenancy.application.observability.tenant_resolver_probe import (
    DefaultTenantResolverProbe,
    TenantResolverProbe,
)

__all__ = [
    "DefaultEnforcementProbe",
    "DefaultResolutionProbe",
    "DefaultTenantResolverProbe",
    "EnforcementProbe",
    "ResolutionProbe",
    "TenantResolverProbe",
]
