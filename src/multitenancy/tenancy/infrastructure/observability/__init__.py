"""Domain-Oriented Observability for tenancy infrastructure."""

from tenancy.infrastructure.observability.tenant_info_store_probe import (
    DefaultTenantInfoStoreProbe,
    TenantInfoStoreProbe,
)

__all__ = [
    "DefaultTenantInfoStoreProbe",
    "TenantInfoStoreProbe",
]
