"""Ports of the tenancy bounded context."""

from tenancy.ports.providers import ITenantProvider, ITenantResolutionStrategy
from tenancy.ports.repositories import ITenantInfoCache, ITenantInfoStore

__all__ = [
    "ITenantInfoCache",
    "ITenantInfoStore",
    "ITenantProvider",
    "ITenantResolutionStrategy",
]
