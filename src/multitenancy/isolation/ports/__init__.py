"""Ports of the isolation bounded context."""

from isolation.ports.migrations import ISchemaMigrator, MigrationTarget
from isolation.ports.tenant_accessor import ITenantAccessor

__all__ = [
    "ISchemaMigrator",
    "ITenantAccessor",
    "MigrationTarget",
]
