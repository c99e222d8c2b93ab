"""Ambient tenant port used by the isolation engine.

The isolation engine only needs to read the current tenant and, for
migrations, scope work to a tenant. ``CurrentTenantAccessor`` satisfies this
protocol structurally.
"""

from __future__ import annotations

from typing import ContextManager, Protocol, runtime_checkable

from tenancy.domain.tenant_context import TenantContext
from tenancy.domain.value_objects import TenantInfo


@runtime_checkable
class ITenantAccessor(Protocol):
    """Read access to the ambient tenant plus scoping."""

    @property
    def tenant_id(self) -> str | None:
        """Id of the current tenant, or None when no tenant is set."""
        ...

    @property
    def tenant_info(self) -> TenantInfo | None:
        """Record of the current tenant, or None when no tenant is set."""
        ...

    def begin_scope(
        self, context: TenantContext | None
    ) -> ContextManager[TenantContext | None]:
        """Install a tenant for a block and restore the previous one after."""
        ...
