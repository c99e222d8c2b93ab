"""Schema migration port used by the tenant migration runner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from isolation.domain.value_objects import IsolationMode
from tenancy.domain.value_objects import TenantInfo

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


@dataclass(frozen=True)
class MigrationTarget:
    """Where one tenant's schema lives.

    Attributes:
        tenant: Tenant being migrated.
        mode: Isolation mode in effect.
        schema: Tenant schema in schema-per-tenant mode, else the default
            schema (possibly None).
    """

    tenant: TenantInfo
    mode: IsolationMode
    schema: str | None = None


@runtime_checkable
class ISchemaMigrator(Protocol):
    """Brings one tenant's storage up to the current schema."""

    async def migrate(self, engine: AsyncEngine, target: MigrationTarget) -> None:
        """Apply pending migrations for one tenant.

        Args:
            engine: Engine bound to the tenant's storage
            target: Tenant and schema being migrated

        Raises:
            Exception: Any failure; the runner stops at the first one
        """
        ...
