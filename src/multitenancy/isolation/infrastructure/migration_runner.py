"""Apply schema migrations tenant by tenant."""

from __future__ import annotations

from typing import Iterable

from isolation.domain.value_objects import IsolationMode
from isolation.infrastructure.observability import (
    DefaultIsolationProbe,
    IsolationProbe,
)
from isolation.infrastructure.session_factory import TenantSessionFactory
from isolation.ports.migrations import ISchemaMigrator, MigrationTarget
from isolation.ports.tenant_accessor import ITenantAccessor
from tenancy.domain.tenant_context import TenantContext
from tenancy.domain.value_objects import TenantInfo


class TenantMigrationRunner:
    """Runs a schema migrator once per tenant.

    Tenants are migrated sequentially in the given order, each inside its
    own tenant scope so the session factory routes to that tenant's schema
    or database. The run stops at the first failure; tenants migrated
    before it keep their new schema.
    """

    def __init__(
        self,
        accessor: ITenantAccessor,
        session_factory: TenantSessionFactory,
        migrator: ISchemaMigrator,
        probe: IsolationProbe | None = None,
    ):
        self._accessor = accessor
        self._session_factory = session_factory
        self._migrator = migrator
        self._probe = probe or DefaultIsolationProbe()

    async def run(self, tenants: Iterable[TenantInfo | None]) -> list[str]:
        """Migrate every tenant.

        Args:
            tenants: Tenants to migrate; None entries are skipped

        Returns:
            Ids of the migrated tenants, in order

        Raises:
            Exception: The first migration failure, unchanged
        """
        config = self._session_factory.model.config
        migrated: list[str] = []

        for tenant in tenants:
            if tenant is None:
                continue
            with self._accessor.begin_scope(TenantContext.for_tenant(tenant)):
                schema = self._session_factory.current_schema()
                target = MigrationTarget(
                    tenant=tenant,
                    mode=config.mode,
                    schema=schema
                    if config.mode == IsolationMode.SCHEMA_PER_TENANT
                    else config.default_schema,
                )
                self._probe.tenant_migration_started(tenant.tenant_id, target.schema)
                try:
                    engine = self._session_factory.engine_for_current_tenant()
                    await self._migrator.migrate(engine, target)
                except Exception as exc:
                    self._probe.tenant_migration_failed(tenant.tenant_id, exc)
                    raise
            self._probe.tenant_migration_completed(tenant.tenant_id)
            migrated.append(tenant.tenant_id)

        return migrated
