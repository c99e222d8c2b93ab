"""Tenant-aware engines and sessions.

``TenantSessionFactory`` picks the engine for the ambient tenant according
to the isolation mode and hands out ``AsyncSession`` objects with the query
filter and write guard attached:

- shared database: the base engine
- schema per tenant: an execution-options view of the base engine whose
  ``schema_translate_map`` points the tenant tables at the tenant schema
- database per tenant: a dedicated engine per connection string
"""

from __future__ import annotations

import threading
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Hashable

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from infrastructure.database.engines import create_tenant_engine
from isolation.domain.value_objects import IsolationMode
from isolation.infrastructure.model_customizer import TenantModel
from isolation.infrastructure.observability import (
    DefaultIsolationProbe,
    IsolationProbe,
)
from isolation.infrastructure.query_filter import TenantQueryFilter
from isolation.infrastructure.write_guard import TenantWriteGuard
from isolation.ports.tenant_accessor import ITenantAccessor
from tenancy.domain.errors import TenancyError

EngineFactory = Callable[[str], AsyncEngine]


class TenantSessionFactory:
    """Routes sessions to the ambient tenant's storage."""

    def __init__(
        self,
        model: TenantModel,
        accessor: ITenantAccessor,
        base_engine: AsyncEngine | None = None,
        engine_factory: EngineFactory = create_tenant_engine,
        probe: IsolationProbe | None = None,
    ):
        self._model = model
        self._config = model.config
        self._accessor = accessor
        self._base_engine = base_engine
        self._engine_factory = engine_factory
        self._probe = probe or DefaultIsolationProbe()
        self._query_filter = TenantQueryFilter(model, self._probe)
        self._write_guard = TenantWriteGuard(model, accessor, self._probe)
        self._schema_engines: dict[str | None, AsyncEngine] = {}
        self._tenant_engines: dict[str, AsyncEngine] = {}
        self._lock = threading.Lock()

        if base_engine is None and self._config.mode != IsolationMode.DATABASE_PER_TENANT:
            raise TenancyError.configuration(
                f"A base engine is required in {self._config.mode} mode.",
                mode=str(self._config.mode),
            )

    @property
    def model(self) -> TenantModel:
        return self._model

    def current_schema(self) -> str | None:
        """Schema the ambient tenant's tables live in."""
        return self._config.resolve_schema_name(self._accessor.tenant_info)

    def model_cache_key(self) -> tuple[Hashable, ...]:
        """Key identifying the compiled model variant for the ambient tenant.

        Tenants share a key unless their tables live in different schemas.
        """
        if (
            self._config.mode == IsolationMode.SCHEMA_PER_TENANT
            and self._config.include_schema_in_cache_key
        ):
            return (self._config.mode, self.current_schema())
        return (self._config.mode,)

    def engine_for_current_tenant(self) -> AsyncEngine:
        """Engine serving the ambient tenant.

        Raises:
            TenancyError: NOT_RESOLVED without an ambient tenant and
                CONFIGURATION without a connection string, both only in
                database-per-tenant mode
        """
        mode = self._config.mode
        if mode == IsolationMode.DATABASE_PER_TENANT:
            return self._database_engine()
        base_engine = self._base_engine
        if base_engine is None:
            raise TenancyError.configuration(
                f"A base engine is required in {mode} mode.", mode=str(mode)
            )
        if mode == IsolationMode.SCHEMA_PER_TENANT:
            return self._schema_engine(base_engine)
        return base_engine

    def _schema_engine(self, base_engine: AsyncEngine) -> AsyncEngine:
        schema = self.current_schema()
        # Views are keyed by schema even when the model cache key is not
        with self._lock:
            engine = self._schema_engines.get(schema)
            if engine is None:
                translate_map = {
                    table_schema: schema
                    for table_schema in self._model.tenant_schema_keys
                }
                engine = base_engine.execution_options(
                    schema_translate_map=translate_map
                )
                self._schema_engines[schema] = engine
                self._probe.tenant_engine_created(repr(schema))
        return engine

    def _database_engine(self) -> AsyncEngine:
        tenant = self._accessor.tenant_info
        if tenant is None:
            raise TenancyError.not_resolved(
                "A tenant is required to select a tenant database."
            )
        connection_string = self._config.resolve_connection_string(tenant)
        if not connection_string:
            raise TenancyError.configuration(
                f"No connection string is configured for tenant '{tenant.tenant_id}'.",
                tenant_id=tenant.tenant_id,
            )
        with self._lock:
            engine = self._tenant_engines.get(connection_string)
            if engine is None:
                engine = self._engine_factory(connection_string)
                self._tenant_engines[connection_string] = engine
                self._probe.tenant_engine_created(tenant.tenant_id)
        return engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session on the ambient tenant's storage.

        The engine is chosen when the session opens; changing the ambient
        tenant afterwards does not move the session.

        Example:
            with accessor.begin_scope(context):
                async with factory.session() as session:
                    orders = (await session.scalars(select(Order))).all()
        """
        engine = self.engine_for_current_tenant()
        async with AsyncSession(engine, expire_on_commit=False) as session:
            if self._config.query_filters_enabled:
                self._query_filter.attach(session)
            if self._config.write_enforcement_enabled:
                self._write_guard.attach(session)
            yield session

    async def dispose(self) -> None:
        """Dispose every tenant database engine created by this factory.

        Schema views share the base engine's pool and are only forgotten.
        """
        with self._lock:
            engines = list(self._tenant_engines.values())
            self._tenant_engines.clear()
            self._schema_engines.clear()
        for engine in engines:
            await engine.dispose()
        self._probe.engines_disposed(len(engines))
