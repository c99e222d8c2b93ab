"""Composition helpers for the isolation bounded context.

Build the isolation configuration from ``IsolationSettings`` plus the
options that only make sense in code (resolver callables, global types),
then customize a registry and wire the session factory and migration runner
around it.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from sqlalchemy.ext.asyncio import AsyncEngine

from infrastructure.database.dependencies import get_engine
from infrastructure.database.engines import create_tenant_engine
from infrastructure.settings import (
    IsolationSettings,
    get_database_settings,
    get_isolation_settings,
)
from isolation.domain.value_objects import (
    IsolationConfig,
    IsolationMode,
    TenantNameResolver,
)
from isolation.infrastructure.alembic_migrator import AlembicSchemaMigrator
from isolation.infrastructure.migration_runner import TenantMigrationRunner
from isolation.infrastructure.model_customizer import TenantModel, TenantModelCustomizer
from isolation.infrastructure.predicates import Predicate
from isolation.infrastructure.session_factory import EngineFactory, TenantSessionFactory
from isolation.ports.migrations import ISchemaMigrator
from isolation.ports.tenant_accessor import ITenantAccessor
from tenancy.dependencies import get_current_tenant_accessor


def build_isolation_config(
    settings: IsolationSettings | None = None,
    *,
    schema_name_resolver: TenantNameResolver | None = None,
    connection_string_resolver: TenantNameResolver | None = None,
    global_entity_types: Iterable[type] = (),
) -> IsolationConfig:
    """Convert settings into the isolation configuration.

    Args:
        settings: Settings to convert; the cached settings by default
        schema_name_resolver: Replacement for the schema name template
        connection_string_resolver: Replacement for the connection template
        global_entity_types: Classes shared by every tenant

    Returns:
        Isolation configuration
    """
    settings = settings or get_isolation_settings()
    return IsolationConfig(
        mode=IsolationMode(settings.mode),
        tenant_id_field=settings.tenant_id_field,
        tenant_id_length=settings.tenant_id_length,
        use_shadow_tenant_id=settings.use_shadow_tenant_id,
        enable_query_filters=settings.enable_query_filters,
        enable_write_enforcement=settings.enable_write_enforcement,
        require_tenant_for_writes=settings.require_tenant_for_writes,
        include_schema_in_cache_key=settings.include_schema_in_cache_key,
        default_schema=settings.default_schema,
        schema_name_format=settings.schema_name_format,
        schema_name_resolver=schema_name_resolver,
        connection_string_format=settings.connection_string_format,
        connection_string_resolver=connection_string_resolver,
        global_entity_types=frozenset(global_entity_types),
        global_entity_names=frozenset(settings.global_entity_names),
        treat_identity_entities_as_global=settings.treat_identity_entities_as_global,
        identity_module_prefixes=tuple(settings.identity_module_prefixes),
    )


def build_tenant_model(
    target: Any,
    config: IsolationConfig,
    accessor: ITenantAccessor | None = None,
    existing_filters: Mapping[type, Predicate] | None = None,
) -> TenantModel:
    """Customize a declarative base or registry for tenant isolation."""
    customizer = TenantModelCustomizer(
        config, accessor or get_current_tenant_accessor()
    )
    return customizer.customize(target, existing_filters)


def _settings_engine_factory(connection_string: str) -> AsyncEngine:
    return create_tenant_engine(connection_string, get_database_settings())


def build_session_factory(
    model: TenantModel,
    *,
    accessor: ITenantAccessor | None = None,
    base_engine: AsyncEngine | None = None,
    engine_factory: EngineFactory = _settings_engine_factory,
) -> TenantSessionFactory:
    """Create the session factory for a customized model.

    The shared engine is used as base engine unless one is passed; it is
    not needed in database-per-tenant mode.
    """
    if base_engine is None and model.config.mode != IsolationMode.DATABASE_PER_TENANT:
        base_engine = get_engine()
    return TenantSessionFactory(
        model,
        accessor or get_current_tenant_accessor(),
        base_engine=base_engine,
        engine_factory=engine_factory,
    )


def build_migration_runner(
    session_factory: TenantSessionFactory,
    *,
    migrator: ISchemaMigrator | None = None,
    accessor: ITenantAccessor | None = None,
) -> TenantMigrationRunner:
    """Create a migration runner, upgrading with Alembic by default."""
    return TenantMigrationRunner(
        accessor or get_current_tenant_accessor(),
        session_factory,
        migrator or AlembicSchemaMigrator(),
    )
