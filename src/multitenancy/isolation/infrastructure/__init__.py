"""SQLAlchemy adapters of the isolation bounded context."""

from isolation.infrastructure.alembic_migrator import AlembicSchemaMigrator
from isolation.infrastructure.entity_metadata import (
    is_global_entity,
    is_identity_entity,
    is_tenant_scoped,
)
from isolation.infrastructure.migration_runner import TenantMigrationRunner
from isolation.infrastructure.model_customizer import (
    TenantModel,
    TenantModelCustomizer,
)
from isolation.infrastructure.predicates import Predicate, combine, tenant_predicate
from isolation.infrastructure.query_filter import SKIP_TENANT_FILTER, TenantQueryFilter
from isolation.infrastructure.session_factory import TenantSessionFactory
from isolation.infrastructure.write_guard import TenantWriteGuard

__all__ = [
    "AlembicSchemaMigrator",
    "Predicate",
    "SKIP_TENANT_FILTER",
    "TenantMigrationRunner",
    "TenantModel",
    "TenantModelCustomizer",
    "TenantQueryFilter",
    "TenantSessionFactory",
    "TenantWriteGuard",
    "combine",
    "is_global_entity",
    "is_identity_entity",
    "is_tenant_scoped",
    "tenant_predicate",
]
