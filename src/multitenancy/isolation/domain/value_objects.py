"""Value objects for the isolation domain.

``IsolationConfig`` describes how tenant data is separated in storage and
answers the two naming questions every mode depends on: which schema and
which connection string belong to a tenant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Callable

from tenancy.domain.value_objects import TenantInfo

TenantNameResolver = Callable[[TenantInfo | None], str | None]


class IsolationMode(StrEnum):
    """How tenant data is separated in storage."""

    SHARED_DATABASE = "shared_database"
    SCHEMA_PER_TENANT = "schema_per_tenant"
    DATABASE_PER_TENANT = "database_per_tenant"


@dataclass(frozen=True)
class IsolationConfig:
    """Storage isolation configuration.

    ``use_shadow_tenant_id``, ``enable_query_filters`` and
    ``enable_write_enforcement`` default to on in shared database mode and
    off otherwise; an explicit True or False always wins. Read the effective
    values through ``shadow_tenant_id_enabled``, ``query_filters_enabled``
    and ``write_enforcement_enabled``.

    Templates are formatted with ``str.format`` and receive the tenant id
    both positionally and as ``tenant_id``, so ``"tenant_{0}"`` and
    ``"tenant_{tenant_id}"`` are equivalent.
    """

    mode: IsolationMode = IsolationMode.SHARED_DATABASE
    tenant_id_field: str = "tenant_id"
    tenant_id_length: int = 64
    use_shadow_tenant_id: bool | None = None
    enable_query_filters: bool | None = None
    enable_write_enforcement: bool | None = None
    require_tenant_for_writes: bool = True
    include_schema_in_cache_key: bool = True
    default_schema: str | None = None
    schema_name_format: str = "tenant_{tenant_id}"
    schema_name_resolver: TenantNameResolver | None = None
    connection_string_format: str | None = None
    connection_string_resolver: TenantNameResolver | None = None
    global_entity_types: frozenset[type] = field(default_factory=frozenset)
    global_entity_names: frozenset[str] = field(default_factory=frozenset)
    treat_identity_entities_as_global: bool = True
    identity_module_prefixes: tuple[str, ...] = ()

    @property
    def _row_level_defaults(self) -> bool:
        return self.mode == IsolationMode.SHARED_DATABASE

    @property
    def shadow_tenant_id_enabled(self) -> bool:
        if self.use_shadow_tenant_id is None:
            return self._row_level_defaults
        return self.use_shadow_tenant_id

    @property
    def query_filters_enabled(self) -> bool:
        if self.enable_query_filters is None:
            return self._row_level_defaults
        return self.enable_query_filters

    @property
    def write_enforcement_enabled(self) -> bool:
        if self.enable_write_enforcement is None:
            return self._row_level_defaults
        return self.enable_write_enforcement

    def resolve_schema_name(self, tenant: TenantInfo | None) -> str | None:
        """Schema holding the tenant's tables.

        A configured resolver always wins. Without a tenant the default
        schema is used, as it is when no template is configured.
        """
        if self.schema_name_resolver is not None:
            return self.schema_name_resolver(tenant)
        if tenant is None or not self.schema_name_format:
            return self.default_schema
        return self.schema_name_format.format(
            tenant.tenant_id, tenant_id=tenant.tenant_id
        )

    def resolve_connection_string(self, tenant: TenantInfo | None) -> str | None:
        """Connection URL of the tenant's database, or None when unknown."""
        if self.connection_string_resolver is not None:
            return self.connection_string_resolver(tenant)
        if tenant is None or not self.connection_string_format:
            return None
        return self.connection_string_format.format(
            tenant.tenant_id, tenant_id=tenant.tenant_id
        )
