"""Configuration-time customization of a mapped model for tenant isolation.

The customizer walks every mapper of a registry once, decides which classes
are tenant-scoped, makes sure each scoped table has a tenant column and
builds the per-class read predicates. The result is an immutable
``TenantModel`` shared by the query filter, the write guard and the session
factory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from sqlalchemy import Column, String, Table
from sqlalchemy.orm import Mapper, class_mapper, object_mapper

from isolation.domain.value_objects import IsolationConfig, IsolationMode
from isolation.infrastructure.entity_metadata import is_global_entity, is_tenant_scoped
from isolation.infrastructure.observability import (
    DefaultIsolationProbe,
    IsolationProbe,
)
from isolation.infrastructure.predicates import Predicate, combine, tenant_predicate
from isolation.ports.tenant_accessor import ITenantAccessor
from tenancy.domain.errors import TenancyError


@dataclass(frozen=True)
class TenantModel:
    """Isolation metadata computed for one registry.

    Attributes:
        config: Configuration the model was built with.
        scoped_mappers: Root mappers whose rows belong to a tenant.
        filters: Read predicate per mapped root class.
        tenant_schema_keys: Schema values of the tenant tables, the keys of
            the schema translate map in schema-per-tenant mode.
        shadow_entities: Names of classes that received a tenant column.
    """

    config: IsolationConfig
    scoped_mappers: frozenset[Mapper] = frozenset()
    filters: Mapping[type, Predicate] = field(default_factory=dict)
    tenant_schema_keys: frozenset[str | None] = frozenset()
    shadow_entities: frozenset[str] = frozenset()

    def is_scoped(self, target: Any) -> bool:
        """Check whether a mapped class or instance is tenant-scoped."""
        mapper = class_mapper(target) if isinstance(target, type) else object_mapper(target)
        return mapper.base_mapper in self.scoped_mappers

    @property
    def scoped_classes(self) -> list[type]:
        return sorted(
            (mapper.class_ for mapper in self.scoped_mappers),
            key=lambda cls: cls.__qualname__,
        )


def _registry_of(target: Any) -> Any:
    # Accepts a declarative base or a registry
    return getattr(target, "registry", target)


class TenantModelCustomizer:
    """Prepares mapped classes for tenant isolation."""

    def __init__(
        self,
        config: IsolationConfig,
        accessor: ITenantAccessor,
        probe: IsolationProbe | None = None,
    ) -> None:
        self._config = config
        self._accessor = accessor
        self._probe = probe or DefaultIsolationProbe()

    def customize(
        self,
        target: Any,
        existing_filters: Mapping[type, Predicate] | None = None,
    ) -> TenantModel:
        """Customize every mapper of a registry.

        Must run before sessions are created for the registry. Running it
        twice is harmless: columns added the first time are found the second.

        Args:
            target: Declarative base class or ``registry``
            existing_filters: Predicates already registered per class; the
                tenant predicate is ANDed onto them

        Returns:
            The computed tenant model

        Raises:
            TenancyError: CONFIGURATION when a scoped class lacks the tenant
                column in shared database mode and shadow columns are
                disabled, or when a global table shares a schema with tenant
                tables in schema-per-tenant mode
        """
        config = self._config
        filters: dict[type, Predicate] = dict(existing_filters or {})
        scoped: set[Mapper] = set()
        shadow: set[str] = set()
        tenant_tables: list[Table] = []
        global_mappers: list[Mapper] = []

        mappers = sorted(
            _registry_of(target).mappers, key=lambda m: m.class_.__qualname__
        )
        for mapper in mappers:
            if mapper.inherits is not None:
                continue
            if not is_tenant_scoped(mapper, config):
                if is_global_entity(mapper.class_, config):
                    global_mappers.append(mapper)
                continue

            if not self._ensure_tenant_column(mapper, shadow):
                continue

            scoped.add(mapper)
            tenant_tables.extend(
                sub.local_table
                for sub in mapper.self_and_descendants
                if isinstance(sub.local_table, Table)
            )
            if config.query_filters_enabled:
                cls = mapper.class_
                filters[cls] = combine(
                    filters.get(cls),
                    tenant_predicate(config.tenant_id_field, self._accessor),
                )

        schema_keys = frozenset(table.schema for table in tenant_tables)
        if config.mode == IsolationMode.SCHEMA_PER_TENANT:
            self._check_global_schemas(global_mappers, schema_keys)

        self._probe.model_customized(len(scoped), len(global_mappers), str(config.mode))
        return TenantModel(
            config=config,
            scoped_mappers=frozenset(scoped),
            filters=filters,
            tenant_schema_keys=schema_keys,
            shadow_entities=frozenset(shadow),
        )

    def _ensure_tenant_column(self, mapper: Mapper, shadow: set[str]) -> bool:
        config = self._config
        name = config.tenant_id_field
        table = mapper.local_table
        entity = mapper.class_.__name__

        if mapper.has_property(name):
            return True

        if name in table.c:
            mapper.add_property(name, table.c[name])
            return True

        if config.shadow_tenant_id_enabled:
            column = Column(
                name, String(config.tenant_id_length), nullable=True, index=True
            )
            table.append_column(column)
            mapper.add_property(name, column)
            shadow.add(entity)
            self._probe.shadow_column_added(entity, name)
            return True

        if config.mode == IsolationMode.SHARED_DATABASE:
            raise TenancyError.configuration(
                f"Entity '{entity}' has no '{name}' attribute and shadow tenant "
                "columns are disabled.",
                entity=entity,
                field=name,
            )

        self._probe.entity_left_unscoped(entity, f"missing '{name}' attribute")
        return False

    @staticmethod
    def _check_global_schemas(
        global_mappers: list[Mapper], tenant_schema_keys: frozenset[str | None]
    ) -> None:
        for mapper in global_mappers:
            table = mapper.local_table
            if isinstance(table, Table) and table.schema in tenant_schema_keys:
                raise TenancyError.configuration(
                    f"Global entity '{mapper.class_.__name__}' shares schema "
                    f"{table.schema!r} with tenant tables; give it an explicit "
                    "schema in schema_per_tenant mode.",
                    entity=mapper.class_.__name__,
                    schema=table.schema,
                )
