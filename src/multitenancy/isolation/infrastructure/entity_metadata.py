"""Classification of mapped classes as tenant-scoped or global."""

from __future__ import annotations

from sqlalchemy import Table
from sqlalchemy.orm import Mapper

from isolation.domain.value_objects import IsolationConfig
from shared_kernel.entity_markers import is_marked_global


def _qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def is_identity_entity(cls: type, prefixes: tuple[str, ...]) -> bool:
    """Check whether a class or one of its bases lives in an identity module."""
    if not prefixes:
        return False
    for klass in cls.__mro__:
        module = getattr(klass, "__module__", "") or ""
        if any(
            module == prefix or module.startswith(f"{prefix}.") for prefix in prefixes
        ):
            return True
    return False


def is_global_entity(cls: type, config: IsolationConfig) -> bool:
    """Check whether rows of a class are shared by every tenant.

    A class is global when it is marked (``GlobalEntity`` mixin or
    ``@global_entity``), listed in ``global_entity_types``, listed by
    qualified or short name in ``global_entity_names``, or defined in an
    identity module while identity entities are treated as global.
    """
    if config.treat_identity_entities_as_global and is_identity_entity(
        cls, config.identity_module_prefixes
    ):
        return True
    if is_marked_global(cls):
        return True
    if cls in config.global_entity_types:
        return True
    names = config.global_entity_names
    return _qualified_name(cls) in names or cls.__name__ in names


def is_tenant_scoped(mapper: Mapper, config: IsolationConfig) -> bool:
    """Check whether a mapper's rows belong to individual tenants.

    Only root mappers are classified: inheriting mappers are covered by
    their root. Mappers over non-table selectables or tables without a
    primary key (keyless views, association rows) are never scoped.
    """
    if mapper.inherits is not None:
        return False
    table = mapper.local_table
    if not isinstance(table, Table) or not table.primary_key.columns:
        return False
    return not is_global_entity(mapper.class_, config)
