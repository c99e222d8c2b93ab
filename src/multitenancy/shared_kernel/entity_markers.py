"""Markers for ORM entities that are shared by every tenant.

Global entities (reference data, tenant registries, identity tables) are
never filtered or stamped with a tenant identifier. Both bounded contexts
need to declare such entities, so the markers live in the shared kernel.
"""

from __future__ import annotations

from typing import TypeVar

T = TypeVar("T", bound=type)

GLOBAL_ENTITY_ATTRIBUTE = "__tenant_global__"


class GlobalEntity:
    """Mixin marking a mapped class as shared across tenants."""

    __tenant_global__ = True


def global_entity(cls: T) -> T:
    """Class decorator marking a mapped class as shared across tenants."""
    setattr(cls, GLOBAL_ENTITY_ATTRIBUTE, True)
    return cls


def is_marked_global(cls: type) -> bool:
    """Check whether a class carries the global entity marker."""
    return bool(getattr(cls, GLOBAL_ENTITY_ATTRIBUTE, False))
