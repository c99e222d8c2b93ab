"""Shared Kernel module.

Components both bounded contexts (tenancy and isolation) agree to depend on:
the observation context carried by domain probes and the markers declaring
entities that are shared across tenants.

Following Domain-Driven Design principles, the Shared Kernel is a small,
carefully managed set of components. Changes here affect every context.
"""

from shared_kernel.entity_markers import GlobalEntity, global_entity, is_marked_global
from shared_kernel.observability_context import ObservationContext

__all__ = [
    "GlobalEntity",
    "ObservationContext",
    "global_entity",
    "is_marked_global",
]
