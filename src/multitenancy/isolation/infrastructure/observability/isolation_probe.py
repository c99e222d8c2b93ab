"""Domain probes for storage isolation.

Capture configuration decisions, write-guard verdicts, engine routing and
per-tenant migrations without exposing logging details to the engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class IsolationProbe(Protocol):
    """Domain probe for the isolation engine."""

    def model_customized(self, scoped: int, global_: int, mode: str) -> None:
        """Record the outcome of customizing a mapped model."""
        ...

    def shadow_column_added(self, entity: str, column: str) -> None:
        """Record that a tenant column was added to a mapped table."""
        ...

    def entity_left_unscoped(self, entity: str, reason: str) -> None:
        """Record that a mapped class was excluded from isolation."""
        ...

    def tenant_filter_skipped(self) -> None:
        """Record that a query opted out of tenant filtering."""
        ...

    def cross_tenant_write_blocked(
        self, entity: str, tenant_id: str, entity_tenant_id: str | None
    ) -> None:
        """Record that a flush touched another tenant's row."""
        ...

    def write_without_tenant_blocked(self, entities: int) -> None:
        """Record that a flush wrote tenant-scoped rows without a tenant."""
        ...

    def tenant_engine_created(self, cache_key: str) -> None:
        """Record that an engine (or engine view) was created for a tenant."""
        ...

    def engines_disposed(self, count: int) -> None:
        """Record that cached tenant engines were disposed."""
        ...

    def tenant_migration_started(self, tenant_id: str, schema: str | None) -> None:
        """Record that migrating a tenant started."""
        ...

    def tenant_migration_completed(self, tenant_id: str) -> None:
        """Record that migrating a tenant finished."""
        ...

    def tenant_migration_failed(self, tenant_id: str, error: Exception) -> None:
        """Record that migrating a tenant failed and the run stopped."""
        ...

    def with_context(self, context: ObservationContext) -> IsolationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultIsolationProbe:
    """Default implementation of IsolationProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultIsolationProbe:
        """Create a new probe with observation context bound."""
        return DefaultIsolationProbe(logger=self._logger, context=context)

    def model_customized(self, scoped: int, global_: int, mode: str) -> None:
        """Record the outcome of customizing a mapped model."""
        self._logger.info(
            "tenant_model_customized",
            scoped_entities=scoped,
            global_entities=global_,
            isolation_mode=mode,
            **self._get_context_kwargs(),
        )

    def shadow_column_added(self, entity: str, column: str) -> None:
        """Record that a tenant column was added to a mapped table."""
        self._logger.debug(
            "shadow_tenant_column_added",
            entity=entity,
            column=column,
            **self._get_context_kwargs(),
        )

    def entity_left_unscoped(self, entity: str, reason: str) -> None:
        """Record that a mapped class was excluded from isolation."""
        self._logger.warning(
            "entity_left_unscoped",
            entity=entity,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def tenant_filter_skipped(self) -> None:
        """Record that a query opted out of tenant filtering."""
        self._logger.debug(
            "tenant_filter_skipped",
            **self._get_context_kwargs(),
        )

    def cross_tenant_write_blocked(
        self, entity: str, tenant_id: str, entity_tenant_id: str | None
    ) -> None:
        """Record that a flush touched another tenant's row."""
        self._logger.error(
            "cross_tenant_write_blocked",
            entity=entity,
            current_tenant_id=tenant_id,
            entity_tenant_id=entity_tenant_id,
            **self._get_context_kwargs(),
        )

    def write_without_tenant_blocked(self, entities: int) -> None:
        """Record that a flush wrote tenant-scoped rows without a tenant."""
        self._logger.warning(
            "write_without_tenant_blocked",
            entities=entities,
            **self._get_context_kwargs(),
        )

    def tenant_engine_created(self, cache_key: str) -> None:
        """Record that an engine (or engine view) was created for a tenant."""
        self._logger.info(
            "tenant_engine_created",
            cache_key=cache_key,
            **self._get_context_kwargs(),
        )

    def engines_disposed(self, count: int) -> None:
        """Record that cached tenant engines were disposed."""
        self._logger.info(
            "tenant_engines_disposed",
            count=count,
            **self._get_context_kwargs(),
        )

    def tenant_migration_started(self, tenant_id: str, schema: str | None) -> None:
        """Record that migrating a tenant started."""
        self._logger.info(
            "tenant_migration_started",
            migrated_tenant_id=tenant_id,
            schema=schema,
            **self._get_context_kwargs(),
        )

    def tenant_migration_completed(self, tenant_id: str) -> None:
        """Record that migrating a tenant finished."""
        self._logger.info(
            "tenant_migration_completed",
            migrated_tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_migration_failed(self, tenant_id: str, error: Exception) -> None:
        """Record that migrating a tenant failed and the run stopped."""
        self._logger.error(
            "tenant_migration_failed",
            migrated_tenant_id=tenant_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
