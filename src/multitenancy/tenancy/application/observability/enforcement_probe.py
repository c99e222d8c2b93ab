"""Protocol for tenant enforcement observability.

Defines the interface for domain probes that capture enforcement decisions
made before an operation runs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class EnforcementProbe(Protocol):
    """Domain probe for tenant enforcement."""

    def tenant_not_required(self, operation: str) -> None:
        """Record that the operation does not need a tenant."""
        ...

    def tenant_enforced(self, operation: str, tenant_id: str) -> None:
        """Record that the tenant passed every lifecycle check."""
        ...

    def enforcement_failed(
        self, operation: str, kind: str, tenant_id: str | None
    ) -> None:
        """Record that the operation was rejected."""
        ...

    def with_context(self, context: ObservationContext) -> EnforcementProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultEnforcementProbe:
    """Default implementation of EnforcementProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultEnforcementProbe:
        """Create a new probe with observation context bound."""
        return DefaultEnforcementProbe(logger=self._logger, context=context)

    def tenant_not_required(self, operation: str) -> None:
        """Record that the operation does not need a tenant."""
        self._logger.debug(
            "tenant_not_required",
            operation_name=operation,
            **self._get_context_kwargs(),
        )

    def tenant_enforced(self, operation: str, tenant_id: str) -> None:
        """Record that the tenant passed every lifecycle check."""
        self._logger.debug(
            "tenant_enforced",
            operation_name=operation,
            resolved_tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def enforcement_failed(
        self, operation: str, kind: str, tenant_id: str | None
    ) -> None:
        """Record that the operation was rejected."""
        self._logger.warning(
            "tenant_enforcement_failed",
            operation_name=operation,
            error_kind=kind,
            resolved_tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )
