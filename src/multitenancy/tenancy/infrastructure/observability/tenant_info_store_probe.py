"""Protocol for tenant store observability.

Defines the interface for domain probes that capture tenant record
persistence operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantInfoStoreProbe(Protocol):
    """Domain probe for tenant store operations."""

    def tenant_saved(self, tenant_id: str) -> None:
        """Record that a tenant record was saved."""
        ...

    def tenant_retrieved(self, tenant_id: str) -> None:
        """Record that a tenant record was retrieved."""
        ...

    def tenant_not_found(self, tenant_id: str) -> None:
        """Record that no tenant record exists for an id."""
        ...

    def tenants_listed(self, count: int) -> None:
        """Record that tenant records were listed."""
        ...

    def with_context(self, context: ObservationContext) -> TenantInfoStoreProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantInfoStoreProbe:
    """Default implementation of TenantInfoStoreProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantInfoStoreProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantInfoStoreProbe(logger=self._logger, context=context)

    def tenant_saved(self, tenant_id: str) -> None:
        """Record that a tenant record was saved."""
        self._logger.info(
            "tenant_info_saved",
            stored_tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_retrieved(self, tenant_id: str) -> None:
        """Record that a tenant record was retrieved."""
        self._logger.debug(
            "tenant_info_retrieved",
            stored_tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self, tenant_id: str) -> None:
        """Record that no tenant record exists for an id."""
        self._logger.debug(
            "tenant_info_not_found",
            stored_tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenants_listed(self, count: int) -> None:
        """Record that tenant records were listed."""
        self._logger.debug(
            "tenant_infos_listed",
            count=count,
            **self._get_context_kwargs(),
        )
