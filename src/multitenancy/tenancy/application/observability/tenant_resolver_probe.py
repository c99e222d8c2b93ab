"""Protocol for tenant validation observability.

Defines the interface for domain probes that capture how resolved tenant
ids were checked against the cache and the tenant store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantResolverProbe(Protocol):
    """Domain probe for tenant validation."""

    def fallback_tenant_used(self, tenant_id: str) -> None:
        """Record that the configured fallback tenant was used."""
        ...

    def tenant_validated(self, tenant_id: str, mode: str) -> None:
        """Record that a tenant id was confirmed to exist."""
        ...

    def tenant_validation_failed(self, tenant_id: str, mode: str) -> None:
        """Record that a tenant id was not found by validation."""
        ...

    def validation_backend_missing(self, mode: str) -> None:
        """Record that the validation mode has no backing cache or store."""
        ...

    def tenant_cached(self, tenant_id: str, ttl: float | None) -> None:
        """Record that a tenant record was written to the cache."""
        ...

    def with_context(self, context: ObservationContext) -> TenantResolverProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantResolverProbe:
    """Default implementation of TenantResolverProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantResolverProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantResolverProbe(logger=self._logger, context=context)

    def fallback_tenant_used(self, tenant_id: str) -> None:
        """Record that the configured fallback tenant was used."""
        self._logger.info(
            "fallback_tenant_used",
            resolved_tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_validated(self, tenant_id: str, mode: str) -> None:
        """Record that a tenant id was confirmed to exist."""
        self._logger.debug(
            "tenant_validated",
            resolved_tenant_id=tenant_id,
            validation_mode=mode,
            **self._get_context_kwargs(),
        )

    def tenant_validation_failed(self, tenant_id: str, mode: str) -> None:
        """Record that a tenant id was not found by validation."""
        self._logger.warning(
            "tenant_validation_failed",
            resolved_tenant_id=tenant_id,
            validation_mode=mode,
            **self._get_context_kwargs(),
        )

    def validation_backend_missing(self, mode: str) -> None:
        """Record that the validation mode has no backing cache or store."""
        self._logger.warning(
            "tenant_validation_backend_missing",
            validation_mode=mode,
            **self._get_context_kwargs(),
        )

    def tenant_cached(self, tenant_id: str, ttl: float | None) -> None:
        """Record that a tenant record was written to the cache."""
        self._logger.debug(
            "tenant_cached",
            resolved_tenant_id=tenant_id,
            ttl_seconds=ttl,
            **self._get_context_kwargs(),
        )
