"""Protocol for tenant resolution observability.

Defines the interface for domain probes that capture how the composite
strategy arrived at (or failed to arrive at) a tenant id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, Sequence

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ResolutionProbe(Protocol):
    """Domain probe for tenant resolution."""

    def provider_evaluated(
        self, source: str, candidates: Sequence[str]
    ) -> None:
        """Record the candidates one provider reported."""
        ...

    def tenant_resolved(self, tenant_id: str, source: str, confidence: str) -> None:
        """Record that resolution produced a single tenant id."""
        ...

    def resolution_ambiguous(self, source: str, candidates: Sequence[str]) -> None:
        """Record that resolution produced conflicting tenant ids."""
        ...

    def tenant_not_found(self) -> None:
        """Record that no provider found a tenant id."""
        ...

    def resolution_timed_out(self, timeout: float) -> None:
        """Record that resolution exceeded its deadline."""
        ...

    def with_context(self, context: ObservationContext) -> ResolutionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultResolutionProbe:
    """Default implementation of ResolutionProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultResolutionProbe:
        """Create a new probe with observation context bound."""
        return DefaultResolutionProbe(logger=self._logger, context=context)

    def provider_evaluated(self, source: str, candidates: Sequence[str]) -> None:
        """Record the candidates one provider reported."""
        self._logger.debug(
            "tenant_provider_evaluated",
            source=source,
            candidates=list(candidates),
            **self._get_context_kwargs(),
        )

    def tenant_resolved(self, tenant_id: str, source: str, confidence: str) -> None:
        """Record that resolution produced a single tenant id."""
        self._logger.debug(
            "tenant_resolved",
            resolved_tenant_id=tenant_id,
            source=source,
            confidence=confidence,
            **self._get_context_kwargs(),
        )

    def resolution_ambiguous(self, source: str, candidates: Sequence[str]) -> None:
        """Record that resolution produced conflicting tenant ids."""
        self._logger.warning(
            "tenant_resolution_ambiguous",
            source=source,
            candidates=list(candidates),
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self) -> None:
        """Record that no provider found a tenant id."""
        self._logger.debug(
            "tenant_not_found",
            **self._get_context_kwargs(),
        )

    def resolution_timed_out(self, timeout: float) -> None:
        """Record that resolution exceeded its deadline."""
        self._logger.warning(
            "tenant_resolution_timed_out",
            timeout_seconds=timeout,
            **self._get_context_kwargs(),
        )
