"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable metadata attached to every event a probe emits.

    Attributes:
        correlation_id: Identifier correlating events of one operation.
        tenant_id: Tenant the operation runs for, once known.
        operation: Name of the operation being observed (if applicable).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(correlation_id="req-123", tenant_id="acme")
        probe = DefaultTenantResolverProbe().with_context(context)
    """

    correlation_id: str | None = None
    tenant_id: str | None = None
    operation: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.correlation_id is not None:
            result["correlation_id"] = self.correlation_id
        if self.tenant_id is not None:
            result["tenant_id"] = self.tenant_id
        if self.operation is not None:
            result["operation"] = self.operation
        result.update(self.extra)
        return result

    def with_tenant(self, tenant_id: str | None) -> ObservationContext:
        """Create a new context with the tenant set."""
        return replace(self, tenant_id=tenant_id)

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return replace(self, extra={**self.extra, **kwargs})
