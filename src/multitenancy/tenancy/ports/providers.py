"""Resolution protocols (ports) for the tenancy bounded context.

Providers look at one part of an inbound operation (route, host, header,
query, claim, configuration) and report the tenant ids they find. The
resolution strategy combines providers into a single result.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tenancy.domain.value_objects import (
    ResolutionContext,
    ResolutionResult,
    ResolutionSource,
)


@runtime_checkable
class ITenantProvider(Protocol):
    """Reads tenant ids from one source of a resolution context.

    Providers never raise for missing or malformed data; they return a
    not-found result instead.
    """

    @property
    def source(self) -> ResolutionSource:
        """The source this provider reads from."""
        ...

    async def resolve(self, context: ResolutionContext) -> ResolutionResult:
        """Resolve tenant candidates from the context.

        Args:
            context: Transport-neutral view of the inbound operation

        Returns:
            Result tagged with this provider's source
        """
        ...


@runtime_checkable
class ITenantResolutionStrategy(Protocol):
    """Combines providers into a single resolution result."""

    async def resolve(self, context: ResolutionContext) -> ResolutionResult:
        """Resolve the tenant of an operation.

        Args:
            context: Transport-neutral view of the inbound operation

        Returns:
            Resolved, ambiguous or not-found result

        Raises:
            TimeoutError: If a resolution deadline is configured and exceeded
        """
        ...
