"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for database engine lifecycle.

    Captures engine creation and disposal without exposing logging
    implementation details.
    """

    def engine_created(self, url: str) -> None:
        """Record that an engine was created."""
        ...

    def engine_disposed(self, url: str) -> None:
        """Record that an engine and its pool were disposed."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog.

    URLs are logged with the password masked.
    """

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

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def engine_created(self, url: str) -> None:
        """Record that an engine was created."""
        self._logger.info(
            "database_engine_created",
            url=url,
            **self._get_context_kwargs(),
        )

    def engine_disposed(self, url: str) -> None:
        """Record that an engine and its pool were disposed."""
        self._logger.info(
            "database_engine_disposed",
            url=url,
            **self._get_context_kwargs(),
        )
