"""Domain-Oriented Observability for the isolation engine."""

from isolation.infrastructure.observability.isolation_probe import (
    DefaultIsolationProbe,
    IsolationProbe,
)

__all__ = [
    "DefaultIsolationProbe",
    "IsolationProbe",
]
