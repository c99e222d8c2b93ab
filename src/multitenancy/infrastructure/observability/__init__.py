"""Shared observability infrastructure.

Holds the probes for infrastructure concerns such as engine and connection
lifecycle. Context-specific probes live next to the code they observe, in
each bounded context's ``observability`` package.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from shared_kernel.observability_context import ObservationContext
from infrastructure.observability.probes import (
    ConnectionProbe,
    DefaultConnectionProbe,
)

__all__ = [
    "ConnectionProbe",
    "DefaultConnectionProbe",
    "ObservationContext",
]
