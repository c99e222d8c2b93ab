"""Isolation domain: isolation modes and configuration."""

from isolation.domain.value_objects import (
    IsolationConfig,
    IsolationMode,
    TenantNameResolver,
)

__all__ = [
    "IsolationConfig",
    "IsolationMode",
    "TenantNameResolver",
]
