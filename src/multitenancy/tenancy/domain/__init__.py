"""Tenancy domain: value objects, tenant context and the error taxonomy."""

from tenancy.domain.errors import ErrorSeverity, TenancyError, TenancyErrorKind
from tenancy.domain.options import DEFAULT_RESOLUTION_ORDER, TenancyOptions
from tenancy.domain.tenant_context import TenantContext
from tenancy.domain.value_objects import (
    ResolutionConfidence,
    ResolutionContext,
    ResolutionResult,
    ResolutionSource,
    TenantInfo,
    TenantRequirementMode,
    TenantState,
    ValidationMode,
    split_tenant_values,
)

__all__ = [
    "DEFAULT_RESOLUTION_ORDER",
    "ErrorSeverity",
    "ResolutionConfidence",
    "ResolutionContext",
    "ResolutionResult",
    "ResolutionSource",
    "TenancyError",
    "TenancyErrorKind",
    "TenancyOptions",
    "TenantContext",
    "TenantInfo",
    "TenantRequirementMode",
    "TenantState",
    "ValidationMode",
    "split_tenant_values",
]
