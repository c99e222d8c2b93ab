"""Declarative tenant requirement markers.

Operations declare whether they need a tenant either by exposing a
``tenant_requirement`` attribute or by being decorated with
``requires_tenant`` / ``allow_host_requests``. Markers on a class are
inherited by subclasses and accumulate.
"""

from __future__ import annotations

from typing import Any, TypeVar

from tenancy.domain.value_objects import TenantRequirementMode

T = TypeVar("T")

REQUIREMENTS_ATTRIBUTE = "__tenant_requirements__"


def _mark(target: T, requirement: TenantRequirementMode) -> T:
    existing = tuple(getattr(target, REQUIREMENTS_ATTRIBUTE, ()))
    setattr(target, REQUIREMENTS_ATTRIBUTE, existing + (requirement,))
    return target


def requires_tenant(target: T) -> T:
    """Mark a class or function as requiring a tenant."""
    return _mark(target, TenantRequirementMode.REQUIRED)


def allow_host_requests(target: T) -> T:
    """Mark a class or function as runnable without a tenant (host level)."""
    return _mark(target, TenantRequirementMode.OPTIONAL)


def declared_requirement(operation: Any) -> TenantRequirementMode | None:
    """Return the requirement an operation declares, if any.

    An explicit ``tenant_requirement`` attribute wins. Otherwise markers are
    combined: any ``required`` marker makes the operation required.
    """
    explicit = getattr(operation, "tenant_requirement", None)
    if explicit is not None:
        return TenantRequirementMode(explicit)

    markers = getattr(operation, REQUIREMENTS_ATTRIBUTE, ())
    if not markers:
        return None
    if TenantRequirementMode.REQUIRED in markers:
        return TenantRequirementMode.REQUIRED
    return TenantRequirementMode.OPTIONAL
