"""Tenant context serialization.

Tenant contexts cross process boundaries with background jobs and messages.
This module converts a ``TenantContext`` to a JSON document and back; the
resulting context carries the same tenant snapshot, provenance and
validation flag.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import UUID

from tenancy.domain.tenant_context import TenantContext
from tenancy.domain.value_objects import (
    ResolutionConfidence,
    ResolutionResult,
    ResolutionSource,
    TenantInfo,
    TenantState,
)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def tenant_to_dict(tenant: TenantInfo) -> dict[str, Any]:
    """Convert a tenant record to a JSON-serializable dictionary."""
    return {
        "tenant_id": tenant.tenant_id,
        "internal_id": str(tenant.internal_id) if tenant.internal_id else None,
        "name": tenant.name,
        "type": tenant.type,
        "region": tenant.region,
        "is_active": tenant.is_active,
        "is_soft_deleted": tenant.is_soft_deleted,
        "created_at": _isoformat(tenant.created_at),
        "expires_at": _isoformat(tenant.expires_at),
        "parent_id": tenant.parent_id,
        "state": tenant.state.value,
        "metadata": dict(tenant.metadata),
    }


def tenant_from_dict(data: dict[str, Any]) -> TenantInfo:
    """Reconstruct a tenant record from a dictionary.

    Raises:
        KeyError: If tenant_id is missing
        ValueError: If a field holds an invalid value
    """
    internal_id = data.get("internal_id")
    created_at = _parse_datetime(data.get("created_at"))
    fields: dict[str, Any] = {
        "tenant_id": data["tenant_id"],
        "internal_id": UUID(internal_id) if internal_id else None,
        "name": data.get("name"),
        "type": data.get("type"),
        "region": data.get("region"),
        "is_active": data.get("is_active", True),
        "is_soft_deleted": data.get("is_soft_deleted", False),
        "expires_at": _parse_datetime(data.get("expires_at")),
        "parent_id": data.get("parent_id"),
        "state": TenantState(data.get("state", TenantState.ACTIVE.value)),
        "metadata": data.get("metadata") or {},
    }
    if created_at is not None:
        fields["created_at"] = created_at
    return TenantInfo(**fields)


class TenantContextSerializer:
    """JSON serializer for tenant contexts."""

    def to_dict(self, context: TenantContext) -> dict[str, Any]:
        """Convert a tenant context to a JSON-serializable dictionary."""
        return {
            "tenant": tenant_to_dict(context.tenant),
            "correlation_id": context.correlation_id,
            "resolved_at": _isoformat(context.resolved_at),
            "is_validated": context.is_validated,
            "source": context.source.value,
            "confidence": context.confidence.name,
            "candidates": list(context.resolution.candidates),
        }

    def from_dict(self, payload: dict[str, Any]) -> TenantContext:
        """Reconstruct a tenant context from a dictionary.

        Raises:
            KeyError: If the tenant snapshot is missing or the confidence
                is unknown
            ValueError: If the source is unknown
        """
        tenant = tenant_from_dict(payload["tenant"])
        candidates = payload.get("candidates") or [tenant.tenant_id]
        resolution = ResolutionResult(
            source=ResolutionSource(payload.get("source", ResolutionSource.UNKNOWN)),
            confidence=ResolutionConfidence[payload.get("confidence", "NONE")],
            candidates=tuple(candidates),
        )
        context = TenantContext(
            tenant=tenant,
            resolution=resolution,
            correlation_id=payload.get("correlation_id"),
            is_validated=bool(payload.get("is_validated", False)),
        )
        resolved_at = _parse_datetime(payload.get("resolved_at"))
        if resolved_at is not None:
            context.resolved_at = resolved_at
        return context

    def serialize(self, context: TenantContext) -> str:
        """Serialize a tenant context to a JSON string."""
        return json.dumps(self.to_dict(context))

    def deserialize(self, payload: str) -> TenantContext | None:
        """Deserialize a tenant context from a JSON string.

        Returns:
            The tenant context, or None for a blank payload
        """
        if not payload or not payload.strip():
            return None
        return self.from_dict(json.loads(payload))
