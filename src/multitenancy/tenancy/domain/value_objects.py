"""Value objects for the tenancy domain.

Value objects are immutable descriptors for the inputs and outputs of tenant
resolution: where a tenant id came from, how much it can be trusted, and the
descriptive record of the tenant itself.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum, StrEnum
from types import MappingProxyType
from typing import Iterable, Mapping
from uuid import UUID

_SEPARATORS = re.compile(r"[,;]")


def split_tenant_values(raw: str | None) -> list[str]:
    """Split a raw tenant value on ',' and ';', dropping blank entries.

    Args:
        raw: Header, route, query or claim value

    Returns:
        Trimmed, non-empty candidate ids in their original order
    """
    if raw is None or not raw.strip():
        return []
    return [part.strip() for part in _SEPARATORS.split(raw) if part.strip()]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ResolutionSource(StrEnum):
    """Where a tenant id was found."""

    UNKNOWN = "unknown"
    ROUTE = "route"
    HOST = "host"
    HEADER = "header"
    QUERY_STRING = "query_string"
    CLAIM = "claim"
    DEFAULT = "default"
    CUSTOM = "custom"
    COMPOSITE = "composite"


class ResolutionConfidence(IntEnum):
    """How much a resolved tenant id can be trusted, ordered."""

    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3


class TenantState(StrEnum):
    """Lifecycle state of a tenant."""

    UNKNOWN = "unknown"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    PENDING_PROVISION = "pending_provision"
    DELETED = "deleted"


class TenantRequirementMode(StrEnum):
    """Whether an operation needs a tenant."""

    REQUIRED = "required"
    OPTIONAL = "optional"


class ValidationMode(StrEnum):
    """How a resolved tenant id is checked against known tenants."""

    NONE = "none"
    CACHE = "cache"
    REPOSITORY = "repository"


def _lowered(values: Mapping[str, str] | None) -> Mapping[str, str]:
    if not values:
        return MappingProxyType({})
    return MappingProxyType({key.lower(): value for key, value in values.items()})


@dataclass(frozen=True)
class ResolutionContext:
    """Transport-neutral view of an inbound operation.

    Built by the host adapter (HTTP, message consumer, CLI) and read by
    resolution providers. Key lookups are case-insensitive.

    Attributes:
        host: Host name the request was addressed to, possibly with a port.
        correlation_id: Identifier used to correlate logs of the operation.
        headers: Header values keyed by name.
        route_values: Route parameter values keyed by name.
        query: Query parameter values keyed by name.
        claims: Identity claim values keyed by claim type.
    """

    host: str | None = None
    correlation_id: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    route_values: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, str] = field(default_factory=dict)
    claims: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _lowered(self.headers))
        object.__setattr__(self, "route_values", _lowered(self.route_values))
        object.__setattr__(self, "query", _lowered(self.query))
        object.__setattr__(self, "claims", _lowered(self.claims))

    def header(self, name: str) -> str | None:
        """Get a header value by case-insensitive name."""
        return self.headers.get(name.lower())

    def route_value(self, name: str) -> str | None:
        """Get a route value by case-insensitive name."""
        return self.route_values.get(name.lower())

    def query_value(self, name: str) -> str | None:
        """Get a query parameter by case-insensitive name."""
        return self.query.get(name.lower())

    def claim(self, claim_type: str) -> str | None:
        """Get a claim value by case-insensitive type."""
        return self.claims.get(claim_type.lower())


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of one provider or of the composite strategy.

    Candidates are unique (case-insensitively) and keep the spelling and
    order in which they were first seen. Use the factory methods rather than
    the constructor so that the candidate invariants hold.
    """

    source: ResolutionSource
    confidence: ResolutionConfidence
    candidates: tuple[str, ...] = ()

    @property
    def tenant_id(self) -> str | None:
        """The tenant id when exactly one candidate exists."""
        return self.candidates[0] if len(self.candidates) == 1 else None

    @property
    def is_resolved(self) -> bool:
        return len(self.candidates) == 1

    @property
    def is_ambiguous(self) -> bool:
        return len(self.candidates) > 1

    @property
    def is_not_found(self) -> bool:
        return not self.candidates

    @classmethod
    def not_found(
        cls, source: ResolutionSource = ResolutionSource.UNKNOWN
    ) -> ResolutionResult:
        """Create a result without candidates."""
        return cls(source=source, confidence=ResolutionConfidence.NONE)

    @classmethod
    def resolved(
        cls,
        tenant_id: str,
        source: ResolutionSource,
        confidence: ResolutionConfidence = ResolutionConfidence.MEDIUM,
    ) -> ResolutionResult:
        """Create a result for a single tenant id.

        Raises:
            ValueError: If tenant_id is blank
        """
        if tenant_id is None or not tenant_id.strip():
            raise ValueError("Tenant identifier cannot be empty")
        return cls(
            source=source,
            confidence=confidence,
            candidates=(tenant_id.strip(),),
        )

    @classmethod
    def from_candidates(
        cls,
        candidates: Iterable[str | None] | None,
        source: ResolutionSource,
        confidence: ResolutionConfidence = ResolutionConfidence.MEDIUM,
    ) -> ResolutionResult:
        """Create a result from raw candidates.

        Blank entries are dropped and duplicates removed case-insensitively.
        A single remaining candidate keeps the given confidence; several
        candidates produce an ambiguous result with LOW confidence.
        """
        unique: list[str] = []
        seen: set[str] = set()
        for candidate in candidates or ():
            if candidate is None or not candidate.strip():
                continue
            value = candidate.strip()
            key = value.casefold()
            if key in seen:
                continue
            seen.add(key)
            unique.append(value)

        if not unique:
            return cls.not_found(source)
        if len(unique) == 1:
            return cls(source=source, confidence=confidence, candidates=(unique[0],))
        return cls(
            source=source,
            confidence=ResolutionConfidence.LOW,
            candidates=tuple(unique),
        )


@dataclass(frozen=True)
class TenantInfo:
    """Descriptive record of a tenant.

    Attributes:
        tenant_id: Public tenant identifier (trimmed, never blank).
        internal_id: Optional surrogate id used by storage.
        name: Display name.
        type: Free-form classification (plan, tier).
        region: Hosting region.
        is_active: False once the tenant is disabled.
        is_soft_deleted: True once the tenant is soft deleted.
        created_at: Creation time (UTC).
        expires_at: Time after which the tenant is treated as inactive.
        parent_id: Parent tenant for hierarchical tenancy.
        state: Lifecycle state.
        metadata: Additional string attributes.
    """

    tenant_id: str
    internal_id: UUID | None = None
    name: str | None = None
    type: str | None = None
    region: str | None = None
    is_active: bool = True
    is_soft_deleted: bool = False
    created_at: datetime = field(default_factory=_utc_now)
    expires_at: datetime | None = None
    parent_id: str | None = None
    state: TenantState = TenantState.ACTIVE
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.tenant_id is None or not self.tenant_id.strip():
            raise ValueError("Tenant identifier cannot be empty")
        object.__setattr__(self, "tenant_id", self.tenant_id.strip())
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @classmethod
    def active(cls, tenant_id: str) -> TenantInfo:
        """Create a minimal active tenant record."""
        return cls(tenant_id=tenant_id)

    @classmethod
    def unknown(cls, tenant_id: str) -> TenantInfo:
        """Create a stub for a tenant id that could not be validated."""
        return cls(tenant_id=tenant_id, is_active=False, state=TenantState.UNKNOWN)
