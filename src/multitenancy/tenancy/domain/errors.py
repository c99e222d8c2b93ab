"""Error taxonomy for tenancy failures.

All tenancy failures are raised as ``TenancyError``. Callers branch on
``kind`` instead of on exception subclasses; the structured payload
(code, severity, transient flag, metadata) is what host adapters map to
their own responses.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class TenancyErrorKind(StrEnum):
    """Category of a tenancy failure."""

    NOT_RESOLVED = "not_resolved"
    NOT_FOUND = "not_found"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"
    CROSS_TENANT_WRITE = "cross_tenant_write"
    CONFIGURATION = "configuration"


class ErrorSeverity(StrEnum):
    """Severity attached to a tenancy failure."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_CODES: dict[TenancyErrorKind, str] = {
    TenancyErrorKind.NOT_RESOLVED: "TENANT_NOT_RESOLVED",
    TenancyErrorKind.NOT_FOUND: "TENANT_NOT_FOUND",
    TenancyErrorKind.SUSPENDED: "TENANT_SUSPENDED",
    TenancyErrorKind.INACTIVE: "TENANT_INACTIVE",
    TenancyErrorKind.CROSS_TENANT_WRITE: "TENANT_MISMATCH",
    TenancyErrorKind.CONFIGURATION: "TENANCY_CONFIGURATION",
}

_SEVERITIES: dict[TenancyErrorKind, ErrorSeverity] = {
    TenancyErrorKind.NOT_RESOLVED: ErrorSeverity.WARNING,
    TenancyErrorKind.NOT_FOUND: ErrorSeverity.WARNING,
    TenancyErrorKind.SUSPENDED: ErrorSeverity.WARNING,
    TenancyErrorKind.INACTIVE: ErrorSeverity.WARNING,
    TenancyErrorKind.CROSS_TENANT_WRITE: ErrorSeverity.ERROR,
    TenancyErrorKind.CONFIGURATION: ErrorSeverity.CRITICAL,
}


class TenancyError(Exception):
    """Raised when a tenancy rule is violated.

    Attributes:
        kind: Category of the failure.
        message: Human readable description.
        tenant_id: Tenant involved, when one is known.
        code: Stable machine readable code derived from the kind.
        severity: Severity derived from the kind unless overridden.
        transient: True when retrying the operation may succeed.
        metadata: Extra structured details (entity names, states).
    """

    def __init__(
        self,
        kind: TenancyErrorKind,
        message: str,
        tenant_id: str | None = None,
        *,
        severity: ErrorSeverity | None = None,
        transient: bool = False,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.tenant_id = tenant_id
        self.code = _CODES[kind]
        self.severity = severity or _SEVERITIES[kind]
        self.transient = transient
        self.metadata: dict[str, Any] = dict(metadata or {})

    def as_dict(self) -> dict[str, Any]:
        """Structured payload for logs and host error responses."""
        payload: dict[str, Any] = {
            "kind": str(self.kind),
            "code": self.code,
            "message": self.message,
            "severity": str(self.severity),
            "transient": self.transient,
        }
        if self.tenant_id is not None:
            payload["tenant_id"] = self.tenant_id
        if self.metadata:
            payload["metadata"] = dict(self.metadata)
        return payload

    def __repr__(self) -> str:
        return (
            f"TenancyError(kind={self.kind.value!r}, message={self.message!r}, "
            f"tenant_id={self.tenant_id!r})"
        )

    @classmethod
    def not_resolved(cls, message: str = "Tenant could not be resolved.") -> TenancyError:
        return cls(TenancyErrorKind.NOT_RESOLVED, message)

    @classmethod
    def not_found(cls, tenant_id: str | None) -> TenancyError:
        return cls(
            TenancyErrorKind.NOT_FOUND,
            f"Tenant '{tenant_id}' was not found.",
            tenant_id,
        )

    @classmethod
    def suspended(cls, tenant_id: str) -> TenancyError:
        return cls(
            TenancyErrorKind.SUSPENDED,
            f"Tenant '{tenant_id}' is suspended.",
            tenant_id,
        )

    @classmethod
    def inactive(cls, tenant_id: str, reason: str) -> TenancyError:
        return cls(
            TenancyErrorKind.INACTIVE,
            f"Tenant '{tenant_id}' is inactive ({reason}).",
            tenant_id,
            metadata={"reason": reason},
        )

    @classmethod
    def cross_tenant_write(
        cls, tenant_id: str, entity_tenant_id: str | None, entity: str
    ) -> TenancyError:
        return cls(
            TenancyErrorKind.CROSS_TENANT_WRITE,
            f"Tenant mismatch for '{entity}'. Current tenant '{tenant_id}' "
            f"does not match entity tenant '{entity_tenant_id}'.",
            tenant_id,
            metadata={"entity": entity, "entity_tenant_id": entity_tenant_id},
        )

    @classmethod
    def configuration(cls, message: str, **metadata: Any) -> TenancyError:
        return cls(TenancyErrorKind.CONFIGURATION, message, metadata=metadata)
