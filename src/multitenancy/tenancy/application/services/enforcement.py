"""Tenant enforcement applied before an operation runs.

Enforcement decides whether an operation needs a tenant and, if so, checks
the ambient tenant's lifecycle state. Checks fail fast in a fixed order:
resolution, validation, suspension, activity, expiry.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, TypeVar

from tenancy.application.current_tenant import CurrentTenantAccessor
from tenancy.application.observability import (
    DefaultEnforcementProbe,
    EnforcementProbe,
)
from tenancy.domain.errors import TenancyError
from tenancy.domain.options import TenancyOptions
from tenancy.domain.requirements import declared_requirement
from tenancy.domain.value_objects import TenantRequirementMode, TenantState

T = TypeVar("T")

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _operation_name(operation: Any) -> str:
    if operation is None:
        return "unknown"
    name = getattr(operation, "__qualname__", None)
    if isinstance(name, str):
        return name
    return type(operation).__qualname__


class TenantEnforcer:
    """Checks the ambient tenant against an operation's requirement."""

    def __init__(
        self,
        accessor: CurrentTenantAccessor,
        options: TenancyOptions | None = None,
        clock: Clock | None = None,
        probe: EnforcementProbe | None = None,
    ) -> None:
        """Initialize the enforcer.

        Args:
            accessor: Ambient tenant accessor
            options: Requirement defaults (require_tenant_by_default, allow_anonymous)
            clock: Returns the current UTC time; used for expiry checks
            probe: Optional domain probe for observability
        """
        self._accessor = accessor
        self._options = options or TenancyOptions()
        self._clock = clock or _utc_now
        self._probe = probe or DefaultEnforcementProbe()

    def requirement_for(self, operation: Any) -> TenantRequirementMode:
        """Determine whether an operation needs a tenant.

        An explicit declaration wins, except that an optional declaration is
        upgraded to required when anonymous (tenant-less) access is not
        allowed. Without a declaration ``require_tenant_by_default`` decides.
        """
        declared = declared_requirement(operation)
        if declared is not None:
            if (
                declared == TenantRequirementMode.OPTIONAL
                and not self._options.allow_anonymous
            ):
                return TenantRequirementMode.REQUIRED
            return declared

        if self._options.require_tenant_by_default:
            return TenantRequirementMode.REQUIRED
        return TenantRequirementMode.OPTIONAL

    def enforce(self, operation: Any = None) -> None:
        """Check the ambient tenant for an operation.

        Args:
            operation: Request object, handler class or function carrying
                the requirement declaration

        Raises:
            TenancyError: NOT_RESOLVED, NOT_FOUND, SUSPENDED or INACTIVE at
                the first failed check
        """
        name = _operation_name(operation)
        if self.requirement_for(operation) == TenantRequirementMode.OPTIONAL:
            self._probe.tenant_not_required(name)
            return

        try:
            self._check_tenant()
        except TenancyError as error:
            self._probe.enforcement_failed(name, str(error.kind), error.tenant_id)
            raise

        self._probe.tenant_enforced(name, self._accessor.tenant_id or "")

    async def handle(self, request: Any, call_next: Callable[[], Awaitable[T]]) -> T:
        """Enforce the requirement of ``request`` and then run the next step.

        With ``add_tenant_to_log_scope`` set, the continuation runs with the
        tenant id bound under ``log_scope_key`` in structlog context
        variables.

        Args:
            request: Request carrying the requirement declaration
            call_next: Continuation running the rest of the pipeline

        Returns:
            Whatever the continuation returns

        Raises:
            TenancyError: If enforcement fails; the continuation is not run
        """
        self.enforce(request)
        if not self._options.add_tenant_to_log_scope:
            return await call_next()
        with self._accessor.log_scope(self._options.log_scope_key):
            return await call_next()

    def _check_tenant(self) -> None:
        accessor = self._accessor
        if not accessor.is_resolved:
            raise TenancyError.not_resolved()

        if not accessor.is_validated:
            raise TenancyError.not_found(accessor.tenant_id)

        tenant = accessor.tenant_info
        if tenant is None:
            raise TenancyError.not_found(accessor.tenant_id)

        if tenant.state == TenantState.SUSPENDED:
            raise TenancyError.suspended(tenant.tenant_id)

        if not tenant.is_active:
            raise TenancyError.inactive(tenant.tenant_id, "disabled")
        if tenant.is_soft_deleted or tenant.state == TenantState.DELETED:
            raise TenancyError.inactive(tenant.tenant_id, "deleted")
        if tenant.state == TenantState.PENDING_PROVISION:
            raise TenancyError.inactive(tenant.tenant_id, "pending_provision")

        if tenant.expires_at is not None and tenant.expires_at <= self._clock():
            raise TenancyError.inactive(tenant.tenant_id, "expired")
