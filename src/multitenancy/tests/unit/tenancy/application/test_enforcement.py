"""Unit tests for TenantEnforcer."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock

import pytest
import structlog

from tenancy.application.observability import EnforcementProbe
from tenancy.application.services.enforcement import TenantEnforcer
from tenancy.domain.errors import TenancyError, TenancyErrorKind
from tenancy.domain.options import TenancyOptions
from tenancy.domain.requirements import allow_host_requests, requires_tenant
from tenancy.domain.value_objects import TenantInfo, TenantRequirementMode, TenantState

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_probe():
    """Mock enforcement probe."""
    return Mock(spec=EnforcementProbe)


@pytest.fixture
def enforcer(accessor, mock_probe):
    """Enforcer with default options and a fixed clock."""
    return TenantEnforcer(accessor, clock=lambda: NOW, probe=mock_probe)


@requires_tenant
class CreateOrder:
    """Operation that needs a tenant."""


@allow_host_requests
class ListPlans:
    """Host-level operation."""


class TestRequirementFor:
    """Tests for TenantEnforcer.requirement_for()."""

    def test_declared_requirement_wins(self, enforcer):
        """Test explicit declarations."""
        assert enforcer.requirement_for(CreateOrder) == TenantRequirementMode.REQUIRED
        assert enforcer.requirement_for(ListPlans) == TenantRequirementMode.OPTIONAL

    def test_default_applies_without_declaration(self, accessor):
        """Test require_tenant_by_default."""
        strict = TenantEnforcer(accessor, TenancyOptions(require_tenant_by_default=True))
        lenient = TenantEnforcer(
            accessor, TenancyOptions(require_tenant_by_default=False)
        )

        assert strict.requirement_for(object()) == TenantRequirementMode.REQUIRED
        assert lenient.requirement_for(object()) == TenantRequirementMode.OPTIONAL

    def test_optional_upgraded_when_anonymous_not_allowed(self, accessor):
        """Test that allow_anonymous=False turns optional into required."""
        enforcer = TenantEnforcer(accessor, TenancyOptions(allow_anonymous=False))

        assert enforcer.requirement_for(ListPlans) == TenantRequirementMode.REQUIRED


class TestEnforce:
    """Tests for TenantEnforcer.enforce()."""

    def test_optional_passes_without_tenant(self, enforcer, mock_probe):
        """Test that host operations run without a tenant."""
        enforcer.enforce(ListPlans)

        mock_probe.tenant_not_required.assert_called_once_with("ListPlans")

    def test_active_tenant_passes(self, enforcer, accessor, make_context, mock_probe):
        """Test the happy path."""
        accessor.set(make_context("acme"))

        enforcer.enforce(CreateOrder)

        mock_probe.tenant_enforced.assert_called_once_with("CreateOrder", "acme")

    def test_not_resolved(self, enforcer, mock_probe):
        """Test that a missing tenant fails first."""
        with pytest.raises(TenancyError) as exc_info:
            enforcer.enforce(CreateOrder)

        assert exc_info.value.kind == TenancyErrorKind.NOT_RESOLVED
        mock_probe.enforcement_failed.assert_called_once_with(
            "CreateOrder", "not_resolved", None
        )

    def test_unvalidated_tenant_is_not_found(self, enforcer, accessor, make_context):
        """Test that an unvalidated tenant is rejected."""
        accessor.set(make_context(TenantInfo.unknown("ghost"), validated=False))

        with pytest.raises(TenancyError) as exc_info:
            enforcer.enforce(CreateOrder)

        assert exc_info.value.kind == TenancyErrorKind.NOT_FOUND
        assert exc_info.value.tenant_id == "ghost"

    def test_suspended_tenant(self, enforcer, accessor, make_context):
        """Test that suspension is reported before inactivity."""
        tenant = TenantInfo(
            tenant_id="acme", is_active=False, state=TenantState.SUSPENDED
        )
        accessor.set(make_context(tenant))

        with pytest.raises(TenancyError) as exc_info:
            enforcer.enforce(CreateOrder)

        assert exc_info.value.kind == TenancyErrorKind.SUSPENDED

    @pytest.mark.parametrize(
        ("tenant", "reason"),
        [
            (TenantInfo(tenant_id="acme", is_active=False), "disabled"),
            (TenantInfo(tenant_id="acme", is_soft_deleted=True), "deleted"),
            (TenantInfo(tenant_id="acme", state=TenantState.DELETED), "deleted"),
            (
                TenantInfo(tenant_id="acme", state=TenantState.PENDING_PROVISION),
                "pending_provision",
            ),
            (TenantInfo(tenant_id="acme", expires_at=NOW), "expired"),
            (
                TenantInfo(tenant_id="acme", expires_at=NOW - timedelta(days=1)),
                "expired",
            ),
        ],
    )
    def test_inactive_tenants(self, enforcer, accessor, make_context, tenant, reason):
        """Test every inactivity reason."""
        accessor.set(make_context(tenant))

        with pytest.raises(TenancyError) as exc_info:
            enforcer.enforce(CreateOrder)

        assert exc_info.value.kind == TenancyErrorKind.INACTIVE
        assert exc_info.value.metadata["reason"] == reason

    def test_future_expiry_passes(self, enforcer, accessor, make_context):
        """Test that a tenant expiring later is still active."""
        tenant = TenantInfo(tenant_id="acme", expires_at=NOW + timedelta(seconds=1))
        accessor.set(make_context(tenant))

        enforcer.enforce(CreateOrder)

    def test_required_by_default_for_undeclared_operation(self, enforcer):
        """Test that undeclared operations need a tenant by default."""
        with pytest.raises(TenancyError):
            enforcer.enforce()


class TestHandle:
    """Tests for TenantEnforcer.handle()."""

    @pytest.mark.asyncio
    async def test_runs_next_step_after_enforcement(
        self, enforcer, accessor, make_context
    ):
        """Test that the continuation runs and its result is returned."""
        accessor.set(make_context("acme"))
        call_next = AsyncMock(return_value="created")

        result = await enforcer.handle(CreateOrder(), call_next)

        assert result == "created"
        call_next.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_skips_next_step(self, enforcer):
        """Test that the continuation does not run when enforcement fails."""
        call_next = AsyncMock()

        with pytest.raises(TenancyError):
            await enforcer.handle(CreateOrder(), call_next)

        call_next.assert_not_called()

    @pytest.mark.asyncio
    async def test_next_step_runs_in_tenant_log_scope(self, accessor, make_context):
        """Test that the tenant id is bound under the configured log key."""
        enforcer = TenantEnforcer(accessor, TenancyOptions(log_scope_key="tenant"))

        async def call_next():
            return structlog.contextvars.get_contextvars().get("tenant")

        with accessor.begin_scope(make_context("acme")):
            assert await enforcer.handle(CreateOrder(), call_next) == "acme"

        assert "tenant" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_log_scope_can_be_disabled(self, accessor, make_context):
        """Test that add_tenant_to_log_scope=False binds nothing."""
        enforcer = TenantEnforcer(
            accessor, TenancyOptions(add_tenant_to_log_scope=False)
        )

        async def call_next():
            return structlog.contextvars.get_contextvars().get("tenant_id")

        with accessor.begin_scope(make_context("acme")):
            assert await enforcer.handle(CreateOrder(), call_next) is None
