"""Unit tests for declarative tenant requirement markers."""

from tenancy.domain.requirements import (
    allow_host_requests,
    declared_requirement,
    requires_tenant,
)
from tenancy.domain.value_objects import TenantRequirementMode


class TestDeclaredRequirement:
    """Tests for declared_requirement()."""

    def test_undeclared_operation(self):
        """Test that plain objects declare nothing."""

        class ListOrders:
            pass

        assert declared_requirement(ListOrders) is None
        assert declared_requirement(None) is None

    def test_requires_tenant_marker(self):
        """Test the required marker on a class."""

        @requires_tenant
        class CreateOrder:
            pass

        assert declared_requirement(CreateOrder) == TenantRequirementMode.REQUIRED

    def test_allow_host_requests_marker_on_function(self):
        """Test the optional marker on a function."""

        @allow_host_requests
        async def health_check():
            return "ok"

        assert declared_requirement(health_check) == TenantRequirementMode.OPTIONAL

    def test_required_marker_wins(self):
        """Test that any required marker makes the operation required."""

        @allow_host_requests
        class HostOperation:
            pass

        @requires_tenant
        class TenantOperation(HostOperation):
            pass

        assert declared_requirement(TenantOperation) == TenantRequirementMode.REQUIRED
        assert declared_requirement(HostOperation) == TenantRequirementMode.OPTIONAL

    def test_explicit_attribute_wins(self):
        """Test that a tenant_requirement attribute overrides markers."""

        @requires_tenant
        class Request:
            tenant_requirement = "optional"

        assert declared_requirement(Request()) == TenantRequirementMode.OPTIONAL
