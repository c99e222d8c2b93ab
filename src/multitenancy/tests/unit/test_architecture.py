"""Architecture tests using pytest-archon.

These tests enforce DDD architectural boundaries between layers of the
tenancy and isolation bounded contexts, and between the contexts.
"""

import pytest
from pytest_archon import archrule

CONTEXTS = ["tenancy", "isolation"]


class TestDomainLayerBoundaries:
    """Tests that domain layers have no forbidden dependencies."""

    @pytest.mark.parametrize("context", CONTEXTS)
    def test_domain_does_not_import_infrastructure(self, context):
        """Domain layer should not depend on infrastructure.

        The domain layer holds value objects and rules and should not know
        about SQLAlchemy sessions, caches or loggers.
        """
        (
            archrule(f"{context}_domain_no_infrastructure")
            .match(f"{context}.domain*")
            .should_not_import(f"{context}.infrastructure*", "infrastructure*")
            .check(context)
        )

    @pytest.mark.parametrize("context", CONTEXTS)
    def test_domain_does_not_import_application(self, context):
        """Domain objects should be usable without application services."""
        (
            archrule(f"{context}_domain_no_application")
            .match(f"{context}.domain*")
            .should_not_import(f"{context}.application*")
            .check(context)
        )

    @pytest.mark.parametrize("context", CONTEXTS)
    def test_domain_does_not_import_sqlalchemy(self, context):
        """Domain layer should be persistence-agnostic."""
        (
            archrule(f"{context}_domain_no_sqlalchemy")
            .match(f"{context}.domain*")
            .should_not_import("sqlalchemy*", "structlog*")
            .check(context)
        )


class TestPortsLayerBoundaries:
    """Tests that ports have no forbidden dependencies."""

    @pytest.mark.parametrize("context", CONTEXTS)
    def test_ports_does_not_import_infrastructure(self, context):
        """Ports define interfaces, not implementations."""
        (
            archrule(f"{context}_ports_no_infrastructure")
            .match(f"{context}.ports*")
            .should_not_import(f"{context}.infrastructure*")
            .check(context)
        )

    @pytest.mark.parametrize("context", CONTEXTS)
    def test_ports_does_not_import_application(self, context):
        """Ports are used by the application layer, not the other way around."""
        (
            archrule(f"{context}_ports_no_application")
            .match(f"{context}.ports*")
            .should_not_import(f"{context}.application*")
            .check(context)
        )


class TestApplicationLayerBoundaries:
    """Tests that the application layer depends on ports, not adapters."""

    def test_application_does_not_import_infrastructure(self):
        """Application services should depend on ports.

        Resolution, validation and enforcement talk to the cache and store
        through ITenantInfoCache and ITenantInfoStore only.
        """
        (
            archrule("tenancy_application_no_infrastructure")
            .match("tenancy.application*")
            .should_not_import("tenancy.infrastructure*")
            .check("tenancy")
        )


class TestInfrastructureLayerBoundaries:
    """Tests that infrastructure does not reach into application services."""

    @pytest.mark.parametrize("context", CONTEXTS)
    def test_infrastructure_does_not_import_application(self, context):
        """Infrastructure is used by the application layer, not vice versa."""
        (
            archrule(f"{context}_infrastructure_no_application")
            .match(f"{context}.infrastructure*")
            .should_not_import(f"{context}.application*", "tenancy.application*")
            .check(context)
        )


class TestBoundedContextBoundaries:
    """Tests the dependency direction between bounded contexts."""

    def test_tenancy_does_not_import_isolation(self):
        """Tenancy knows nothing about storage isolation."""
        (
            archrule("tenancy_no_isolation")
            .match("tenancy*")
            .should_not_import("isolation*")
            .check("tenancy")
        )

    def test_shared_kernel_does_not_import_contexts(self):
        """The shared kernel is a leaf dependency."""
        (
            archrule("shared_kernel_is_leaf")
            .match("shared_kernel*")
            .should_not_import("tenancy*", "isolation*", "infrastructure*")
            .check("shared_kernel")
        )
