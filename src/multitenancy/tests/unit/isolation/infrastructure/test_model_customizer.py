"""Unit tests for TenantModelCustomizer."""

from unittest.mock import Mock

import pytest
from sqlalchemy import inspect

from isolation.domain.value_objects import IsolationConfig, IsolationMode
from isolation.infrastructure.model_customizer import TenantModelCustomizer
from isolation.infrastructure.observability import IsolationProbe
from isolation.infrastructure.predicates import Predicate
from tenancy.domain.errors import TenancyError, TenancyErrorKind


@pytest.fixture
def mock_probe():
    """Mock isolation probe."""
    return Mock(spec=IsolationProbe)


class TestCustomize:
    """Tests for TenantModelCustomizer.customize() in shared database mode."""

    def test_classifies_entities(self, shop, shared_config, accessor, mock_probe):
        """Test that tenant tables are scoped and reference data is not."""
        model = TenantModelCustomizer(shared_config, accessor, mock_probe).customize(
            shop.Base
        )

        assert model.scoped_classes == [shop.Customer, shop.Order]
        assert model.is_scoped(shop.Order)
        assert model.is_scoped(shop.Order(number="1"))
        assert not model.is_scoped(shop.Plan)
        assert set(model.filters) == {shop.Customer, shop.Order}
        mock_probe.model_customized.assert_called_once_with(2, 1, "shared_database")

    def test_adds_shadow_column(self, shop, shared_config, accessor, mock_probe):
        """Test that a class without a tenant column gets one."""
        model = TenantModelCustomizer(shared_config, accessor, mock_probe).customize(
            shop.Base
        )

        column = shop.Customer.__table__.c.tenant_id
        assert column.nullable
        assert column.type.length == 64
        assert inspect(shop.Customer).has_property("tenant_id")
        assert model.shadow_entities == frozenset({"Customer"})
        mock_probe.shadow_column_added.assert_called_once_with("Customer", "tenant_id")

    def test_running_twice_is_harmless(self, shop, shared_config, accessor):
        """Test that a second pass finds the shadow column it added."""
        customizer = TenantModelCustomizer(shared_config, accessor)
        customizer.customize(shop.Base)

        model = customizer.customize(shop.Base)

        assert model.shadow_entities == frozenset()
        assert model.scoped_classes == [shop.Customer, shop.Order]

    def test_accepts_registry(self, shop, shared_config, accessor):
        """Test that a registry works as well as a declarative base."""
        model = TenantModelCustomizer(shared_config, accessor).customize(
            shop.Base.registry
        )

        assert shop.Order in model.scoped_classes

    def test_existing_filters_are_preserved(self, shop, shared_config, accessor):
        """Test that the tenant predicate is ANDed onto an existing filter."""
        existing = Predicate(lambda entity: entity.number != "void", name="not void")

        model = TenantModelCustomizer(shared_config, accessor).customize(
            shop.Base, {shop.Order: existing}
        )

        assert model.filters[shop.Order] is not existing
        assert "not void" in repr(model.filters[shop.Order])

    def test_missing_column_without_shadow_is_a_configuration_error(
        self, shop, accessor
    ):
        """Test that shared mode refuses to leave a tenant table unfiltered."""
        config = IsolationConfig(use_shadow_tenant_id=False)

        with pytest.raises(TenancyError) as exc_info:
            TenantModelCustomizer(config, accessor).customize(shop.Base)

        assert exc_info.value.kind == TenancyErrorKind.CONFIGURATION
        assert exc_info.value.metadata == {"entity": "Customer", "field": "tenant_id"}

    def test_filters_disabled(self, shop, accessor):
        """Test that no predicates are built when query filters are off."""
        config = IsolationConfig(enable_query_filters=False)

        model = TenantModelCustomizer(config, accessor).customize(shop.Base)

        assert model.filters == {}
        assert model.scoped_classes == [shop.Customer, shop.Order]


class TestCustomizeSchemaPerTenant:
    """Tests for schema-per-tenant customization."""

    def test_class_without_column_is_left_unscoped(
        self, shop_factory, accessor, mock_probe
    ):
        """Test that physical isolation does not need a tenant column."""
        shop = shop_factory(order_schema="app", plan_schema="reference")
        config = IsolationConfig(mode=IsolationMode.SCHEMA_PER_TENANT)

        model = TenantModelCustomizer(config, accessor, mock_probe).customize(
            shop.Base
        )

        assert model.scoped_classes == [shop.Order]
        assert model.filters == {}
        mock_probe.entity_left_unscoped.assert_called_once_with(
            "Customer", "missing 'tenant_id' attribute"
        )

    def test_collects_tenant_schema_keys(self, shop_factory, accessor):
        """Test that the schemas of tenant tables become translate keys."""
        shop = shop_factory(order_schema="app", plan_schema="reference")
        config = IsolationConfig(
            mode=IsolationMode.SCHEMA_PER_TENANT, use_shadow_tenant_id=True
        )

        model = TenantModelCustomizer(config, accessor).customize(shop.Base)

        assert model.tenant_schema_keys == frozenset({"app"})

    def test_global_table_in_tenant_schema_is_rejected(self, shop, accessor):
        """Test that shared tables must live outside the translated schema."""
        config = IsolationConfig(mode=IsolationMode.SCHEMA_PER_TENANT)

        with pytest.raises(TenancyError) as exc_info:
            TenantModelCustomizer(config, accessor).customize(shop.Base)

        assert exc_info.value.kind == TenancyErrorKind.CONFIGURATION
        assert exc_info.value.metadata["entity"] == "Plan"
