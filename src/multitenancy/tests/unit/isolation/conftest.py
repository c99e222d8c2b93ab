"""Fixtures for the isolation engine: throwaway mapped models."""

from types import SimpleNamespace

import pytest
from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from isolation.domain.value_objects import IsolationConfig, IsolationMode
from isolation.infrastructure.model_customizer import TenantModelCustomizer
from shared_kernel.entity_markers import GlobalEntity


def build_shop_model(order_schema=None, plan_schema=None):
    """Declare a fresh registry so customization never leaks across tests.

    Orders carry their own tenant column, customers get a shadow column and
    plans are shared reference data.
    """

    class Base(DeclarativeBase):
        pass

    class Customer(Base):
        __tablename__ = "customers"
        __table_args__ = {"schema": order_schema}

        id: Mapped[int] = mapped_column(primary_key=True)
        name: Mapped[str] = mapped_column(String(64))

    class Order(Base):
        __tablename__ = "orders"
        __table_args__ = {"schema": order_schema}

        id: Mapped[int] = mapped_column(primary_key=True)
        number: Mapped[str] = mapped_column(String(32))
        tenant_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
        customer_id: Mapped[int | None] = mapped_column(
            ForeignKey(Customer.id), nullable=True
        )
        customer: Mapped[Customer | None] = relationship()

    class Plan(GlobalEntity, Base):
        __tablename__ = "plans"
        __table_args__ = {"schema": plan_schema}

        id: Mapped[int] = mapped_column(primary_key=True)
        name: Mapped[str] = mapped_column(String(64))

    return SimpleNamespace(Base=Base, Customer=Customer, Order=Order, Plan=Plan)


@pytest.fixture
def shop_factory():
    """Builder for shop models with custom schemas."""
    return build_shop_model


@pytest.fixture
def shop(shop_factory):
    """Fresh shop model, not yet customized."""
    return shop_factory()


@pytest.fixture
def shared_config():
    return IsolationConfig(mode=IsolationMode.SHARED_DATABASE)


@pytest.fixture
def shop_model(shop, shared_config, accessor):
    """Shop model customized for shared database isolation."""
    return TenantModelCustomizer(shared_config, accessor).customize(shop.Base)
