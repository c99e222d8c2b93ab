"""Unit tests for SqlAlchemyTenantInfoStore against in-memory SQLite."""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from tenancy.domain.value_objects import TenantInfo, TenantState
from tenancy.infrastructure.models import TenantInfoModel
from tenancy.infrastructure.observability import TenantInfoStoreProbe
from tenancy.infrastructure.tenant_info_store import SqlAlchemyTenantInfoStore
from tenancy.ports.repositories import ITenantInfoStore


@pytest_asyncio.fixture
async def session():
    """Session on a fresh in-memory database holding tenant_infos."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(
            TenantInfoModel.metadata.create_all, tables=[TenantInfoModel.__table__]
        )

    async with AsyncSession(engine, expire_on_commit=False) as db_session:
        yield db_session

    await engine.dispose()


@pytest.fixture
def mock_probe():
    """Mock store probe."""
    return Mock(spec=TenantInfoStoreProbe)


@pytest.fixture
def store(session, mock_probe):
    return SqlAlchemyTenantInfoStore(session, probe=mock_probe)


class TestSqlAlchemyTenantInfoStore:
    """Tests for the tenant registry store."""

    def test_satisfies_port(self, store):
        """Test that the store implements ITenantInfoStore."""
        assert isinstance(store, ITenantInfoStore)

    @pytest.mark.asyncio
    async def test_save_and_find(self, store, mock_probe):
        """Test that a saved tenant is found with every field intact."""
        tenant = TenantInfo(
            tenant_id="acme",
            internal_id=uuid4(),
            name="Acme Corp",
            type="enterprise",
            region="eu",
            expires_at=datetime(2030, 1, 1, tzinfo=timezone.utc),
            parent_id="holding",
            metadata={"plan": "gold"},
        )

        await store.save(tenant)
        found = await store.find_by_id("acme")

        assert found is not None
        assert found.internal_id == tenant.internal_id
        assert found.name == "Acme Corp"
        assert found.region == "eu"
        assert found.expires_at == tenant.expires_at
        assert found.state == TenantState.ACTIVE
        assert dict(found.metadata) == {"plan": "gold"}
        assert found.created_at.tzinfo is not None
        mock_probe.tenant_saved.assert_called_once_with("acme")
        mock_probe.tenant_retrieved.assert_called_once_with("acme")

    @pytest.mark.asyncio
    async def test_find_is_case_insensitive(self, store):
        """Test that lookups ignore case."""
        await store.save(TenantInfo.active("Acme"))

        found = await store.find_by_id("ACME")

        assert found.tenant_id == "Acme"

    @pytest.mark.asyncio
    async def test_find_unknown(self, store, mock_probe):
        """Test that an unknown tenant returns None."""
        assert await store.find_by_id("ghost") is None
        mock_probe.tenant_not_found.assert_called_once_with("ghost")

    @pytest.mark.asyncio
    async def test_find_blank_id(self, store):
        """Test that a blank id never matches."""
        assert await store.find_by_id("  ") is None

    @pytest.mark.asyncio
    async def test_save_updates_existing(self, store):
        """Test that saving again updates the lifecycle state."""
        await store.save(TenantInfo.active("acme"))

        await store.save(
            TenantInfo(tenant_id="acme", is_active=False, state=TenantState.SUSPENDED)
        )
        found = await store.find_by_id("acme")

        assert found.state == TenantState.SUSPENDED
        assert not found.is_active

    @pytest.mark.asyncio
    async def test_list_tenants_filters_inactive(self, store):
        """Test that only active tenants are listed by default, oldest first."""
        base = datetime(2025, 1, 1, tzinfo=timezone.utc)
        await store.save(TenantInfo(tenant_id="b-second", created_at=base + timedelta(days=1)))
        await store.save(TenantInfo(tenant_id="a-first", created_at=base))
        await store.save(
            TenantInfo(
                tenant_id="c-suspended",
                created_at=base,
                state=TenantState.SUSPENDED,
            )
        )
        await store.save(
            TenantInfo(tenant_id="d-deleted", created_at=base, is_soft_deleted=True)
        )

        active = await store.list_tenants()
        everything = await store.list_tenants(include_inactive=True)

        assert [t.tenant_id for t in active] == ["a-first", "b-second"]
        assert len(everything) == 4
