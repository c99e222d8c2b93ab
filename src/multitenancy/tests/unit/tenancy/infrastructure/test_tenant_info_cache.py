"""Unit tests for InMemoryTenantInfoCache."""

import pytest

from tenancy.domain.value_objects import TenantInfo
from tenancy.infrastructure.tenant_info_cache import InMemoryTenantInfoCache
from tenancy.ports.repositories import ITenantInfoCache


class FakeTimer:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def timer():
    return FakeTimer()


@pytest.fixture
def cache(timer):
    return InMemoryTenantInfoCache(maxsize=2, default_ttl=30, timer=timer)


class TestInMemoryTenantInfoCache:
    """Tests for the cachetools-backed cache."""

    def test_satisfies_port(self, cache):
        """Test that the cache implements ITenantInfoCache."""
        assert isinstance(cache, ITenantInfoCache)

    @pytest.mark.asyncio
    async def test_get_after_set(self, cache):
        """Test that a stored record is returned."""
        tenant = TenantInfo.active("acme")

        await cache.set(tenant)

        assert await cache.get("acme") is tenant

    @pytest.mark.asyncio
    async def test_keys_are_case_insensitive(self, cache):
        """Test that lookups ignore case and surrounding whitespace."""
        await cache.set(TenantInfo.active("Acme"))

        assert (await cache.get(" ACME ")).tenant_id == "Acme"

    @pytest.mark.asyncio
    async def test_miss(self, cache):
        """Test that unknown ids return None."""
        assert await cache.get("ghost") is None

    @pytest.mark.asyncio
    async def test_default_ttl_expires(self, cache, timer):
        """Test that entries expire after the default TTL."""
        await cache.set(TenantInfo.active("acme"))

        timer.now += 29
        assert await cache.get("acme") is not None

        timer.now += 2
        assert await cache.get("acme") is None

    @pytest.mark.asyncio
    async def test_per_entry_ttl(self, cache, timer):
        """Test that each entry keeps its own TTL."""
        await cache.set(TenantInfo.active("short"), ttl=5)
        await cache.set(TenantInfo.active("long"), ttl=60)

        timer.now += 10

        assert await cache.get("short") is None
        assert await cache.get("long") is not None

    @pytest.mark.asyncio
    async def test_capacity_evicts_least_recently_used(self, cache):
        """Test that the cache stays bounded."""
        await cache.set(TenantInfo.active("acme"))
        await cache.set(TenantInfo.active("globex"))
        await cache.get("acme")
        await cache.set(TenantInfo.active("initech"))

        assert len(cache) == 2
        assert await cache.get("globex") is None
        assert await cache.get("acme") is not None

    @pytest.mark.asyncio
    async def test_invalidate(self, cache):
        """Test that invalidated tenants are gone."""
        await cache.set(TenantInfo.active("acme"))

        await cache.invalidate("ACME")

        assert await cache.get("acme") is None
