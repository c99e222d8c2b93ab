"""In-memory implementation of ITenantInfoCache.

Backed by a cachetools ``TLRUCache`` so that every entry can carry its own
time-to-live while the cache as a whole stays bounded (least recently used
entries are evicted first).
"""

from __future__ import annotations

import threading
import time
from typing import Callable

from cachetools import TLRUCache

from tenancy.domain.value_objects import TenantInfo

_Entry = tuple[TenantInfo, "float | None"]


class InMemoryTenantInfoCache:
    """Process-local tenant record cache with per-entry TTL.

    Keys are case-insensitive tenant ids. A TTL of None keeps the entry until
    it is evicted for capacity.
    """

    def __init__(
        self,
        maxsize: int = 1024,
        default_ttl: float | None = 300.0,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            maxsize: Maximum number of cached tenants
            default_ttl: TTL in seconds used when ``set`` receives none
            timer: Monotonic clock, replaceable in tests
        """
        self._default_ttl = default_ttl
        self._cache: TLRUCache[str, _Entry] = TLRUCache(
            maxsize=maxsize, ttu=self._time_to_use, timer=timer
        )
        self._lock = threading.Lock()

    @staticmethod
    def _time_to_use(key: str, entry: _Entry, now: float) -> float:
        ttl = entry[1]
        return now + ttl if ttl is not None else float("inf")

    @staticmethod
    def _key(tenant_id: str) -> str:
        return tenant_id.strip().casefold()

    async def get(self, tenant_id: str) -> TenantInfo | None:
        """Retrieve a cached tenant record, or None on a miss or after expiry."""
        with self._lock:
            entry = self._cache.get(self._key(tenant_id))
        return entry[0] if entry is not None else None

    async def set(self, tenant: TenantInfo, ttl: float | None = None) -> None:
        """Cache a tenant record under its tenant id."""
        effective_ttl = ttl if ttl is not None else self._default_ttl
        with self._lock:
            self._cache[self._key(tenant.tenant_id)] = (tenant, effective_ttl)

    async def invalidate(self, tenant_id: str) -> None:
        """Drop a tenant record, e.g. after its lifecycle state changed."""
        with self._lock:
            self._cache.pop(self._key(tenant_id), None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
