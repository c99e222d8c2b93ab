"""Tenant resolver: resolution followed by validation.

Turns a ``ResolutionContext`` into a ``TenantContext`` whose tenant record
has been checked against the cache or the tenant store, depending on the
configured validation mode.
"""

from __future__ import annotations

from dataclasses import replace

from tenancy.application.observability import (
    DefaultTenantResolverProbe,
    TenantResolverProbe,
)
from tenancy.domain.options import TenancyOptions
from tenancy.domain.tenant_context import TenantContext
from tenancy.domain.value_objects import (
    ResolutionContext,
    ResolutionSource,
    TenantInfo,
    TenantState,
    ValidationMode,
)
from tenancy.ports.providers import ITenantResolutionStrategy
from tenancy.ports.repositories import ITenantInfoCache, ITenantInfoStore


class TenantResolver:
    """Resolves and validates the tenant of an inbound operation.

    Resolution and validation never raise for missing data: an unresolved
    or ambiguous operation yields None, and an unknown tenant yields an
    unvalidated context with an inactive stub record. Deciding whether that
    is acceptable is the job of enforcement.
    """

    def __init__(
        self,
        strategy: ITenantResolutionStrategy,
        options: TenancyOptions | None = None,
        cache: ITenantInfoCache | None = None,
        store: ITenantInfoStore | None = None,
        probe: TenantResolverProbe | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            strategy: Strategy producing the resolution result
            options: Validation mode, fallback tenant and cache TTL
            cache: Cache consulted in cache mode and filled in repository mode
            store: Tenant store consulted in repository mode
            probe: Optional domain probe for observability
        """
        self._strategy = strategy
        self._options = options or TenancyOptions()
        self._cache = cache
        self._store = store
        self._probe = probe or DefaultTenantResolverProbe()

    async def resolve(self, context: ResolutionContext) -> TenantContext | None:
        """Resolve and validate the tenant of an operation.

        Args:
            context: Transport-neutral view of the inbound operation

        Returns:
            The tenant context, or None when no single tenant was resolved

        Raises:
            TimeoutError: If the strategy's resolution deadline is exceeded
        """
        result = await self._strategy.resolve(context)
        if not result.is_resolved:
            return None

        tenant_id = result.candidates[0]

        fallback = self._fallback_tenant(result.source)
        if fallback is not None:
            self._probe.fallback_tenant_used(fallback.tenant_id)
            return TenantContext(
                tenant=fallback,
                resolution=result,
                correlation_id=context.correlation_id,
                is_validated=True,
            )

        if self._options.validation_mode == ValidationMode.NONE:
            return TenantContext(
                tenant=TenantInfo.active(tenant_id),
                resolution=result,
                correlation_id=context.correlation_id,
                is_validated=True,
            )

        tenant = await self._lookup(tenant_id)
        return TenantContext(
            tenant=tenant or TenantInfo.unknown(tenant_id),
            resolution=result,
            correlation_id=context.correlation_id,
            is_validated=tenant is not None,
        )

    async def validate(self, tenant_context: TenantContext) -> TenantContext:
        """Validate a context that was created without validation.

        Contexts that are already validated, and every context when the
        validation mode is ``none``, are returned untouched. On success the
        tenant record is replaced with the stored one.

        Args:
            tenant_context: Context to validate in place

        Returns:
            The same context instance
        """
        if tenant_context.is_validated:
            return tenant_context
        if self._options.validation_mode == ValidationMode.NONE:
            return tenant_context

        tenant = await self._lookup(tenant_context.tenant_id)
        if tenant is not None:
            tenant_context.tenant = tenant
            tenant_context.is_validated = True
        return tenant_context

    def _fallback_tenant(self, source: ResolutionSource) -> TenantInfo | None:
        """Configured fallback record for a default-sourced result.

        Returns None when nothing is configured, so the id goes through
        normal validation.
        """
        if source != ResolutionSource.DEFAULT:
            return None
        fallback = self._options.fallback_tenant
        if fallback is not None:
            return replace(fallback)
        fallback_id = self._options.fallback_id
        if fallback_id is None:
            return None
        return TenantInfo(tenant_id=fallback_id, is_active=True, state=TenantState.ACTIVE)

    async def _lookup(self, tenant_id: str) -> TenantInfo | None:
        mode = self._options.validation_mode

        if mode == ValidationMode.CACHE:
            if self._cache is None:
                self._probe.validation_backend_missing(str(mode))
                return None
            tenant = await self._cache.get(tenant_id)
        else:
            if self._store is None:
                self._probe.validation_backend_missing(str(mode))
                return None
            tenant = await self._store.find_by_id(tenant_id)
            if tenant is not None and self._cache is not None:
                ttl = self._options.resolution_cache_ttl
                await self._cache.set(tenant, ttl)
                self._probe.tenant_cached(tenant.tenant_id, ttl)

        if tenant is None:
            self._probe.tenant_validation_failed(tenant_id, str(mode))
        else:
            self._probe.tenant_validated(tenant_id, str(mode))
        return tenant
