"""Composition helpers for the tenancy bounded context.

Build providers, the resolution strategy, the resolver and enforcement from
``MultitenancySettings``. Hosts call these at startup and keep the results
for the lifetime of the process.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable

from infrastructure.settings import MultitenancySettings, get_multitenancy_settings
from tenancy.application.current_tenant import CurrentTenantAccessor
from tenancy.application.providers import (
    ClaimTenantProvider,
    DefaultTenantProvider,
    HeaderTenantProvider,
    HostTenantProvider,
    QueryTenantProvider,
    RouteTenantProvider,
)
from tenancy.application.services import (
    CompositeTenantResolutionStrategy,
    TenantEnforcer,
    TenantResolver,
)
from tenancy.domain.options import HostTenantSelector, TenancyOptions
from tenancy.domain.value_objects import ResolutionSource, TenantInfo, ValidationMode
from tenancy.infrastructure.tenant_info_cache import InMemoryTenantInfoCache
from tenancy.ports.providers import ITenantProvider
from tenancy.ports.repositories import ITenantInfoCache, ITenantInfoStore


def build_tenancy_options(
    settings: MultitenancySettings | None = None,
    *,
    fallback_tenant: TenantInfo | None = None,
    host_tenant_selector: HostTenantSelector | None = None,
) -> TenancyOptions:
    """Convert settings into domain options.

    Args:
        settings: Settings to convert; the cached settings by default
        fallback_tenant: Full record of the fallback tenant, if any
        host_tenant_selector: Replacement for the default subdomain parser

    Returns:
        Options for providers, strategy, resolver and enforcement
    """
    settings = settings or get_multitenancy_settings()
    return TenancyOptions(
        header_names=tuple(settings.header_names),
        route_parameter_name=settings.route_parameter_name,
        query_parameter_name=settings.query_parameter_name,
        claim_type=settings.claim_type,
        fallback_tenant=fallback_tenant,
        fallback_tenant_id=settings.fallback_tenant_id,
        host_tenant_selector=host_tenant_selector,
        resolution_order=tuple(
            ResolutionSource(source) for source in settings.resolution_order
        ),
        include_unordered_providers=settings.include_unordered_providers,
        require_match_across_sources=settings.require_match_across_sources,
        resolution_timeout=settings.resolution_timeout_seconds,
        validation_mode=ValidationMode(settings.validation_mode),
        resolution_cache_ttl=settings.resolution_cache_ttl_seconds,
        require_tenant_by_default=settings.require_tenant_by_default,
        allow_anonymous=settings.allow_anonymous,
        add_tenant_to_log_scope=settings.add_tenant_to_log_scope,
        log_scope_key=settings.log_scope_key,
    )


def build_providers(
    options: TenancyOptions,
    extra_providers: Iterable[ITenantProvider] = (),
) -> list[ITenantProvider]:
    """Create the built-in providers plus any custom ones.

    The default provider is only registered when a fallback tenant is
    configured. Order does not matter here; the strategy orders by source.
    """
    providers: list[ITenantProvider] = [
        RouteTenantProvider(options.route_parameter_name),
        HostTenantProvider(options.host_tenant_selector),
        HeaderTenantProvider(options.header_names),
        QueryTenantProvider(options.query_parameter_name),
        ClaimTenantProvider(options.claim_type),
    ]
    if options.fallback_id is not None:
        providers.append(DefaultTenantProvider(options.fallback_id))
    providers.extend(extra_providers)
    return providers


def build_tenant_resolver(
    options: TenancyOptions,
    *,
    store: ITenantInfoStore | None = None,
    cache: ITenantInfoCache | None = None,
    extra_providers: Iterable[ITenantProvider] = (),
) -> TenantResolver:
    """Wire providers, the composite strategy and the resolver."""
    strategy = CompositeTenantResolutionStrategy(
        build_providers(options, extra_providers), options
    )
    return TenantResolver(strategy, options, cache=cache, store=store)


def build_tenant_enforcer(options: TenancyOptions) -> TenantEnforcer:
    """Create enforcement bound to the shared accessor."""
    return TenantEnforcer(get_current_tenant_accessor(), options)


@lru_cache
def get_current_tenant_accessor() -> CurrentTenantAccessor:
    """Get the shared tenant accessor."""
    return CurrentTenantAccessor()


@lru_cache
def get_tenant_info_cache() -> InMemoryTenantInfoCache:
    """Get the process-wide tenant cache sized from settings."""
    settings = get_multitenancy_settings()
    return InMemoryTenantInfoCache(
        maxsize=settings.cache_max_entries,
        default_ttl=settings.resolution_cache_ttl_seconds,
    )
