"""Built-in tenant resolution providers.

Each provider reads one part of a ``ResolutionContext`` and never raises for
missing data. Multi-valued inputs ("acme,globex") become ambiguous results.
"""

from __future__ import annotations

import inspect
import ipaddress
from typing import Awaitable, Callable, Iterable, Union

from tenancy.domain.options import HostTenantSelector
from tenancy.domain.value_objects import (
    ResolutionConfidence,
    ResolutionContext,
    ResolutionResult,
    ResolutionSource,
    split_tenant_values,
)

SelectorResult = Union[str, Iterable[str], None]
TenantSelector = Callable[
    [ResolutionContext], Union[SelectorResult, Awaitable[SelectorResult]]
]


class RouteTenantProvider:
    """Reads the tenant from a route parameter.

    Route values are part of the addressed resource, so a single candidate
    is reported with HIGH confidence.
    """

    source = ResolutionSource.ROUTE

    def __init__(self, parameter_name: str = "tenantId") -> None:
        self._parameter_name = parameter_name

    async def resolve(self, context: ResolutionContext) -> ResolutionResult:
        if not self._parameter_name:
            return ResolutionResult.not_found(self.source)
        value = context.route_value(self._parameter_name)
        return ResolutionResult.from_candidates(
            split_tenant_values(value), self.source, ResolutionConfidence.HIGH
        )


class HeaderTenantProvider:
    """Reads the tenant from the first configured header that is present."""

    source = ResolutionSource.HEADER

    def __init__(self, header_names: Iterable[str] = ("X-Tenant-ID",)) -> None:
        self._header_names = tuple(header_names)

    async def resolve(self, context: ResolutionContext) -> ResolutionResult:
        for name in self._header_names:
            if not name or not name.strip():
                continue
            value = context.header(name.strip())
            if value is not None:
                return ResolutionResult.from_candidates(
                    split_tenant_values(value),
                    self.source,
                    ResolutionConfidence.MEDIUM,
                )
        return ResolutionResult.not_found(self.source)


class QueryTenantProvider:
    """Reads the tenant from a query string parameter."""

    source = ResolutionSource.QUERY_STRING

    def __init__(self, parameter_name: str = "tenantId") -> None:
        self._parameter_name = parameter_name

    async def resolve(self, context: ResolutionContext) -> ResolutionResult:
        if not self._parameter_name:
            return ResolutionResult.not_found(self.source)
        value = context.query_value(self._parameter_name)
        return ResolutionResult.from_candidates(
            split_tenant_values(value), self.source, ResolutionConfidence.MEDIUM
        )


class ClaimTenantProvider:
    """Reads the tenant from an identity claim."""

    source = ResolutionSource.CLAIM

    def __init__(self, claim_type: str = "tenant_id") -> None:
        self._claim_type = claim_type

    async def resolve(self, context: ResolutionContext) -> ResolutionResult:
        if not self._claim_type:
            return ResolutionResult.not_found(self.source)
        value = context.claim(self._claim_type)
        return ResolutionResult.from_candidates(
            split_tenant_values(value), self.source, ResolutionConfidence.MEDIUM
        )


def _strip_port(host: str) -> str:
    if host.startswith("["):
        end = host.find("]")
        if end > 0:
            return host[1:end]
        return host.strip("[]")
    colon = host.find(":")
    return host[:colon] if colon > 0 else host


def _is_ip_address(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def default_host_selector(host: str) -> str | None:
    """Take the leftmost DNS label of a host as the tenant id.

    Ports and IPv6 brackets are stripped. IP addresses and single-label
    hosts such as ``localhost`` yield None.

    >>> default_host_selector("acme.example.com:8443")
    'acme'
    """
    if not host or not host.strip():
        return None
    trimmed = _strip_port(host.strip())
    if _is_ip_address(trimmed):
        return None
    labels = [label.strip() for label in trimmed.split(".") if label.strip()]
    if len(labels) < 2:
        return None
    return labels[0]


class HostTenantProvider:
    """Reads the tenant from the request host (subdomain tenancy)."""

    source = ResolutionSource.HOST

    def __init__(self, selector: HostTenantSelector | None = None) -> None:
        self._selector = selector or default_host_selector

    async def resolve(self, context: ResolutionContext) -> ResolutionResult:
        if not context.host or not context.host.strip():
            return ResolutionResult.not_found(self.source)
        tenant_id = self._selector(context.host)
        if not tenant_id or not tenant_id.strip():
            return ResolutionResult.not_found(self.source)
        return ResolutionResult.resolved(
            tenant_id, self.source, ResolutionConfidence.MEDIUM
        )


class DefaultTenantProvider:
    """Reports the configured fallback tenant with LOW confidence."""

    source = ResolutionSource.DEFAULT

    def __init__(self, tenant_id: str | None) -> None:
        self._tenant_id = tenant_id

    async def resolve(self, context: ResolutionContext) -> ResolutionResult:
        if not self._tenant_id or not self._tenant_id.strip():
            return ResolutionResult.not_found(self.source)
        return ResolutionResult.resolved(
            self._tenant_id, self.source, ResolutionConfidence.LOW
        )


class DelegateTenantProvider:
    """Adapts a user callable into a provider.

    The callable receives the resolution context and returns None, a tenant
    id, or an iterable of tenant ids, either directly or as an awaitable.
    Returned values are taken as-is (not split on separators).
    """

    def __init__(
        self,
        selector: TenantSelector,
        source: ResolutionSource = ResolutionSource.CUSTOM,
        confidence: ResolutionConfidence = ResolutionConfidence.MEDIUM,
    ) -> None:
        self._selector = selector
        self._source = source
        self._confidence = confidence

    @property
    def source(self) -> ResolutionSource:
        return self._source

    async def resolve(self, context: ResolutionContext) -> ResolutionResult:
        selected = self._selector(context)
        if inspect.isawaitable(selected):
            selected = await selected
        if selected is None:
            return ResolutionResult.not_found(self._source)
        if isinstance(selected, str):
            selected = [selected]
        return ResolutionResult.from_candidates(
            selected, self._source, self._confidence
        )
