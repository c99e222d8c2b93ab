"""Composite tenant resolution strategy.

Runs the registered providers in the configured source order and merges
their results, either by priority (first decisive provider wins) or by
consensus (every provider must agree).
"""

from __future__ import annotations

import asyncio
from typing import Sequence

from tenancy.application.observability import (
    DefaultResolutionProbe,
    ResolutionProbe,
)
from tenancy.domain.options import TenancyOptions
from tenancy.domain.value_objects import (
    ResolutionConfidence,
    ResolutionContext,
    ResolutionResult,
    ResolutionSource,
)
from tenancy.ports.providers import ITenantProvider


def order_providers(
    providers: Sequence[ITenantProvider],
    resolution_order: Sequence[ResolutionSource],
    include_unordered: bool = True,
) -> list[ITenantProvider]:
    """Order providers by source following ``resolution_order``.

    Providers sharing a source keep their registration order. Providers whose
    source is not listed are appended in registration order when
    ``include_unordered`` is set, and dropped otherwise. A source listed
    twice is only expanded once.
    """
    ordered: list[ITenantProvider] = []
    listed: set[ResolutionSource] = set()
    for source in resolution_order:
        if source in listed:
            continue
        listed.add(source)
        ordered.extend(p for p in providers if p.source == source)

    if include_unordered:
        ordered.extend(p for p in providers if p.source not in listed)
    return ordered


class CompositeTenantResolutionStrategy:
    """Resolves a tenant by combining the registered providers.

    Priority mode (default): the first provider returning exactly one
    candidate wins. Failing that, the first ambiguous result is returned so
    callers can report the conflict. Otherwise the result is not-found.

    Consensus mode (``require_match_across_sources``): every provider runs
    and the candidates of the non-default providers are unioned. The default
    provider only contributes when nothing else produced a candidate. A
    single candidate resolves; several are ambiguous.
    """

    def __init__(
        self,
        providers: Sequence[ITenantProvider],
        options: TenancyOptions | None = None,
        probe: ResolutionProbe | None = None,
    ) -> None:
        self._options = options or TenancyOptions()
        self._providers = order_providers(
            providers,
            self._options.resolution_order,
            self._options.include_unordered_providers,
        )
        self._probe = probe or DefaultResolutionProbe()

    @property
    def providers(self) -> tuple[ITenantProvider, ...]:
        """Providers in the order they run."""
        return tuple(self._providers)

    async def resolve(self, context: ResolutionContext) -> ResolutionResult:
        """Resolve the tenant of an operation.

        Raises:
            TimeoutError: If ``resolution_timeout`` is set and exceeded. The
                in-flight provider call is cancelled.
        """
        timeout = self._options.resolution_timeout
        if timeout is None:
            return await self._run(context)

        try:
            async with asyncio.timeout(timeout):
                return await self._run(context)
        except TimeoutError:
            self._probe.resolution_timed_out(timeout)
            raise

    async def _run(self, context: ResolutionContext) -> ResolutionResult:
        if self._options.require_match_across_sources:
            result = await self._resolve_by_consensus(context)
        else:
            result = await self._resolve_by_priority(context)

        if result.is_resolved:
            self._probe.tenant_resolved(
                result.candidates[0], str(result.source), result.confidence.name
            )
        elif result.is_ambiguous:
            self._probe.resolution_ambiguous(str(result.source), result.candidates)
        else:
            self._probe.tenant_not_found()
        return result

    async def _resolve_by_priority(
        self, context: ResolutionContext
    ) -> ResolutionResult:
        first_ambiguous: ResolutionResult | None = None
        for provider in self._providers:
            result = await provider.resolve(context)
            self._probe.provider_evaluated(str(provider.source), result.candidates)
            if result.is_resolved:
                return result
            if result.is_ambiguous and first_ambiguous is None:
                first_ambiguous = result

        if first_ambiguous is not None:
            return first_ambiguous
        return ResolutionResult.not_found(ResolutionSource.COMPOSITE)

    async def _resolve_by_consensus(
        self, context: ResolutionContext
    ) -> ResolutionResult:
        candidates: dict[str, str] = {}
        fallback: dict[str, str] = {}
        for provider in self._providers:
            result = await provider.resolve(context)
            self._probe.provider_evaluated(str(provider.source), result.candidates)
            target = (
                fallback if provider.source == ResolutionSource.DEFAULT else candidates
            )
            for candidate in result.candidates:
                target.setdefault(candidate.casefold(), candidate)

        from_fallback = not candidates
        merged = list((fallback if from_fallback else candidates).values())
        source = ResolutionSource.DEFAULT if from_fallback else ResolutionSource.COMPOSITE

        if not merged:
            return ResolutionResult.not_found(ResolutionSource.COMPOSITE)
        if len(merged) == 1:
            confidence = (
                ResolutionConfidence.LOW if from_fallback else ResolutionConfidence.MEDIUM
            )
            return ResolutionResult.resolved(merged[0], source, confidence)
        return ResolutionResult.from_candidates(
            merged, source, ResolutionConfidence.LOW
        )
