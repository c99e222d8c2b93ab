"""Unit test fixtures with mocked dependencies."""

from collections.abc import Iterator

import pytest
import structlog

from tenancy.application.current_tenant import CurrentTenantAccessor
from tenancy.domain.tenant_context import TenantContext
from tenancy.domain.value_objects import (
    ResolutionConfidence,
    ResolutionResult,
    ResolutionSource,
    TenantInfo,
)


@pytest.fixture
def accessor() -> Iterator[CurrentTenantAccessor]:
    """Provide a tenant accessor and clear the ambient tenant afterwards."""
    tenant_accessor = CurrentTenantAccessor()
    with tenant_accessor.begin_scope(None):
        yield tenant_accessor


@pytest.fixture
def make_context():
    """Build tenant contexts for a tenant record or id."""

    def _make(
        tenant: TenantInfo | str,
        *,
        validated: bool = True,
        source: ResolutionSource = ResolutionSource.HEADER,
    ) -> TenantContext:
        info = TenantInfo.active(tenant) if isinstance(tenant, str) else tenant
        return TenantContext(
            tenant=info,
            resolution=ResolutionResult.resolved(
                info.tenant_id, source, ResolutionConfidence.MEDIUM
            ),
            is_validated=validated,
        )

    return _make


@pytest.fixture(autouse=True)
def clear_log_context() -> Iterator[None]:
    """Keep structlog context variables from leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
