"""Ambient access to the current tenant.

The current ``TenantContext`` lives in a ``ContextVar``, so every asyncio
task (and thread) sees its own value: a task inherits the value present
when it was created, and changes it makes never leak to its parent or
siblings.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

import structlog

from tenancy.domain.tenant_context import TenantContext
from tenancy.domain.value_objects import (
    ResolutionConfidence,
    ResolutionSource,
    TenantInfo,
)

_current_tenant: ContextVar[TenantContext | None] = ContextVar(
    "current_tenant", default=None
)


class CurrentTenantAccessor:
    """Read and scope the tenant of the running operation.

    Example:
        accessor = CurrentTenantAccessor()
        with accessor.begin_scope(tenant_context):
            assert accessor.tenant_id == tenant_context.tenant_id
        # the previous value is restored here
    """

    @property
    def current(self) -> TenantContext | None:
        return _current_tenant.get()

    @property
    def tenant_id(self) -> str | None:
        context = _current_tenant.get()
        return context.tenant_id if context is not None else None

    @property
    def tenant_info(self) -> TenantInfo | None:
        context = _current_tenant.get()
        return context.tenant if context is not None else None

    @property
    def is_resolved(self) -> bool:
        return _current_tenant.get() is not None

    @property
    def is_validated(self) -> bool:
        context = _current_tenant.get()
        return context is not None and context.is_validated

    @property
    def source(self) -> ResolutionSource | None:
        context = _current_tenant.get()
        return context.source if context is not None else None

    @property
    def confidence(self) -> ResolutionConfidence:
        context = _current_tenant.get()
        return context.confidence if context is not None else ResolutionConfidence.NONE

    def set(self, context: TenantContext | None) -> None:
        """Replace the current tenant without restoring it later.

        Prefer ``begin_scope`` wherever the lifetime is known.
        """
        _current_tenant.set(context)

    @contextmanager
    def begin_scope(self, context: TenantContext | None) -> Iterator[TenantContext | None]:
        """Install a tenant for the duration of a ``with`` block.

        The value present before the block is restored on exit, including
        when the block raises. Scopes nest.
        """
        token = _current_tenant.set(context)
        try:
            yield context
        finally:
            _current_tenant.reset(token)

    @contextmanager
    def log_scope(self, key: str = "tenant_id") -> Iterator[None]:
        """Bind the current tenant id to structlog context variables.

        Does nothing when no tenant is current.
        """
        tenant_id = self.tenant_id
        if tenant_id is None:
            yield
            return
        with structlog.contextvars.bound_contextvars(**{key: tenant_id}):
            yield
