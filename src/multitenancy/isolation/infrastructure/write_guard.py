"""Write-side tenant enforcement for ORM sessions.

A ``before_flush`` listener stamps new tenant-scoped objects with the ambient
tenant and refuses to flush changes to rows owned by another tenant. Raising
inside ``before_flush`` aborts the flush, so no statement of the unit of work
reaches the database.

Bulk ``update()``/``delete()`` statements bypass the unit of work and are not
checked here.
"""

from __future__ import annotations

from typing import Any, Iterable

from sqlalchemy import event, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from isolation.infrastructure.model_customizer import TenantModel
from isolation.infrastructure.observability import (
    DefaultIsolationProbe,
    IsolationProbe,
)
from isolation.infrastructure.query_filter import SKIP_TENANT_FILTER
from isolation.ports.tenant_accessor import ITenantAccessor
from tenancy.domain.errors import TenancyError


def _same_tenant(left: str | None, right: str | None) -> bool:
    if left is None or right is None:
        return left is right
    return left.casefold() == right.casefold()


class TenantWriteGuard:
    """Stamps and checks tenant ownership of flushed objects."""

    def __init__(
        self,
        model: TenantModel,
        accessor: ITenantAccessor,
        probe: IsolationProbe | None = None,
    ):
        self._model = model
        self._accessor = accessor
        self._probe = probe or DefaultIsolationProbe()

    def attach(self, session: Session | AsyncSession) -> None:
        """Register the guard on a session (sync or async)."""
        if isinstance(session, AsyncSession):
            session = session.sync_session
        event.listen(session, "before_flush", self._before_flush)

    def detach(self, session: Session | AsyncSession) -> None:
        """Remove the guard from a session."""
        if isinstance(session, AsyncSession):
            session = session.sync_session
        event.remove(session, "before_flush", self._before_flush)

    def _before_flush(
        self, session: Session, flush_context: Any, instances: Any
    ) -> None:
        with session.no_autoflush:
            self.check(session)

    def check(self, session: Session) -> None:
        """Apply the write rules to the pending changes of a session.

        Raises:
            TenancyError: CROSS_TENANT_WRITE when a changed or deleted row
                belongs to another tenant, NOT_RESOLVED when scoped rows are
                written without an ambient tenant
        """
        tenant_id = self._accessor.tenant_id
        field = self._model.config.tenant_id_field
        written = 0

        for obj in self._scoped(session.new):
            written += 1
            if tenant_id is not None:
                setattr(obj, field, tenant_id)

        changed = [obj for obj in session.dirty if session.is_modified(obj)]
        for obj in self._scoped([*changed, *session.deleted]):
            written += 1
            if tenant_id is None:
                continue
            stored = self._persisted_tenant(session, obj, field)
            current = getattr(obj, field)
            for owner in (stored, current):
                if not _same_tenant(owner, tenant_id):
                    entity = type(obj).__name__
                    self._probe.cross_tenant_write_blocked(entity, tenant_id, owner)
                    raise TenancyError.cross_tenant_write(tenant_id, owner, entity)

        if (
            tenant_id is None
            and written
            and self._model.config.require_tenant_for_writes
        ):
            self._probe.write_without_tenant_blocked(written)
            raise TenancyError.not_resolved(
                "A tenant is required to write tenant-scoped entities."
            )

    def _scoped(self, objects: Iterable[Any]) -> list[Any]:
        return [obj for obj in objects if self._model.is_scoped(obj)]

    @staticmethod
    def _persisted_tenant(session: Session, obj: Any, field: str) -> str | None:
        """Value of the tenant column as stored in the database.

        An attribute assigned after expiry has no recorded prior value, so
        the stored owner is then selected by primary key.
        """
        state = inspect(obj)
        history = state.attrs[field].load_history()
        for values in (history.deleted, history.unchanged):
            if values:
                return values[0]
        if state.identity is None:
            return history.added[0] if history.added else None

        mapper = state.mapper
        stmt = (
            select(getattr(mapper.class_, field))
            .where(
                *(
                    column == value
                    for column, value in zip(mapper.primary_key, state.identity)
                )
            )
            .execution_options(**{SKIP_TENANT_FILTER: True})
        )
        return session.execute(stmt).scalar_one_or_none()
