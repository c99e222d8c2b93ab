"""Read-side tenant filtering for ORM sessions.

Attaches a ``do_orm_execute`` listener that adds the tenant predicates of a
``TenantModel`` to every ORM SELECT as loader criteria, so joins, eager
loads and aliases are filtered too.

Rows already present in a session's identity map are returned by
``Session.get`` without a query and are therefore not re-checked.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import ORMExecuteState, Session, with_loader_criteria

from isolation.infrastructure.model_customizer import TenantModel
from isolation.infrastructure.observability import (
    DefaultIsolationProbe,
    IsolationProbe,
)

SKIP_TENANT_FILTER = "skip_tenant_filter"
"""Execution option that disables tenant filtering for one statement.

Example:
    await session.execute(
        select(Order).execution_options(skip_tenant_filter=True)
    )
"""


def _sync_session(session: Session | AsyncSession) -> Session:
    if isinstance(session, AsyncSession):
        return session.sync_session
    return session


class TenantQueryFilter:
    """Applies a tenant model's read predicates to session queries."""

    def __init__(self, model: TenantModel, probe: IsolationProbe | None = None):
        self._model = model
        self._probe = probe or DefaultIsolationProbe()

    def attach(self, session: Session | AsyncSession) -> None:
        """Register the filter on a session (sync or async)."""
        event.listen(_sync_session(session), "do_orm_execute", self._on_execute)

    def detach(self, session: Session | AsyncSession) -> None:
        """Remove the filter from a session."""
        event.remove(_sync_session(session), "do_orm_execute", self._on_execute)

    def _on_execute(self, state: ORMExecuteState) -> None:
        if (
            not state.is_select
            or state.is_column_load
            or state.is_relationship_load
        ):
            return
        if state.execution_options.get(SKIP_TENANT_FILTER, False):
            self._probe.tenant_filter_skipped()
            return

        options: list[Any] = [
            with_loader_criteria(cls, predicate(cls), include_aliases=True)
            for cls, predicate in self._model.filters.items()
        ]
        if options:
            state.statement = state.statement.options(*options)
