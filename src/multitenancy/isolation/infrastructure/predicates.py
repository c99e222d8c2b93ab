"""Composable row predicates for ORM entities.

A ``Predicate`` turns an entity (a mapped class or an ``aliased()`` form of
it) into a SQL boolean expression. Predicates are built once per mapped type
and evaluated per query, so anything they close over (such as the ambient
tenant) is read at query time.
"""

from __future__ import annotations

from typing import Any, Callable

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement

from isolation.ports.tenant_accessor import ITenantAccessor


class Predicate:
    """A callable from entity to boolean SQL expression.

    ``a & b`` produces a predicate that evaluates both operands against the
    same entity and joins them with AND.
    """

    __slots__ = ("_build", "_name")

    def __init__(
        self, build: Callable[[Any], ColumnElement[bool]], name: str = "predicate"
    ) -> None:
        self._build = build
        self._name = name

    def __call__(self, entity: Any) -> ColumnElement[bool]:
        return self._build(entity)

    def __and__(self, other: Predicate) -> Predicate:
        first, second = self, other
        return Predicate(
            lambda entity: and_(first(entity), second(entity)),
            name=f"({first._name} & {second._name})",
        )

    def __repr__(self) -> str:
        return f"Predicate({self._name})"


def combine(existing: Predicate | None, added: Predicate) -> Predicate:
    """AND a predicate onto an optional existing one."""
    return added if existing is None else existing & added


def tenant_predicate(field: str, accessor: ITenantAccessor) -> Predicate:
    """Predicate matching rows owned by the ambient tenant.

    Without an ambient tenant the comparison is against NULL, which renders
    as ``IS NULL`` and so only matches rows without an owner.
    """

    def build(entity: Any) -> ColumnElement[bool]:
        return getattr(entity, field) == accessor.tenant_id

    return Predicate(build, name=f"{field} == <current tenant>")
