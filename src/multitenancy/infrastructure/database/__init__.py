"""Database infrastructure - shared engine and declarative primitives."""

from infrastructure.database.engines import (
    build_async_url,
    create_engine,
    create_tenant_engine,
)
from infrastructure.database.models import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
    "build_async_url",
    "create_engine",
    "create_tenant_engine",
]
