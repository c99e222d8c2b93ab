"""Infrastructure adapters of the tenancy bounded context."""

from tenancy.infrastructure.models import TenantInfoModel
from tenancy.infrastructure.tenant_info_cache import InMemoryTenantInfoCache
from tenancy.infrastructure.tenant_info_store import SqlAlchemyTenantInfoStore

__all__ = [
    "InMemoryTenantInfoCache",
    "SqlAlchemyTenantInfoStore",
    "TenantInfoModel",
]
