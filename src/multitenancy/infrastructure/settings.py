"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.

Settings only hold values that can be expressed in the environment. Callables
(host selectors, schema and connection string resolvers, global entity
classes) are supplied in code when the domain configuration is built.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ResolutionSourceName = Literal[
    "route",
    "host",
    "header",
    "query_string",
    "claim",
    "default",
    "custom",
]


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        MULTITENANCY_DB_HOST: Database host (default: localhost)
        MULTITENANCY_DB_PORT: Database port (default: 5432)
        MULTITENANCY_DB_DATABASE: Database name (default: multitenancy)
        MULTITENANCY_DB_USERNAME: Database user (default: multitenancy)
        MULTITENANCY_DB_PASSWORD: Database password (required in production)
        MULTITENANCY_DB_POOL_SIZE: Connections kept per engine (default: 5)
        MULTITENANCY_DB_MAX_OVERFLOW: Extra connections allowed under load (default: 5)
        MULTITENANCY_DB_ECHO: Log emitted SQL (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="MULTITENANCY_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="multitenancy", description="Database name")
    username: str = Field(default="multitenancy", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_size: int = Field(
        default=5,
        description="Connections kept open per engine",
        ge=1,
        le=100,
    )
    max_overflow: int = Field(
        default=5,
        description="Connections allowed beyond pool_size under load",
        ge=0,
        le=100,
    )
    echo: bool = Field(default=False, description="Log emitted SQL statements")

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class MultitenancySettings(BaseSettings):
    """Tenant resolution, validation and enforcement settings.

    Environment variables:
        MULTITENANCY_HEADER_NAMES: Headers carrying the tenant id, JSON list
            (default: ["X-Tenant-ID"])
        MULTITENANCY_ROUTE_PARAMETER_NAME: Route value name (default: tenantId)
        MULTITENANCY_QUERY_PARAMETER_NAME: Query parameter name (default: tenantId)
        MULTITENANCY_CLAIM_TYPE: Claim carrying the tenant id (default: tenant_id)
        MULTITENANCY_FALLBACK_TENANT_ID: Tenant used when nothing else resolves
        MULTITENANCY_RESOLUTION_ORDER: Provider order by source, JSON list
        MULTITENANCY_INCLUDE_UNORDERED_PROVIDERS: Run providers missing from the
            order after the ordered ones (default: true)
        MULTITENANCY_REQUIRE_MATCH_ACROSS_SOURCES: Consensus mode (default: false)
        MULTITENANCY_RESOLUTION_TIMEOUT_SECONDS: Deadline for a resolution run
        MULTITENANCY_VALIDATION_MODE: none, cache or repository (default: none)
        MULTITENANCY_RESOLUTION_CACHE_TTL_SECONDS: TTL of cached tenant
            records (default: 300)
        MULTITENANCY_CACHE_MAX_ENTRIES: Capacity of the in-memory cache (default: 1024)
        MULTITENANCY_REQUIRE_TENANT_BY_DEFAULT: Enforce when an operation does not
            declare a requirement (default: true)
        MULTITENANCY_ALLOW_ANONYMOUS: Honor explicit optional declarations
            (default: true)
        MULTITENANCY_ADD_TENANT_TO_LOG_SCOPE: Bind the tenant id to log
            context variables (default: true)
        MULTITENANCY_LOG_SCOPE_KEY: Log key for the tenant id (default: tenant_id)
    """

    model_config = SettingsConfigDict(
        env_prefix="MULTITENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    header_names: list[str] = Field(
        default_factory=lambda: ["X-Tenant-ID"],
        description="Headers inspected for the tenant id, first present wins",
    )
    route_parameter_name: str = Field(
        default="tenantId",
        description="Route value carrying the tenant id",
    )
    query_parameter_name: str = Field(
        default="tenantId",
        description="Query parameter carrying the tenant id",
    )
    claim_type: str = Field(
        default="tenant_id",
        description="Claim carrying the tenant id",
    )
    fallback_tenant_id: str | None = Field(
        default=None,
        description="Tenant used by the default provider",
    )
    resolution_order: list[ResolutionSourceName] = Field(
        default_factory=lambda: [
            "route",
            "host",
            "header",
            "query_string",
            "claim",
            "default",
        ],
        description="Order in which providers run, grouped by source",
    )
    include_unordered_providers: bool = Field(
        default=True,
        description="Append providers whose source is not in resolution_order",
    )
    require_match_across_sources: bool = Field(
        default=False,
        description="Run every provider and require the candidates to agree",
    )
    resolution_timeout_seconds: float | None = Field(
        default=None,
        description="Deadline for one resolution run",
        gt=0,
    )
    validation_mode: Literal["none", "cache", "repository"] = Field(
        default="none",
        description="How resolved tenant ids are validated",
    )
    resolution_cache_ttl_seconds: float | None = Field(
        default=300,
        description="TTL applied when caching tenant records",
        gt=0,
    )
    cache_max_entries: int = Field(
        default=1024,
        description="Capacity of the in-memory tenant cache",
        ge=1,
    )
    require_tenant_by_default: bool = Field(
        default=True,
        description="Require a tenant when the operation declares nothing",
    )
    allow_anonymous: bool = Field(
        default=True,
        description="Honor explicit optional tenant declarations",
    )
    add_tenant_to_log_scope: bool = Field(
        default=True,
        description="Bind the tenant id to structlog context variables",
    )
    log_scope_key: str = Field(
        default="tenant_id",
        description="Log key used for the tenant id",
    )

    @field_validator("header_names")
    @classmethod
    def validate_header_names(cls, value: list[str]) -> list[str]:
        """Strip header names and require at least one."""
        names = [name.strip() for name in value if name and name.strip()]
        if not names:
            raise ValueError("header_names must contain at least one header name")
        return names


class IsolationSettings(BaseSettings):
    """Storage isolation settings.

    Environment variables:
        MULTITENANCY_ISOLATION_MODE: shared_database, schema_per_tenant or
            database_per_tenant (default: shared_database)
        MULTITENANCY_ISOLATION_TENANT_ID_FIELD: Tenant column/attribute name
            (default: tenant_id)
        MULTITENANCY_ISOLATION_TENANT_ID_LENGTH: Length of created tenant
            columns (default: 64)
        MULTITENANCY_ISOLATION_USE_SHADOW_TENANT_ID: Create the tenant column when
            a mapped class lacks it (default: true in shared_database mode)
        MULTITENANCY_ISOLATION_ENABLE_QUERY_FILTERS: Filter reads by tenant
            (default: true in shared_database mode)
        MULTITENANCY_ISOLATION_ENABLE_WRITE_ENFORCEMENT: Guard flushes
            (default: true in shared_database mode)
        MULTITENANCY_ISOLATION_REQUIRE_TENANT_FOR_WRITES: Reject tenant-scoped
            writes without a tenant (default: true)
        MULTITENANCY_ISOLATION_INCLUDE_SCHEMA_IN_CACHE_KEY: Key compiled models
            by schema (default: true)
        MULTITENANCY_ISOLATION_DEFAULT_SCHEMA: Schema used without a tenant
        MULTITENANCY_ISOLATION_SCHEMA_NAME_FORMAT: Schema name template
            (default: tenant_{tenant_id})
        MULTITENANCY_ISOLATION_CONNECTION_STRING_FORMAT: Connection URL template
            for database_per_tenant mode
        MULTITENANCY_ISOLATION_GLOBAL_ENTITY_NAMES: Class names treated as
            global, JSON list
        MULTITENANCY_ISOLATION_TREAT_IDENTITY_ENTITIES_AS_GLOBAL: Treat classes
            from identity modules as global (default: true)
        MULTITENANCY_ISOLATION_IDENTITY_MODULE_PREFIXES: Modules holding
            identity entities, JSON list
    """

    model_config = SettingsConfigDict(
        env_prefix="MULTITENANCY_ISOLATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mode: Literal["shared_database", "schema_per_tenant", "database_per_tenant"] = (
        Field(default="shared_database", description="Storage isolation mode")
    )
    tenant_id_field: str = Field(
        default="tenant_id",
        description="Tenant column and attribute name",
    )
    tenant_id_length: int = Field(
        default=64,
        description="Length of tenant columns created on mapped tables",
        ge=1,
        le=255,
    )
    use_shadow_tenant_id: bool | None = Field(
        default=None,
        description="Create the tenant column on mapped classes that lack it",
    )
    enable_query_filters: bool | None = Field(
        default=None,
        description="Filter ORM reads by the ambient tenant",
    )
    enable_write_enforcement: bool | None = Field(
        default=None,
        description="Stamp and guard tenant-scoped rows at flush time",
    )
    require_tenant_for_writes: bool = Field(
        default=True,
        description="Reject tenant-scoped writes without a tenant",
    )
    include_schema_in_cache_key: bool = Field(
        default=True,
        description="Key compiled models by tenant schema",
    )
    default_schema: str | None = Field(
        default=None,
        description="Schema used when no tenant is present",
    )
    schema_name_format: str = Field(
        default="tenant_{tenant_id}",
        description="Template for per-tenant schema names",
    )
    connection_string_format: str | None = Field(
        default=None,
        description="Template for per-tenant connection URLs",
    )
    global_entity_names: list[str] = Field(
        default_factory=list,
        description="Qualified or short class names shared across tenants",
    )
    treat_identity_entities_as_global: bool = Field(
        default=True,
        description="Treat classes defined in identity modules as global",
    )
    identity_module_prefixes: list[str] = Field(
        default_factory=list,
        description="Module prefixes whose classes are identity entities",
    )

    @model_validator(mode="after")
    def validate_templates(self) -> "IsolationSettings":
        """Validate the templates required by the selected mode."""
        if (
            self.mode == "schema_per_tenant"
            and "{tenant_id}" not in self.schema_name_format
        ):
            raise ValueError(
                "schema_name_format must contain '{tenant_id}' in "
                f"schema_per_tenant mode (got {self.schema_name_format!r})"
            )
        if (
            self.connection_string_format is not None
            and "{tenant_id}" not in self.connection_string_format
        ):
            raise ValueError("connection_string_format must contain '{tenant_id}'")
        return self


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_multitenancy_settings() -> MultitenancySettings:
    """Get cached multitenancy settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return MultitenancySettings()


@lru_cache
def get_isolation_settings() -> IsolationSettings:
    """Get cached isolation settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return IsolationSettings()
