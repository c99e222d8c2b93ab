"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance. Tests are skipped
when the database cannot be reached.
"""

from collections.abc import AsyncGenerator
import os

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from infrastructure.database.engines import create_engine
from infrastructure.settings import DatabaseSettings
from tenancy.application.current_tenant import CurrentTenantAccessor

TEST_SCHEMAS = ("tenant_acme", "tenant_globex")


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        MULTITENANCY_DB_HOST, MULTITENANCY_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("MULTITENANCY_DB_HOST", "localhost"),
        port=int(os.getenv("MULTITENANCY_DB_PORT", "5432")),
        database=os.getenv("MULTITENANCY_DB_DATABASE", "multitenancy"),
        username=os.getenv("MULTITENANCY_DB_USERNAME", "multitenancy"),
        password=SecretStr(
            os.getenv("MULTITENANCY_DB_PASSWORD", "multitenancy_dev_password")
        ),
    )


async def _drop_test_schemas(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        for schema in TEST_SCHEMAS:
            await conn.execute(text(f'DROP SCHEMA IF EXISTS "{schema}" CASCADE'))


@pytest_asyncio.fixture
async def pg_engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Provide an engine on a clean database, skipping when it is down.

    Tenant schemas created by tests are dropped before and after each test.
    """
    engine = create_engine(integration_db_settings)
    try:
        await _drop_test_schemas(engine)
    except (OSError, SQLAlchemyError) as exc:
        await engine.dispose()
        pytest.skip(f"PostgreSQL is not available: {exc}")

    yield engine

    await _drop_test_schemas(engine)
    await engine.dispose()


@pytest.fixture
def accessor():
    """Tenant accessor with no ambient tenant."""
    tenant_accessor = CurrentTenantAccessor()
    with tenant_accessor.begin_scope(None):
        yield tenant_accessor
