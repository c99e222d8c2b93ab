"""Alembic environment for the multitenancy kernel.

Runs in three ways:

- offline, rendering SQL for the configured URL
- online from the command line, creating an async engine from settings
- online inside ``AlembicSchemaMigrator``, reusing the connection passed in
  ``config.attributes`` and scoping the version table to the tenant schema
"""

import asyncio
import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

# Make the source root importable when run through the alembic CLI
source_root = Path(__file__).resolve().parents[2]
if str(source_root) not in sys.path:
    sys.path.insert(0, str(source_root))

from infrastructure.database.engines import build_async_url  # noqa: E402
from infrastructure.database.models import Base  # noqa: E402
from infrastructure.settings import get_database_settings  # noqa: E402
from tenancy.infrastructure.models import TenantInfoModel  # noqa: E402,F401

config = context.config

if config.config_file_name is not None and not config.attributes.get("connection"):
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def get_database_url() -> str:
    """URL from alembic.ini, falling back to the database settings."""
    url = config.get_main_option("sqlalchemy.url")
    if url:
        return url
    return build_async_url(get_database_settings())


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    schema = config.attributes.get("tenant_schema")
    if schema and connection.dialect.name != "sqlite":
        # Unqualified tables land in the tenant schema until the transaction ends
        connection.exec_driver_sql(f'SET LOCAL search_path TO "{schema}"')
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        version_table_schema=schema,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    connectable = create_async_engine(get_database_url(), poolclass=pool.NullPool)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
        await connection.commit()

    await connectable.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connection = config.attributes.get("connection")
    if connection is not None:
        do_run_migrations(connection)
        return

    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
