"""Alembic-backed schema migrator for tenant storage."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from alembic import command
from alembic.config import Config
from sqlalchemy.schema import CreateSchema

from isolation.domain.value_objects import IsolationMode
from isolation.ports.migrations import MigrationTarget

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection
    from sqlalchemy.ext.asyncio import AsyncEngine

DEFAULT_SCRIPT_LOCATION = (
    Path(__file__).resolve().parents[2] / "infrastructure" / "migrations"
)


class AlembicSchemaMigrator:
    """Upgrades one tenant's storage with Alembic.

    The connection, the tenant schema and the tenant id are handed to
    ``env.py`` through ``Config.attributes``; the bundled environment runs
    on that connection and sets ``version_table_schema`` to the tenant
    schema so each tenant keeps its own revision.
    """

    def __init__(
        self,
        script_location: str | Path = DEFAULT_SCRIPT_LOCATION,
        revision: str = "head",
        config_file: str | Path | None = None,
    ):
        self._script_location = str(script_location)
        self._revision = revision
        self._config_file = str(config_file) if config_file is not None else None

    def build_config(self, target: MigrationTarget) -> Config:
        cfg = Config(self._config_file)
        cfg.set_main_option("script_location", self._script_location)
        cfg.attributes["tenant_schema"] = target.schema
        cfg.attributes["tenant_id"] = target.tenant.tenant_id
        return cfg

    async def migrate(self, engine: AsyncEngine, target: MigrationTarget) -> None:
        """Create the tenant schema if needed and upgrade it."""
        cfg = self.build_config(target)

        def upgrade(connection: Connection) -> None:
            if target.mode == IsolationMode.SCHEMA_PER_TENANT and target.schema:
                connection.execute(CreateSchema(target.schema, if_not_exists=True))
            cfg.attributes["connection"] = connection
            command.upgrade(cfg, self._revision)

        async with engine.begin() as connection:
            await connection.run_sync(upgrade)
