# src/citybench/db/migrate.py

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from alembic.util import CommandError
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from citybench.errors import MigrationError

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def build_migration_config(dsn: str | None = None) -> Config:
    """
    Alembic config for the migration set shipped inside the package.
    Build it once at startup and pass it to run_migrations().
    """
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    if dsn:
        # '%' is interpolation syntax in ini values
        cfg.set_main_option("sqlalchemy.url", dsn.replace("%", "%%"))
    return cfg


def current_head(config: Config) -> str | None:
    return ScriptDirectory.from_config(config).get_current_head()


def run_migrations(connection: Connection, config: Config) -> None:
    """Apply every pending revision on `connection`, in order; no-op when current."""
    config.attributes["connection"] = connection
    try:
        command.upgrade(config, "head")
        connection.commit()
    except (CommandError, SQLAlchemyError) as e:
        raise MigrationError(f"migration failure: {e}") from e
    finally:
        config.attributes.pop("connection", None)
    logger.info("Schema is at revision %s", current_head(config))
