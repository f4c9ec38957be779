"""Bring the database schema up to date.

Databases created by the app's own ``create_all`` at startup have the tables
but no ``alembic_version``; those are stamped at the baseline first so the
upgrade does not try to create the tables again.
"""

import argparse
import logging
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.util import CommandError
from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import SQLAlchemyError

from stashgate.core.database import DATABASE_URL

logger = logging.getLogger("stashgate.migrate")

CORE_TABLES = ("api_keys", "files", "share_links")
BASELINE_REVISION = "202610171200_initial"
# shipped inside the package so the console script works from a regular install
MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "migrations"


def sync_url(url: str) -> str:
    """Alembic runs synchronously; drop the async driver from the URL."""
    return url.replace("+aiosqlite", "")


def default_config() -> Config:
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR).replace("%", "%%"))
    return config


def schema_state(url: str) -> tuple[bool, bool]:
    """Return ``(has_version_table, has_core_tables)``."""
    engine = create_engine(sync_url(url))
    try:
        insp = inspect(engine)
        return insp.has_table("alembic_version"), any(insp.has_table(t) for t in CORE_TABLES)
    finally:
        engine.dispose()


def migrate(config: Config, url: str, revision: str = "head") -> None:
    config.set_main_option("sqlalchemy.url", sync_url(url).replace("%", "%%"))
    has_version, has_tables = schema_state(url)
    if has_tables and not has_version:
        logger.info("Unversioned schema found, stamping %s", BASELINE_REVISION)
        command.stamp(config, BASELINE_REVISION)
    logger.info("Upgrading schema to %s", revision)
    command.upgrade(config, revision)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="stashgate-db-migrate", description="Apply database migrations")
    parser.add_argument("--config", default=None, help="Path to an alembic.ini (defaults to the bundled migrations)")
    parser.add_argument("--revision", default="head", help="Target revision")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="[db-migrate] %(message)s")
    try:
        config = Config(args.config) if args.config else default_config()
        migrate(config, DATABASE_URL, args.revision)
    except (CommandError, SQLAlchemyError) as e:
        logger.error("Migration failed: %s", e)
        return 1
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
