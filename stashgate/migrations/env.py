from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from stashgate import models  # noqa: F401
from stashgate.core.database import DATABASE_URL, Base
from stashgate.scripts.db_migrate import sync_url

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata

# stashgate-db-migrate passes the URL in; plain `alembic` falls back to DATABASE_URL
database_url = config.get_main_option("sqlalchemy.url") or sync_url(DATABASE_URL)


def run_migrations_offline():
    """Emit SQL for the configured DATABASE_URL without connecting."""
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Run against a sync engine built from the app's async DATABASE_URL."""
    connectable = create_engine(database_url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
            render_as_batch=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
