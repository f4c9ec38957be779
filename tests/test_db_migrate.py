from __future__ import annotations

from pathlib import Path

import pytest
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text

from stashgate import models  # noqa: F401
from stashgate.core.database import Base
from stashgate.scripts import db_migrate
from stashgate.scripts.db_migrate import BASELINE_REVISION, default_config, migrate, schema_state, sync_url


@pytest.fixture
def alembic_config() -> Config:
    return default_config()


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'stashgate.db'}"


def _version(url: str) -> str:
    engine = create_engine(sync_url(url))
    try:
        with engine.connect() as conn:
            return conn.execute(text("SELECT version_num FROM alembic_version")).scalar_one()
    finally:
        engine.dispose()


def test_sync_url():
    assert sync_url("sqlite+aiosqlite:///./data/app.db") == "sqlite:///./data/app.db"
    assert sync_url("sqlite:///./data/app.db") == "sqlite:///./data/app.db"


def test_fresh_database(alembic_config, db_url):
    assert schema_state(db_url) == (False, False)

    migrate(alembic_config, db_url)

    engine = create_engine(sync_url(db_url))
    tables = set(inspect(engine).get_table_names())
    engine.dispose()
    assert {"api_keys", "files", "share_links"} <= tables
    assert _version(db_url) == BASELINE_REVISION


def test_unversioned_schema_is_stamped(alembic_config, db_url):
    engine = create_engine(sync_url(db_url))
    Base.metadata.create_all(engine)
    engine.dispose()
    assert schema_state(db_url) == (False, True)

    migrate(alembic_config, db_url)

    assert schema_state(db_url) == (True, True)
    assert _version(db_url) == BASELINE_REVISION


def test_bundled_migrations_live_in_the_package():
    script_location = default_config().get_main_option("script_location")
    assert script_location.startswith(str(Path(db_migrate.__file__).resolve().parents[1]))
    assert (Path(script_location) / "env.py").is_file()
    assert (Path(script_location) / "script.py.mako").is_file()


def test_main_without_config_uses_bundled_migrations(monkeypatch, db_url):
    monkeypatch.setattr(db_migrate, "DATABASE_URL", db_url)

    assert db_migrate.main([]) == 0
    assert _version(db_url) == BASELINE_REVISION


def test_main_reports_failure(monkeypatch, db_url):
    monkeypatch.setattr(db_migrate, "DATABASE_URL", db_url)
    assert db_migrate.main(["--revision", "does_not_exist"]) == 1
