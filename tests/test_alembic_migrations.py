"""Tests for Alembic migrations and database configuration.

Tests verify:
1. Fresh DB gets every table from `alembic upgrade head`
2. Migrated schema matches the ORM models column for column
3. Downgrade removes everything
4. init_db() raises a helpful error when migrations have not run
5. env.py takes DB_URL from feedpush.config with render_as_batch
6. The application engine runs SQLite in WAL mode with a busy timeout
"""

import os
import tempfile
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine, inspect, text

from feedpush.db.models import Base

EXPECTED_TABLES = {
    "users",
    "news_categories",
    "user_category_subscriptions",
    "marketing_consent",
    "user_current_plan",
    "user_view_logs",
    "user_saved_articles",
    "news",
    "news_categories_map",
    "insights",
    "media_summaries",
}

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_temp_db():
    """Return (path, url) for a fresh temp SQLite file."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    os.unlink(path)  # alembic will create it
    return path, f"sqlite:///{path}"


def _alembic_config(url):
    from alembic.config import Config

    cfg = Config("alembic.ini")
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg


@pytest.fixture()
def migrated_db():
    from alembic import command

    path, url = _make_temp_db()
    command.upgrade(_alembic_config(url), "head")
    engine = create_engine(url)
    yield {"engine": engine, "url": url}
    engine.dispose()
    if os.path.exists(path):
        os.unlink(path)


# ---------------------------------------------------------------------------
# 1-3: Migrations
# ---------------------------------------------------------------------------


def test_fresh_db_creates_all_tables(migrated_db):
    tables = set(inspect(migrated_db["engine"]).get_table_names())
    assert EXPECTED_TABLES <= tables
    assert "alembic_version" in tables


def test_migration_matches_models(migrated_db):
    inspector = inspect(migrated_db["engine"])
    for table in Base.metadata.sorted_tables:
        migrated = {c["name"] for c in inspector.get_columns(table.name)}
        modeled = {c.name for c in table.columns}
        assert migrated == modeled, f"{table.name}: migration {migrated} != model {modeled}"


def test_news_source_column_is_named_from(migrated_db):
    columns = {c["name"] for c in inspect(migrated_db["engine"]).get_columns("news")}
    assert "from" in columns


def test_downgrade_removes_tables(migrated_db):
    from alembic import command

    command.downgrade(_alembic_config(migrated_db["url"]), "base")
    tables = set(inspect(migrated_db["engine"]).get_table_names())
    assert not (EXPECTED_TABLES & tables)


# ---------------------------------------------------------------------------
# 4: init_db guard
# ---------------------------------------------------------------------------


def test_init_db_raises_without_migrations():
    path, url = _make_temp_db()
    test_engine = create_engine(url)
    try:
        with patch("feedpush.db.session.engine", test_engine):
            from feedpush.db import session as session_mod

            with pytest.raises(RuntimeError, match="alembic upgrade head"):
                session_mod.init_db()
    finally:
        test_engine.dispose()
        if os.path.exists(path):
            os.unlink(path)


def test_init_db_passes_after_migrations(migrated_db):
    with patch("feedpush.db.session.engine", migrated_db["engine"]):
        from feedpush.db import session as session_mod

        session_mod.init_db()


# ---------------------------------------------------------------------------
# 5: env.py configuration
# ---------------------------------------------------------------------------


def test_env_py_uses_db_url_and_batch_mode():
    with open("alembic/env.py") as f:
        source = f.read()
    assert "from feedpush.config import DB_URL" in source
    assert "set_main_option" in source
    assert source.count("render_as_batch=True") == 2


# ---------------------------------------------------------------------------
# 6: Engine settings
# ---------------------------------------------------------------------------


def test_session_engine_has_wal():
    from feedpush.db.session import engine

    with engine.connect() as conn:
        mode = conn.execute(text("PRAGMA journal_mode")).scalar()
        assert mode == "wal", f"Expected journal_mode=wal, got {mode}"


def test_session_engine_has_timeout():
    with open("feedpush/db/session.py") as f:
        source = f.read()
    assert '{"timeout": 15}' in source
