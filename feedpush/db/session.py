import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from feedpush.config import DB_URL
from feedpush.errors import DataUnavailableError

logger = logging.getLogger(__name__)

_connect_args = {"timeout": 15} if DB_URL.startswith("sqlite") else {}
engine = create_engine(DB_URL, echo=False, connect_args=_connect_args)
SessionLocal = sessionmaker(bind=engine)


if engine.dialect.name == "sqlite":

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        mode = cursor.fetchone()[0]
        cursor.close()
        if mode != "wal":
            logger.warning("Failed to enable WAL mode, got: %s", mode)


def init_db():
    """Ensure database is ready. Schema managed by Alembic migrations."""
    if not inspect(engine).has_table("alembic_version"):
        raise RuntimeError("Database not initialized. Run: alembic upgrade head")


def get_session():
    """Get a new database session."""
    return SessionLocal()


@contextmanager
def storage_session(session_factory, operation: str):
    """Open a session for one storage operation.

    SQLAlchemy errors are rolled back, logged once here and re-raised as
    DataUnavailableError so callers never see a half-built result.
    """
    session = session_factory()
    try:
        yield session
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Storage failure during %s", operation)
        raise DataUnavailableError(f"{operation} failed: {e}") from e
    finally:
        session.close()
