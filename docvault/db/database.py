"""Engine, session factory and schema bootstrap.

SQLite is the default store. Its connections get WAL journaling and
enforced foreign keys; other backends take the URL as-is with a pooled
engine.
"""

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from docvault.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

SQLITE_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA busy_timeout=30000",
    "PRAGMA foreign_keys=ON",
)


def _engine_options(database_url: str) -> dict:
    url = make_url(database_url)
    options = {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_pool_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_pre_ping": True,
    }
    if url.get_backend_name() != "sqlite":
        return options
    if not url.database or url.database == ":memory:":
        # In-memory SQLite uses a singleton pool without sizing knobs
        options = {}
    else:
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    # Request handlers and BackgroundTasks share connections across threads
    options["connect_args"] = {"check_same_thread": False}
    return options


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))


@event.listens_for(engine, "connect")
def _configure_connection(dbapi_connection, connection_record):
    if engine.dialect.name != "sqlite":
        return
    cursor = dbapi_connection.cursor()
    for pragma in SQLITE_PRAGMAS:
        cursor.execute(pragma)
    cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db() -> None:
    """Create any missing tables for the folder, document and directory models."""
    import docvault.db.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(
        "database_initialized",
        extra={"backend": engine.dialect.name, "tables": len(Base.metadata.tables)},
    )


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for work outside a request, rolled back if the block raises."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
