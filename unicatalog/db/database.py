"""
Database engine and session management.

Builds the SQLAlchemy engine from configuration and wraps it in a `Store`
that repositories receive at construction. Every repository operation opens
its own short-lived session through `Store.session_scope()`; nothing here is
a module-level singleton, so tests can hand repositories an in-memory store.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from unicatalog.db import models
from unicatalog.utils.settings import get_settings, resolve_database_url

logger = logging.getLogger(__name__)

# Seconds a SQLite connection waits on a locked database before failing.
SQLITE_BUSY_TIMEOUT = 30


def _is_sqlite_memory(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"))


def _install_sqlite_pragmas(engine: Engine, *, wal: bool) -> None:
    """Enable foreign keys (needed for the counter cascade) on each connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # pragma: no cover - trivial
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if wal:
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()


def build_engine(url: Optional[str] = None, *, echo: Optional[bool] = None) -> Engine:
    """Create an engine for ``url`` (defaults to the configured DATABASE_URL)."""
    url = resolve_database_url(url)
    if echo is None:
        echo = get_settings().sql_echo

    kwargs: dict = {"echo": echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT}
        if _is_sqlite_memory(url):
            # In-memory SQLite with StaticPool so the schema persists across connections
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        _install_sqlite_pragmas(engine, wal=not _is_sqlite_memory(url))
    logger.info("Database engine created for dialect=%s", engine.dialect.name)
    return engine


class Store:
    """Scoped session provider over one SQLAlchemy engine."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(
            bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    @classmethod
    def from_url(cls, url: Optional[str] = None, *, echo: Optional[bool] = None) -> "Store":
        return cls(build_engine(url, echo=echo))

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session; commit on success, roll back on error, always close."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_schema(self) -> None:
        """Create the catalog tables and indexes that do not exist yet."""
        models.Base.metadata.create_all(bind=self.engine)
        logger.info("Catalog schema ensured")

    def reset_schema(self) -> None:
        """Drop every catalog table and recreate it empty."""
        logger.warning("Dropping and recreating the catalog schema")
        models.Base.metadata.drop_all(bind=self.engine)
        models.Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()
