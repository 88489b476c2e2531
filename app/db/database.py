"""
Database lifecycle.

A Database owns one engine and session factory. It is constructed and opened
by the process entry point (the FastAPI lifespan, a job runner, or a test
fixture) and handed to whatever needs sessions; there is no module-level
engine.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base

logger = logging.getLogger(__name__)


def _on_sqlite_connect(dbapi_conn, connection_record):
    # pysqlite's own BEGIN handling turns RELEASE SAVEPOINT into a COMMIT;
    # BEGIN is emitted from _on_sqlite_begin instead
    dbapi_conn.isolation_level = None
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _on_sqlite_begin(conn):
    # a StaticPool connection is shared, so another session may already hold the transaction
    if not conn.connection.dbapi_connection.in_transaction:
        conn.exec_driver_sql("BEGIN")


class Database:
    """Engine + session factory with explicit open/close."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def open(self) -> "Database":
        if self._engine is not None:
            return self
        kwargs = {"echo": self.echo, "pool_pre_ping": True}
        if self.is_sqlite:
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in self.url:
                # one shared connection, otherwise every session sees an empty database
                kwargs["poolclass"] = StaticPool
        self._engine = create_engine(self.url, **kwargs)
        if self.is_sqlite:
            event.listen(self._engine, "connect", _on_sqlite_connect)
            event.listen(self._engine, "begin", _on_sqlite_begin)
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self._engine
        )
        logger.info("Database opened (%s)", self.url.split("://", 1)[0])
        return self

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database closed")

    def create_all(self) -> None:
        """Create tables directly from metadata (SQLite dev databases and tests)."""
        import app.models  # noqa: F401  registers every model on Base.metadata
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Yield a session inside one transaction.

        Commits when the block exits normally; rolls back and re-raises on
        any exception. The session is always closed.
        """
        session = self.session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
