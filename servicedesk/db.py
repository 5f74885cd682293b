"""
Database access for the Service Desk.

A single DatabaseManager instance owns the engine and the session factory.
Server databases get a QueuePool sized from Settings; SQLite (local runs and
the test suite) gets a StaticPool so an in-memory database survives across
sessions, with foreign keys switched on so comment rows follow their issue.

Usage:
    from servicedesk.db import db, get_db, Base

    db.initialize(settings)
    with db.session() as session:
        issue = session.get(Issue, issue_id)
"""

import time
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

if TYPE_CHECKING:
    from .config import Settings


class Base(DeclarativeBase):
    """Declarative base shared by User, Issue and IssueComment."""


def _engine_options(url: str, settings: "Settings") -> dict[str, Any]:
    if url.startswith("sqlite"):
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "poolclass": QueuePool,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": settings.db_pool_pre_ping,
    }


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class DatabaseManager:
    """
    Process-wide owner of the engine and session factory.

    initialize() is idempotent; reset() disposes the engine so the next
    initialize() starts from scratch (used between tests).
    """

    _instance: Optional["DatabaseManager"] = None

    def __new__(cls) -> "DatabaseManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.engine = None
            cls._instance.SessionLocal = None
        return cls._instance

    def initialize(self, settings: "Settings", database_url: str | None = None) -> None:
        """
        Create the engine and session factory. Call once at app startup.

        Args:
            settings: Application settings (pool sizes, echo flag, default URL).
            database_url: Optional override of settings.database_url.
        """
        if self.is_initialized:
            return

        url = database_url or settings.database_url
        self.engine = create_engine(url, echo=settings.debug, **_engine_options(url, settings))
        if url.startswith("sqlite"):
            _enable_sqlite_foreign_keys(self.engine)

        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

    @property
    def is_initialized(self) -> bool:
        return self.engine is not None

    def create_all_tables(self) -> None:
        """Create any missing tables. Alembic owns schema changes in deployed environments."""
        self._ensure_initialized()
        from . import models  # noqa: F401  (registers tables on Base.metadata)

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Yield a session that commits on success and rolls back on error."""
        self._ensure_initialized()
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def health_check(self) -> dict:
        """
        Run ``SELECT 1`` against the database.

        Returns:
            dict with 'healthy' (bool), 'latency_ms' (float), and 'error' (str or None)
        """
        if not self.is_initialized:
            return {"healthy": False, "latency_ms": 0, "error": "Database not initialized"}

        start = time.perf_counter()
        error = None
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            error = str(e)
        latency_ms = round((time.perf_counter() - start) * 1000, 2)
        return {"healthy": error is None, "latency_ms": latency_ms, "error": error}

    def reset(self) -> None:
        """Dispose the engine and forget the session factory."""
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.SessionLocal = None

    def _ensure_initialized(self) -> None:
        if not self.is_initialized:
            raise RuntimeError("DatabaseManager not initialized. Call initialize() first.")


db = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a request-scoped session."""
    with db.session() as session:
        yield session


__all__ = ["Base", "DatabaseManager", "db", "get_db"]
