"""
Database integration.

The ``Database`` object owns the SQLAlchemy engine and session factory
for one application instance.  ``create_app`` constructs it from the
settings, the application lifespan initialises and disposes it, and
request handlers obtain a session through the ``get_session``
dependency.  Nothing here is a module level singleton, so tests can run
any number of isolated applications side by side.

Schema management is additive only: ``init_db`` creates missing tables
and never drops existing ones.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..models import Base
from .config import Settings

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores REFERENCES clauses (and ON DELETE CASCADE) unless
    # foreign key support is switched on for every connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine for ``url``.

    SQLite needs a few adjustments to behave like a server database
    under FastAPI's threadpool: connections may be shared across
    threads, in-memory databases must live on a single static
    connection, and foreign keys must be enabled explicitly.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, echo=echo, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if parsed.database in (None, "", ":memory:"):
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, echo=echo, **kwargs)
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


class Database:
    """Engine plus session factory for one application instance."""

    def __init__(self, settings: Settings) -> None:
        self.url = settings.sqlalchemy_url
        self.engine = build_engine(self.url, echo=settings.debug)
        self.session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    def init_db(self) -> None:
        """Create any missing tables."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ready (%s)", self.engine.url.render_as_string(hide_password=True))

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on error."""
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_session(request: Request) -> Iterator[Session]:
    """FastAPI dependency yielding a per-request transactional session."""
    with get_database(request).session() as session:
        yield session
