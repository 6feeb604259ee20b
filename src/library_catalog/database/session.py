"""
Database session management for the Library Catalog.

Sessions are short-lived: one per HTTP request (see
``library_catalog.api.dependencies``) or one per CLI command, always opened
through ``DatabaseManager.session_scope`` so each unit of work commits or
rolls back as a whole.
"""

import logging
from collections.abc import Callable, Generator
from contextlib import contextmanager
from typing import Any, TypeVar

from sqlalchemy import create_engine, make_url, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import CatalogConfig, get_config
from ..exceptions import StoreError
from .schema import Base

logger = logging.getLogger(__name__)


def prepare_database_url(config: CatalogConfig) -> str:
    """Resolve the configured URL, creating the SQLite directory if needed."""
    if config.database_url is None:
        config.database_path.parent.mkdir(exist_ok=True, parents=True)
        logger.info("Using SQLite database at: %s", config.database_path)
    return config.get_database_url()


def is_memory_database(database_url: str) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and (
        url.database in (None, "", ":memory:") or url.query.get("mode") == "memory"
    )


def engine_options(database_url: str) -> dict[str, Any]:
    """Pool settings for ``create_engine``, by backend."""
    if is_memory_database(database_url):
        # An in-memory database lives and dies with its one connection.
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    if make_url(database_url).get_backend_name() == "sqlite":
        # Pooled connections, one per session; each request keeps its own transaction.
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_size": 10, "max_overflow": 20, "pool_pre_ping": True}


class DatabaseManager:
    """
    Owns the engine and session factory for one catalog database.

    Nothing connects until the engine is first used.
    """

    def __init__(self, database_url: str | None = None):
        self.database_url = database_url or prepare_database_url(get_config())
        self._engine: Engine | None = None
        self._sessions: sessionmaker | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = create_engine(self.database_url, **engine_options(self.database_url))
            logger.info("Database engine created: %s", self._engine.url)
        return self._engine

    def create_session(self) -> Session:
        """Open a session on this database. Callers must close it."""
        if self._sessions is None:
            # Rows stay readable after commit; repositories convert them afterwards.
            self._sessions = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        return self._sessions()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Transactional scope: commit on success, roll back on any exception.

        ```python
        with db_manager.session_scope() as session:
            BookRepository(session).find_all()
        ```
        """
        session = self.create_session()
        try:
            yield session
            session.commit()
        except Exception:
            logger.debug("Rolling back catalog transaction")
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self, drop_existing: bool = False) -> None:
        """Create the ``books`` table, optionally dropping it first."""
        if drop_existing:
            logger.warning("Dropping catalog tables")
            Base.metadata.drop_all(bind=self.engine)
        Base.metadata.create_all(bind=self.engine)
        logger.info("Catalog schema ready")

    def verify_connection(self) -> bool:
        """True if ``SELECT 1`` succeeds. Backs the health check."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Database connection failed")
            return False
        return True

    def close(self) -> None:
        """Dispose of the engine. The manager reconnects lazily if used again."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._sessions = None


def safe_commit(session: Session, operation: str) -> None:
    """
    Commit, rolling back and raising ``StoreError`` on driver failure.
    """
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Commit failed during %s", operation)
        raise StoreError(f"Database operation '{operation}' failed: {e!s}") from e


T = TypeVar("T")


def safe_query(session: Session, query_func: Callable[[Session], T], error_msg: str) -> T:
    """
    Run ``query_func(session)``, raising ``StoreError`` on driver failure.
    """
    try:
        return query_func(session)
    except SQLAlchemyError as e:
        logger.exception("Query failed: %s", error_msg)
        raise StoreError(f"{error_msg}: {e!s}") from e
