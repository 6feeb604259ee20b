"""FastAPI dependencies: per-request configuration, sessions and repositories."""

from collections.abc import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..config import CatalogConfig
from ..database.book_repository import BookRepository
from ..database.session import DatabaseManager


def get_settings(request: Request) -> CatalogConfig:
    return request.app.state.config


def get_database(request: Request) -> DatabaseManager:
    return request.app.state.db_manager


def get_session(
    db_manager: DatabaseManager = Depends(get_database),
) -> Generator[Session, None, None]:
    """One transactional session per request."""
    with db_manager.session_scope() as session:
        yield session


def get_book_repository(session: Session = Depends(get_session)) -> BookRepository:
    return BookRepository(session)
