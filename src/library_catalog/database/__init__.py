"""
Database package for the Library Catalog.

This package provides:
- SQLAlchemy schema definitions (schema.py)
- Engine and session management (session.py)
- The book store (book_repository.py)
"""

from .book_repository import BookRepository
from .repository import BaseRepository
from .schema import Base, Book
from .session import DatabaseManager, prepare_database_url, safe_commit, safe_query

__all__ = [
    "Base",
    "BaseRepository",
    "Book",
    "BookRepository",
    "DatabaseManager",
    "prepare_database_url",
    "safe_commit",
    "safe_query",
]
