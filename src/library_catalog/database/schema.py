"""
SQLAlchemy database schema for the Library Catalog.

A single ``books`` table mirrors ``library_catalog.models.book.Book``. The
CHECK constraints repeat the non-negative copies and minimum year rules so
the invariants hold even for writes that bypass the repository.
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String
from sqlalchemy.orm import declarative_base

from ..models.book import MIN_PUBLISHED_YEAR

Base = declarative_base()


def generate_book_id() -> str:
    """Opaque 32-character identifier for new books."""
    return uuid.uuid4().hex


class Book(Base):
    """
    Books table - stores the library's catalog.

    Usage:
    - Read by the list, category and after-threshold endpoints
    - Mutated by the copies and category endpoints
    - Rows are removed only once ``available_copies`` reaches zero
    """

    __tablename__ = "books"

    id = Column(String(32), primary_key=True, default=generate_book_id)
    title = Column(String(500), nullable=False)
    author = Column(String(200), nullable=False)
    category = Column(String(100), nullable=False)
    published_year = Column(Integer, nullable=False)
    available_copies = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    __table_args__ = (
        Index("idx_book_category", "category"),
        Index("idx_book_published_year", "published_year"),
        Index("idx_book_created_at", "created_at"),
        CheckConstraint("available_copies >= 0", name="check_available_copies_non_negative"),
        CheckConstraint(
            f"published_year >= {MIN_PUBLISHED_YEAR}", name="check_published_year_valid"
        ),
    )

    def to_dict(self) -> dict[str, Any]:
        """Column values keyed by attribute name."""
        return {column.key: getattr(self, column.key) for column in self.__table__.columns}

    def __repr__(self) -> str:
        return f"<Book id={self.id!r} title={self.title!r} copies={self.available_copies}>"
