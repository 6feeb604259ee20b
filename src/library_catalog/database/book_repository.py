"""
Book repository implementation for the Library Catalog.

This is the store boundary. Every write is validated here with the shared
rules from ``library_catalog.models.book``, independent of whatever the HTTP
layer already checked.

Copy adjustments and guarded deletes are issued as single conditional
statements (``UPDATE ... WHERE available_copies + :change >= 0`` and
``DELETE ... WHERE available_copies = 0``), so two concurrent requests can
neither drive a count negative nor delete a book whose copies were restored
between a read and a write.
"""

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select, update

from ..database.schema import Book as BookDB
from ..database.session import safe_commit, safe_query
from ..models.book import Book as BookModel
from ..models.book import (
    MAX_AVAILABLE_COPIES,
    UPDATABLE_FIELDS,
    normalize_changes,
    validate_book,
)
from .repository import BaseRepository, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

FILTERABLE_FIELDS = frozenset(
    {"title", "author", "category", "published_year", "available_copies"}
)


class BookRepository(BaseRepository[BookDB, BookModel]):
    """
    Repository for book data access.

    - Reads return books ordered by creation time, then id
    - Writes validate before touching the database
    - All methods return ``Book`` models for direct JSON serialization
    """

    @property
    def model_class(self):
        return BookDB

    @property
    def response_schema(self):
        return BookModel

    @property
    def entity_name(self) -> str:
        return "Book"

    def _ordered(self, query):
        return query.order_by(BookDB.created_at.asc(), BookDB.id.asc())

    def _fetch(self, query, error_msg: str) -> list[BookModel]:
        results = safe_query(
            self.session, lambda s: s.execute(query).scalars().all(), error_msg
        )
        return [self._to_response_model(row) for row in results]

    def insert_many(self, records: Sequence[Any]) -> list[BookModel]:
        """
        Insert a batch of books in one transaction.

        The whole batch is validated before anything is written; one bad
        record rejects the batch and nothing is inserted.

        Args:
            records: Mappings of book fields (camelCase or snake_case)

        Returns:
            The created books, in input order, with assigned ids

        Raises:
            ValidationError: If any record fails validation
            StoreError: On database errors
        """
        validated = []
        for index, record in enumerate(records):
            try:
                validated.append(validate_book(record))
            except ValidationError as e:
                raise ValidationError(f"{e} (record {index})") from e

        rows = [BookDB(**fields.model_dump()) for fields in validated]
        self.session.add_all(rows)
        safe_commit(self.session, "insert books")

        logger.info("Inserted %d books", len(rows))
        return [self._to_response_model(row) for row in rows]

    def find_all(self) -> list[BookModel]:
        """Get every book in the catalog."""
        return self._fetch(self._ordered(select(BookDB)), "Failed to list books")

    def find_by_filter(self, field: str, value: Any) -> list[BookModel]:
        """
        Get books whose ``field`` equals ``value`` exactly.

        Args:
            field: A book field name, camelCase or snake_case
            value: Value to match

        Raises:
            ValidationError: If ``field`` is not filterable
        """
        column_name = UPDATABLE_FIELDS.get(field)
        if column_name not in FILTERABLE_FIELDS:
            raise ValidationError(f"Cannot filter books by '{field}'")

        column = getattr(BookDB, column_name)
        query = self._ordered(select(BookDB).where(column == value))
        return self._fetch(query, f"Failed to filter books by {field}")

    def find_published_after(self, year: int) -> list[BookModel]:
        """Get books with ``published_year`` strictly greater than ``year``."""
        query = self._ordered(select(BookDB).where(BookDB.published_year > year))
        return self._fetch(query, "Failed to list books by publication year")

    def update_by_id(self, book_id: str, changes: Mapping[str, Any]) -> BookModel:
        """
        Apply a partial update to one book.

        The changed fields are merged over the stored ones and the result is
        validated as a whole before it is written.

        Args:
            book_id: Book ID
            changes: Field values to replace, camelCase or snake_case

        Returns:
            The updated book

        Raises:
            NotFoundError: If the book does not exist
            ValidationError: If a change is unknown or breaks a rule
            StoreError: On database errors
        """
        normalized = normalize_changes(changes)
        book = self._get_row(book_id, for_update=True)

        fields = validate_book({**book.to_dict(), **normalized})

        for name in normalized:
            setattr(book, name, getattr(fields, name))
        book.updated_at = datetime.now()

        safe_commit(self.session, "update book")
        logger.debug("Updated book %s: %s", book_id, sorted(normalized))
        return self._to_response_model(book)

    def adjust_copies(self, book_id: str, change: int) -> BookModel:
        """
        Add a signed delta to ``available_copies``.

        Issued as one conditional UPDATE; the guard and the write cannot be
        interleaved with another request.

        Raises:
            NotFoundError: If the book does not exist
            ValidationError: If ``change`` is not an integer or the result
                would be negative or exceed ``MAX_AVAILABLE_COPIES``
            StoreError: On database errors
        """
        if isinstance(change, bool) or not isinstance(change, int):
            raise ValidationError("Change must be an integer")
        if abs(change) > MAX_AVAILABLE_COPIES:
            raise ValidationError(
                f"Change must be between -{MAX_AVAILABLE_COPIES} and {MAX_AVAILABLE_COPIES}"
            )

        statement = (
            update(BookDB)
            .where(
                BookDB.id == book_id,
                BookDB.available_copies + change >= 0,
                BookDB.available_copies + change <= MAX_AVAILABLE_COPIES,
            )
            .values(
                available_copies=BookDB.available_copies + change,
                updated_at=datetime.now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = safe_query(
            self.session, lambda s: s.execute(statement), "Failed to adjust copies"
        )

        if result.rowcount == 0:
            # Nothing matched: either the id is unknown or a bound failed.
            row = self._get_row(book_id)
            if row.available_copies + change > MAX_AVAILABLE_COPIES:
                raise ValidationError(
                    f"Available copies cannot exceed {MAX_AVAILABLE_COPIES}"
                )
            raise ValidationError("Cannot reduce copies below zero")

        safe_commit(self.session, "adjust copies")
        logger.debug("Adjusted copies of book %s by %+d", book_id, change)
        return self.find_by_id(book_id)

    def delete_if_unavailable(self, book_id: str) -> None:
        """
        Delete a book only while it has no available copies.

        Raises:
            NotFoundError: If the book does not exist
            ValidationError: If the book still has available copies
            StoreError: On database errors
        """
        statement = (
            delete(BookDB)
            .where(BookDB.id == book_id, BookDB.available_copies == 0)
            .execution_options(synchronize_session=False)
        )
        result = safe_query(
            self.session, lambda s: s.execute(statement), "Failed to delete book"
        )

        if result.rowcount == 0:
            self._get_row(book_id)
            raise ValidationError("Cannot delete book with available copies")

        safe_commit(self.session, "delete book")
        logger.info("Deleted book %s", book_id)


__all__ = ["FILTERABLE_FIELDS", "BookRepository", "NotFoundError", "ValidationError"]
