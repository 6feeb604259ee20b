"""
Library Catalog Models.

Pydantic v2 models for the catalog's only entity, the book, plus the
request and response bodies of the HTTP API. Validation rules live here
and are shared by the store and the API layer.
"""

from .book import (
    Book,
    BookFields,
    CategoryChange,
    CopiesAdjustment,
    ErrorResponse,
    MessageResponse,
    SeedResult,
    format_validation_error,
    normalize_changes,
    validate_book,
)

__all__ = [
    "Book",
    "BookFields",
    "CategoryChange",
    "CopiesAdjustment",
    "ErrorResponse",
    "MessageResponse",
    "SeedResult",
    "format_validation_error",
    "normalize_changes",
    "validate_book",
]
