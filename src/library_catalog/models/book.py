"""
Book model for the Library Catalog.

This is the one place book fields are validated. The store calls
``validate_book`` before every insert and update, and the HTTP layer reuses
the same models for request bodies and responses, so the two layers cannot
drift apart.

JSON uses camelCase (``publishedYear``, ``availableCopies``); Python code
uses snake_case. Both spellings are accepted on input.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from ..exceptions import ValidationError

MIN_PUBLISHED_YEAR = 1000

# Largest value a 64-bit SQL INTEGER column can store.
MAX_AVAILABLE_COPIES = 2**63 - 1

BOOK_VALIDATION_PREFIX = "Book validation failed"


def current_year() -> int:
    """Upper bound for ``published_year``, evaluated at validation time."""
    return datetime.now().year


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class BookFields(CamelModel):
    """
    The user-supplied fields of a book.

    Text fields are stripped of surrounding whitespace before the
    non-empty check, so ``"   "`` is rejected as missing.
    """

    title: str = Field(
        ...,
        description="The title of the book",
        min_length=1,
        max_length=500,
        examples=["The Hobbit", "Project Hail Mary"],
    )

    author: str = Field(
        ...,
        description="Author display name",
        min_length=1,
        max_length=200,
        examples=["J.R.R. Tolkien", "Andy Weir"],
    )

    category: str = Field(
        ...,
        description="Free-form category used as a filter key",
        min_length=1,
        max_length=100,
        examples=["Fantasy", "Sci-Fi", "Biography"],
    )

    published_year: int = Field(
        ...,
        description="Year the book was published",
        ge=MIN_PUBLISHED_YEAR,
        examples=[1937, 2021],
    )

    available_copies: int = Field(
        ...,
        description="Number of copies currently available for loan",
        ge=0,
        le=MAX_AVAILABLE_COPIES,
        examples=[0, 3, 7],
    )

    @field_validator("published_year")
    @classmethod
    def validate_not_in_future(cls, v: int) -> int:
        """Reject years after the current calendar year."""
        year = current_year()
        if v > year:
            raise ValueError(f"Published year cannot be after {year}")
        return v


class Book(BookFields):
    """A persisted book record as returned by the store and the API."""

    id: str = Field(..., description="Opaque identifier assigned by the store")

    created_at: datetime = Field(..., description="When the record was created")

    updated_at: datetime = Field(..., description="When the record was last changed")

    @property
    def is_available(self) -> bool:
        """Check if the book has any available copies."""
        return self.available_copies > 0

    def catalog_fields(self) -> dict[str, Any]:
        """The user-supplied fields, without id or timestamps."""
        return self.model_dump(include=set(BookFields.model_fields))


# Names accepted by ``update_by_id``, keyed by both spellings.
UPDATABLE_FIELDS: dict[str, str] = {
    **{name: name for name in BookFields.model_fields},
    **{to_camel(name): name for name in BookFields.model_fields},
}


class CopiesAdjustment(BaseModel):
    """Body of ``PATCH /books/{id}/copies``."""

    change: StrictInt = Field(
        ...,
        description="Signed delta applied to available copies",
        ge=-MAX_AVAILABLE_COPIES,
        le=MAX_AVAILABLE_COPIES,
    )


class CategoryChange(CamelModel):
    """Body of ``PATCH /books/{id}/category``."""

    category: StrictStr = Field(..., min_length=1, max_length=100)


class SeedResult(BaseModel):
    message: str
    data: list[Book]


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


def format_validation_error(
    exc: PydanticValidationError, prefix: str = BOOK_VALIDATION_PREFIX
) -> str:
    """Flatten a pydantic error into ``"<prefix>: field: reason; ..."``."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"])
        message = error["msg"].removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return f"{prefix}: {'; '.join(parts)}"


def validate_book(data: Any) -> BookFields:
    """
    Validate a complete set of book fields.

    Raises:
        ValidationError: If a field is missing or breaks a constraint
    """
    if not isinstance(data, Mapping) and not isinstance(data, BookFields):
        raise ValidationError(f"{BOOK_VALIDATION_PREFIX}: each book must be an object")
    try:
        return BookFields.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(format_validation_error(e)) from e


def normalize_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Map a partial update onto snake_case field names.

    Raises:
        ValidationError: If a key is not an updatable book field
    """
    normalized = {}
    for key, value in changes.items():
        field = UPDATABLE_FIELDS.get(key)
        if field is None:
            raise ValidationError(f"{BOOK_VALIDATION_PREFIX}: {key}: field cannot be updated")
        normalized[field] = value
    if not normalized:
        raise ValidationError(f"{BOOK_VALIDATION_PREFIX}: no fields to update")
    return normalized
