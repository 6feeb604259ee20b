"""
Book endpoints - the catalog's HTTP surface.

Routes (relative to the configured API prefix):
- POST   /books/seed                 - bulk insert, whole batch or nothing
- GET    /books                      - every book
- GET    /books/category/{category}  - exact category match, 404 when empty
- GET    /books/after-threshold      - published after a year (default from config)
- GET    /books/after-2015           - published after 2015, regardless of config
- GET    /books/{id}                 - one book
- PATCH  /books/{id}/copies          - add a signed delta to available copies
- PATCH  /books/{id}/category        - replace the category
- DELETE /books/{id}                 - delete, only when no copies are available

Handlers check request shape before touching the store and let the
exception handlers in ``errors`` turn store failures into ``{error}`` bodies.
"""

import logging
from typing import Any, TypeVar

from fastapi import APIRouter, Body, Depends, Query
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..config import CatalogConfig
from ..database.book_repository import BookRepository
from ..exceptions import NotFoundError, ValidationError
from ..models.book import (
    Book,
    CategoryChange,
    CopiesAdjustment,
    ErrorResponse,
    MessageResponse,
    SeedResult,
)
from .dependencies import get_book_repository, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/books",
    tags=["books"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


M = TypeVar("M", bound=BaseModel)


def parse_body(model: type[M], payload: Any, message: str) -> M:
    """
    Validate a JSON body against ``model``.

    Raises:
        ValidationError: With ``message`` if the body does not fit
    """
    if not isinstance(payload, dict):
        raise ValidationError(message)
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(message) from e


@router.post("/seed", status_code=201, response_model=SeedResult)
def seed_books(
    payload: Any = Body(default=None),
    repo: BookRepository = Depends(get_book_repository),
) -> SeedResult:
    """Insert a non-empty array of books. One invalid book rejects the batch."""
    if not isinstance(payload, list) or not payload:
        raise ValidationError("Provide an array of books")

    inserted = repo.insert_many(payload)
    return SeedResult(message=f"{len(inserted)} books added", data=inserted)


@router.get("", response_model=list[Book])
def list_books(repo: BookRepository = Depends(get_book_repository)) -> list[Book]:
    return repo.find_all()


@router.get("/category/{category}", response_model=list[Book])
def list_books_by_category(
    category: str,
    repo: BookRepository = Depends(get_book_repository),
) -> list[Book]:
    """Books whose category matches exactly. An empty result is a 404."""
    books = repo.find_by_filter("category", category)
    if not books:
        raise NotFoundError("No books found in this category")
    return books


@router.get("/after-2015", response_model=list[Book], include_in_schema=False)
def list_books_after_2015(repo: BookRepository = Depends(get_book_repository)) -> list[Book]:
    """Fixed-year listing kept for older clients; ignores the configured threshold."""
    return repo.find_published_after(2015)


@router.get("/after-threshold", response_model=list[Book])
def list_books_after_threshold(
    year: int | None = Query(default=None, ge=0, description="Exclusive lower bound"),
    repo: BookRepository = Depends(get_book_repository),
    settings: CatalogConfig = Depends(get_settings),
) -> list[Book]:
    """Books published strictly after ``year`` (configured default: 2015)."""
    threshold = settings.published_after_threshold if year is None else year
    return repo.find_published_after(threshold)


@router.get("/{book_id}", response_model=Book)
def get_book(book_id: str, repo: BookRepository = Depends(get_book_repository)) -> Book:
    return repo.find_by_id(book_id)


@router.patch("/{book_id}/copies", response_model=Book)
def adjust_copies(
    book_id: str,
    payload: Any = Body(default=None),
    repo: BookRepository = Depends(get_book_repository),
) -> Book:
    """Add ``change`` (signed) to the available copies; never below zero."""
    adjustment = parse_body(CopiesAdjustment, payload, "Change must be an integer")
    return repo.adjust_copies(book_id, adjustment.change)


@router.patch("/{book_id}/category", response_model=Book)
def change_category(
    book_id: str,
    payload: Any = Body(default=None),
    repo: BookRepository = Depends(get_book_repository),
) -> Book:
    change = parse_body(CategoryChange, payload, "Valid category required")
    return repo.update_by_id(book_id, {"category": change.category})


@router.delete("/{book_id}", response_model=MessageResponse)
def delete_book(
    book_id: str,
    repo: BookRepository = Depends(get_book_repository),
) -> MessageResponse:
    """Delete a book that has no available copies left."""
    repo.delete_if_unavailable(book_id)
    return MessageResponse(message="Book deleted")
