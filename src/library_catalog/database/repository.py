"""
Repository pattern implementation for the Library Catalog.

Repositories keep SQLAlchemy out of the HTTP handlers. Every method returns
Pydantic models (never ORM rows), reports a missing record with
``NotFoundError`` and wraps driver failures in ``StoreError`` through
``safe_query`` / ``safe_commit``.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..database.schema import Base
from ..database.session import safe_commit, safe_query
from ..exceptions import (
    NotFoundError,
    RepositoryException,
    StoreError,
    ValidationError,
)

ModelType = TypeVar("ModelType", bound=Base)
ResponseSchemaType = TypeVar("ResponseSchemaType", bound=BaseModel)

__all__ = [
    "BaseRepository",
    "NotFoundError",
    "RepositoryException",
    "StoreError",
    "ValidationError",
]


class BaseRepository(ABC, Generic[ModelType, ResponseSchemaType]):
    """
    Abstract base repository providing id-keyed reads and deletes.

    Subclasses name their ORM class and response schema; writes that carry
    domain rules live in the subclass.
    """

    def __init__(self, session: Session):
        """Initialize repository with database session."""
        self.session = session

    @property
    @abstractmethod
    def model_class(self) -> type[ModelType]:
        """Return the SQLAlchemy model class."""

    @property
    @abstractmethod
    def response_schema(self) -> type[ResponseSchemaType]:
        """Return the Pydantic response schema."""

    @property
    def entity_name(self) -> str:
        return self.model_class.__name__

    def _to_response_model(self, db_obj: ModelType) -> ResponseSchemaType:
        """Convert database model to Pydantic response model."""
        return self.response_schema.model_validate(db_obj.to_dict())

    def _get_row(self, id: str, for_update: bool = False) -> ModelType:
        """
        Load one row, bypassing any stale copy in the identity map.

        Raises:
            NotFoundError: If no row has this id
        """
        query = select(self.model_class).where(self.model_class.id == str(id))
        if for_update:
            query = query.with_for_update()
        query = query.execution_options(populate_existing=True)

        db_obj = safe_query(
            self.session,
            lambda s: s.execute(query).scalar_one_or_none(),
            f"Failed to get {self.entity_name} by ID",
        )
        if db_obj is None:
            raise NotFoundError(f"{self.entity_name} not found")
        return db_obj

    def find_by_id(self, id: str) -> ResponseSchemaType:
        """
        Get entity by ID.

        Raises:
            NotFoundError: If the entity does not exist
            StoreError: On database errors
        """
        return self._to_response_model(self._get_row(id))

    def exists(self, id: str) -> bool:
        """Check if entity exists by ID."""
        try:
            self._get_row(id)
        except NotFoundError:
            return False
        return True

    def delete_by_id(self, id: str) -> None:
        """
        Delete entity by ID, unconditionally.

        Raises:
            NotFoundError: If the entity does not exist
            StoreError: On database errors
        """
        db_obj = self._get_row(id)
        self.session.delete(db_obj)
        safe_commit(self.session, f"delete {self.entity_name}")
