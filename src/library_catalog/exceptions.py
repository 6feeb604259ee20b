"""Exception taxonomy shared by the store and the HTTP layer.

Each class maps onto a single HTTP status in ``library_catalog.api.errors``.
"""


class RepositoryException(Exception):
    """Base exception for catalog operations."""

    status_code = 500


class ValidationError(RepositoryException):
    """Raised when input shape or field values are invalid."""

    status_code = 400


class NotFoundError(RepositoryException):
    """Raised when an id is unknown or a filter matches nothing."""

    status_code = 404


class StoreError(RepositoryException):
    """Raised when the underlying persistence layer fails."""

    status_code = 500
