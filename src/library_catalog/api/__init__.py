"""
HTTP layer for the Library Catalog.

Routers here handle only transport concerns: request parsing, response
serialization and error mapping. Domain rules live in the store.
"""

from .books import router as books_router
from .errors import register_error_handlers

__all__ = ["books_router", "register_error_handlers"]
