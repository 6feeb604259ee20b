"""
Library Catalog Package.

A small REST service for a library's book catalog, with a browser page
that calls it.

Key Components:
- models: Pydantic models and the shared validation rules
- database: SQLAlchemy schema, sessions and the book store
- api: FastAPI routes, dependencies and error mapping
- config: Configuration management with Pydantic v2
- cli: ``library-catalog`` command (serve, init-db, seed)
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
