"""Test configuration and fixtures for the Library Catalog.

1. Isolated test databases - each test gets its own SQLite file
2. Configuration overrides - test-specific settings injected into the app
3. Resource cleanup - engines disposed, global config reset
"""

import copy
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from library_catalog.app import create_app
from library_catalog.config import CatalogConfig, reset_config
from library_catalog.database.book_repository import BookRepository
from library_catalog.database.session import DatabaseManager
from library_catalog.sample_data import SAMPLE_BOOKS

API = "/api/books"


# === Test Database Fixtures ===


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    """A database file path unique to each test."""
    return tmp_path / "test_catalog.db"


@pytest.fixture
def test_database_url(test_db_path: Path) -> str:
    return f"sqlite:///{test_db_path}"


@pytest.fixture
def db_manager(test_database_url: str) -> Generator[DatabaseManager, None, None]:
    """A database manager with the schema created."""
    manager = DatabaseManager(test_database_url)
    manager.init_database()
    yield manager
    manager.close()


@pytest.fixture
def test_db_session(db_manager: DatabaseManager) -> Generator[Session, None, None]:
    session = db_manager.create_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def book_repo(test_db_session: Session) -> BookRepository:
    return BookRepository(test_db_session)


# === Configuration Fixtures ===


@pytest.fixture
def test_config(test_db_path: Path) -> Generator[CatalogConfig, None, None]:
    """Test-specific settings; the global config is reset around each test."""
    reset_config()

    config = CatalogConfig(
        database_path=test_db_path,
        debug=True,
        log_level="DEBUG",
    )

    yield config

    reset_config()


# === HTTP Fixtures ===


@pytest.fixture
def make_client(
    tmp_path: Path,
) -> Generator[Callable[..., TestClient], None, None]:
    """Factory for clients over fresh apps with custom settings."""
    clients: list[TestClient] = []

    def factory(**overrides: Any) -> TestClient:
        db_path = tmp_path / f"catalog_{len(clients)}.db"
        config = CatalogConfig(database_path=db_path, **overrides)
        client = TestClient(create_app(config=config))
        client.__enter__()
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def app(test_config: CatalogConfig, db_manager: DatabaseManager) -> FastAPI:
    return create_app(config=test_config, db_manager=db_manager)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """A client whose context runs the app lifespan (schema creation)."""
    with TestClient(app) as test_client:
        yield test_client


# === Data Fixtures ===


@pytest.fixture
def sample_books() -> list[dict[str, Any]]:
    """The seven sample books, safe to mutate."""
    return copy.deepcopy(SAMPLE_BOOKS)


@pytest.fixture
def seeded_books(client: TestClient, sample_books: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Seed the sample set through the API and return the created records."""
    response = client.post(f"{API}/seed", json=sample_books)
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
def book_by_title(seeded_books: list[dict[str, Any]]) -> Callable[[str], dict[str, Any]]:
    def lookup(title: str) -> dict[str, Any]:
        return next(book for book in seeded_books if book["title"] == title)

    return lookup
