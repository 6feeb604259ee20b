"""Tests for the command-line entry point and sample data."""

import pytest
from sqlalchemy import inspect

from library_catalog import cli
from library_catalog.config import reset_config
from library_catalog.database.book_repository import BookRepository
from library_catalog.database.session import DatabaseManager
from library_catalog.models.book import validate_book
from library_catalog.sample_data import SAMPLE_BOOKS, generate_books


@pytest.fixture(autouse=True)
def fresh_config():
    reset_config()
    yield
    reset_config()


def stored_books(database_url):
    manager = DatabaseManager(database_url)
    try:
        with manager.session_scope() as session:
            return BookRepository(session).find_all()
    finally:
        manager.close()


class TestInitDb:
    def test_creates_tables(self, test_database_url):
        assert cli.main(["init-db", "--database-url", test_database_url]) == 0

        manager = DatabaseManager(test_database_url)
        try:
            assert "books" in inspect(manager.engine).get_table_names()
        finally:
            manager.close()

    def test_drop_existing_clears_rows(self, test_database_url):
        cli.main(["seed", "--database-url", test_database_url])

        assert cli.main(["init-db", "--drop-existing", "--database-url", test_database_url]) == 0
        assert stored_books(test_database_url) == []


class TestSeed:
    def test_seeds_sample_books(self, test_database_url):
        assert cli.main(["seed", "--database-url", test_database_url]) == 0

        books = stored_books(test_database_url)
        assert {book.title for book in books} == {book["title"] for book in SAMPLE_BOOKS}

    def test_seeds_generated_books(self, test_database_url):
        exit_code = cli.main(
            [
                "seed",
                "--database-url",
                test_database_url,
                "--sample-count",
                "3",
                "--random-seed",
                "1",
            ]
        )

        assert exit_code == 0
        assert len(stored_books(test_database_url)) == 10

    def test_invalid_sample_data_fails_cleanly(self, test_database_url, monkeypatch):
        bad = dict(SAMPLE_BOOKS[0], availableCopies=-1)
        monkeypatch.setattr(cli, "SAMPLE_BOOKS", [SAMPLE_BOOKS[1], bad])

        assert cli.main(["seed", "--database-url", test_database_url]) == 1
        assert stored_books(test_database_url) == []


class TestServe:
    def test_runs_uvicorn_factory(self, monkeypatch):
        calls = []
        monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

        assert cli.main(["serve", "--port", "8123"]) == 0

        app, kwargs = calls[0]
        assert app == "library_catalog.app:create_app"
        assert kwargs["factory"] is True
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 8123
        assert kwargs["reload"] is False


class TestParser:
    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_rejects_unknown_log_level(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["--log-level", "LOUD", "init-db"])


class TestGenerateBooks:
    def test_same_seed_same_books(self):
        assert generate_books(5, seed=42) == generate_books(5, seed=42)

    def test_generated_books_are_valid(self):
        books = generate_books(20, seed=7)

        assert len(books) == 20
        for book in books:
            validate_book(book)

    def test_zero_count(self):
        assert generate_books(0) == []

    def test_sample_books_are_valid(self):
        assert len(SAMPLE_BOOKS) == 7
        for book in SAMPLE_BOOKS:
            validate_book(book)
