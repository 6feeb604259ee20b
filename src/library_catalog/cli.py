"""
Command-line entry point for the Library Catalog.

Usage:
    library-catalog serve [--host HOST] [--port PORT] [--reload]
    library-catalog init-db [--drop-existing] [--database-url URL]
    library-catalog seed [--sample-count N] [--random-seed S] [--database-url URL]
"""

import argparse
import logging
import sys

import uvicorn

from .config import CatalogConfig, get_config
from .database.book_repository import BookRepository
from .database.session import DatabaseManager, prepare_database_url
from .exceptions import RepositoryException
from .sample_data import SAMPLE_BOOKS, generate_books

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _database(args: argparse.Namespace, config: CatalogConfig) -> DatabaseManager:
    return DatabaseManager(args.database_url or prepare_database_url(config))


def cmd_serve(args: argparse.Namespace, config: CatalogConfig) -> int:
    host = args.host or config.http_host
    port = args.port or config.http_port
    logger.info("Serving %s on http://%s:%d", config.app_name, host, port)
    uvicorn.run(
        "library_catalog.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload,
        log_level=config.log_level.lower(),
    )
    return 0


def cmd_init_db(args: argparse.Namespace, config: CatalogConfig) -> int:
    db_manager = _database(args, config)
    try:
        if not db_manager.verify_connection():
            logger.error("Failed to connect to database")
            return 1
        db_manager.init_database(drop_existing=args.drop_existing)
    finally:
        db_manager.close()
    return 0


def cmd_seed(args: argparse.Namespace, config: CatalogConfig) -> int:
    records = [*SAMPLE_BOOKS, *generate_books(args.sample_count, seed=args.random_seed)]

    db_manager = _database(args, config)
    try:
        db_manager.init_database()
        with db_manager.session_scope() as session:
            inserted = BookRepository(session).insert_many(records)
    except RepositoryException as e:
        logger.error("Seeding failed: %s", e)
        return 1
    finally:
        db_manager.close()

    logger.info("%d books added", len(inserted))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="library-catalog",
        description="Library catalog REST service",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured logging level",
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    serve = subcommands.add_parser("serve", help="Run the HTTP server")
    serve.add_argument("--host", help="Bind address")
    serve.add_argument("--port", type=int, help="Bind port")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve.set_defaults(func=cmd_serve)

    init_db = subcommands.add_parser("init-db", help="Create the database tables")
    init_db.add_argument(
        "--drop-existing",
        action="store_true",
        help="Drop existing tables before creating new ones",
    )
    init_db.add_argument("--database-url", help="Override default database URL")
    init_db.set_defaults(func=cmd_init_db)

    seed = subcommands.add_parser("seed", help="Load the sample books")
    seed.add_argument(
        "--sample-count",
        type=int,
        default=0,
        help="Additional random books to generate",
    )
    seed.add_argument("--random-seed", type=int, help="Seed for reproducible random books")
    seed.add_argument("--database-url", help="Override default database URL")
    seed.set_defaults(func=cmd_seed)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()
    configure_logging(args.log_level or config.log_level)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
