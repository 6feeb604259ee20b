"""
Application factory for the Library Catalog service.

``create_app()`` wires configuration, the database manager, the books
router, the ``{error}`` handlers and the static browser page into one
FastAPI application::

    from library_catalog.app import create_app

    app = create_app()  # ready for uvicorn
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from .api import books_router, register_error_handlers
from .api.dependencies import get_database, get_settings
from .config import CatalogConfig, get_config
from .database.session import DatabaseManager, prepare_database_url

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

API_BASE_PLACEHOLDER = "__API_BASE__"
AFTER_YEAR_PLACEHOLDER = "__AFTER_YEAR__"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    db_manager: DatabaseManager = app.state.db_manager
    db_manager.init_database()
    logger.info("%s v%s ready", app.title, app.version)
    try:
        yield
    finally:
        db_manager.close()


def create_app(
    config: CatalogConfig | None = None,
    db_manager: DatabaseManager | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Settings to use; defaults to the global configuration
        db_manager: Database to use; defaults to one built from ``config``
    """
    config = config or get_config()
    if db_manager is None:
        db_manager = DatabaseManager(prepare_database_url(config))

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        debug=config.debug,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.db_manager = db_manager

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(books_router, prefix=config.api_prefix)

    @app.get("/health")
    def health(database: DatabaseManager = Depends(get_database)) -> dict[str, object]:
        return {"status": "ok", "database": database.verify_connection()}

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    def index(settings: CatalogConfig = Depends(get_settings)) -> str:
        page = (STATIC_DIR / "index.html").read_text(encoding="utf-8")
        return page.replace(API_BASE_PLACEHOLDER, f"{settings.api_prefix}/books").replace(
            AFTER_YEAR_PLACEHOLDER, str(settings.published_after_threshold)
        )

    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    return app
