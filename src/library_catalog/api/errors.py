"""
Error mapping for the HTTP layer.

Every failure leaves the service as ``{"error": "<message>"}`` with the
status code owned by the exception class:

- ``ValidationError`` and malformed requests -> 400
- ``NotFoundError`` -> 404
- ``StoreError`` and anything unexpected -> 500
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..exceptions import RepositoryException

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def describe_request_errors(errors: list[dict[str, Any]]) -> str:
    """Render FastAPI's request errors as one readable line."""
    parts = []
    for error in errors:
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "Invalid request: " + "; ".join(parts)


async def handle_repository_exception(request: Request, exc: RepositoryException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    else:
        logger.info("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc)
    return error_response(exc.status_code, str(exc))


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = describe_request_errors(list(exc.errors()))
    logger.info("%s %s -> 400: %s", request.method, request.url.path, message)
    return error_response(400, message)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # noqa: ARG001
    return error_response(exc.status_code, str(exc.detail))


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    """Install the ``{error}`` handlers on ``app``."""
    app.add_exception_handler(RepositoryException, handle_repository_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)
