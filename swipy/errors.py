from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class SwipyError(Exception):
    """Base class for errors surfaced to API callers as ``{"error": ...}``."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SwipyError):
    """Malformed request body or query parameter."""

    status_code = 400


class NotFoundError(SwipyError):
    """Targeted lookup found no record."""

    status_code = 404


class StoreError(SwipyError):
    """Query or persistence failure in the document store."""

    status_code = 400


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _handle_swipy_error(request: Request, exc: SwipyError) -> JSONResponse:
    if isinstance(exc, StoreError):
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc.message)
    return _error_response(exc.status_code, exc.message)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail))


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "")
    else:
        message = "Invalid request"
    return _error_response(400, message)


def register_error_handlers(app: FastAPI) -> None:
    """Report every API failure with the same ``{"error": <message>}`` body."""
    app.add_exception_handler(SwipyError, _handle_swipy_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
