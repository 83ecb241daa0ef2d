"""Translate failures into the JSON error envelope.

Every failure response has the shape ``{status, message}`` plus ``details``
for validation failures, or ``stack`` for unexpected errors outside
production.
"""

from __future__ import annotations

import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from src.bookshelf.core.errors import (
    BookshelfError,
    BookValidationError,
    StorageError,
    field_errors,
)
from src.bookshelf.runtime.context import get_config


def error_body(status: int, message: str, **extra: Any) -> dict[str, Any]:
    return {"status": status, "message": message, **extra}


def _stack(exc: BaseException) -> dict[str, str]:
    if get_config().app.environment == "production":
        return {}
    return {"stack": "".join(traceback.format_exception(exc))}


def classify_error(exc: BaseException) -> tuple[int, dict[str, Any]]:
    """Return the status code and JSON body for ``exc``."""
    if isinstance(exc, BookValidationError):
        return 400, error_body(400, exc.message, details=exc.details)

    if isinstance(exc, RequestValidationError | PydanticValidationError):
        return 400, error_body(
            400, BookValidationError.default_message, details=field_errors(exc.errors())
        )

    if isinstance(exc, StorageError):
        return exc.status_code, error_body(exc.status_code, exc.message, **_stack(exc))

    if isinstance(exc, BookshelfError):
        return exc.status_code, error_body(exc.status_code, exc.message)

    if isinstance(exc, StarletteHTTPException):
        return exc.status_code, error_body(exc.status_code, str(exc.detail))

    if isinstance(exc, SQLAlchemyError):
        return 500, error_body(500, str(exc) or StorageError.default_message, **_stack(exc))

    status = getattr(exc, "status_code", None) or getattr(exc, "status", None)
    if not isinstance(status, int) or not 400 <= status <= 599:
        status = 500
    message = str(exc) or "Internal Server Error"
    return status, error_body(status, message, **_stack(exc))


def translate_error(exc: BaseException, headers: dict[str, str] | None = None) -> JSONResponse:
    status, body = classify_error(exc)
    if status >= 500:
        logger.opt(exception=exc).bind(
            status_code=status, error_type=type(exc).__name__
        ).error("request.error")
    else:
        logger.bind(status_code=status, error_type=type(exc).__name__).warning(
            "request.rejected: {}", body["message"]
        )

    if isinstance(exc, StarletteHTTPException) and exc.headers:
        headers = {**exc.headers, **(headers or {})}
    return JSONResponse(status_code=status, content=body, headers=headers)


async def _handle(request: Request, exc: Exception) -> JSONResponse:
    return translate_error(exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Route every known failure type through ``translate_error``.

    Anything not listed here is caught by the request middleware, which calls
    ``translate_error`` itself.
    """
    for exc_type in (
        BookshelfError,
        RequestValidationError,
        PydanticValidationError,
        StarletteHTTPException,
        SQLAlchemyError,
    ):
        app.add_exception_handler(exc_type, _handle)
