"""Error taxonomy surfaced by handlers and rendered by the HTTP error translator."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


class BookshelfError(Exception):
    """Base class for failures that carry their own HTTP status."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None, *, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class BadRequestError(BookshelfError):
    """A required request parameter is missing or unusable."""

    status_code = 400
    default_message = "Bad Request"


class BookValidationError(BadRequestError):
    """A record failed validation against the required-field schema."""

    default_message = "Validation failed"

    def __init__(self, details: list[dict[str, Any]], message: str | None = None):
        super().__init__(message)
        self.details = details


class InvalidIdentifierError(BadRequestError):
    """An identifier does not have the expected shape."""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}: {value}.")


class NotFoundError(BookshelfError):
    """The addressed record does not exist."""

    status_code = 404
    default_message = "Not Found"


class StorageError(BookshelfError):
    """The storage backend is unavailable or failed unexpectedly."""

    status_code = 500
    default_message = "Storage error"


def field_errors(errors: Sequence[Mapping[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic error dicts into ``{field, message}`` pairs.

    The ``body``/``query``/``path`` prefix FastAPI adds is dropped. List
    indexes of a batch payload are kept, e.g. ``1.title``.
    """
    details = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        details.append(
            {
                "field": ".".join(loc) or "body",
                "message": str(error.get("msg", "Invalid value")),
            }
        )
    return details
