"""Immutable query values for listing books.

Each value is built once from typed request parameters and then handed to
the repository unchanged.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.bookshelf.core.errors import BadRequestError

# Wire name -> attribute name for the sortable columns.
SORTABLE_FIELDS: dict[str, str] = {
    "title": "title",
    "author": "author",
    "genre": "genre",
    "publishedYear": "published_year",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


@dataclass(frozen=True)
class BookFilter:
    """Structured filter criteria, combined with AND.

    ``author`` is a case-insensitive substring, ``genre`` and ``year`` are
    exact matches.
    """

    author: str | None = None
    genre: str | None = None
    year: int | None = None

    @classmethod
    def from_params(
        cls,
        author: str | None = None,
        genre: str | None = None,
        year: int | None = None,
    ) -> BookFilter:
        author = author.strip() if author else None
        genre = genre.strip() if genre else None
        criteria = cls(author=author or None, genre=genre or None, year=year)
        if criteria.is_empty:
            raise BadRequestError(
                "At least one filter parameter (author, genre, year) is required"
            )
        return criteria

    @property
    def is_empty(self) -> bool:
        return self.author is None and self.genre is None and self.year is None


@dataclass(frozen=True)
class SortOption:
    """A sort column and direction parsed from ``field`` or ``-field``."""

    field: str
    descending: bool = False

    @classmethod
    def parse(cls, raw: str | None) -> SortOption | None:
        """Parse a sort expression; ``None`` means storage default order."""
        if raw is None or not raw.strip():
            return None

        raw = raw.strip()
        descending = raw.startswith("-")
        name = raw[1:] if descending else raw

        if name in SORTABLE_FIELDS:
            return cls(field=SORTABLE_FIELDS[name], descending=descending)
        if name in SORTABLE_FIELDS.values():
            return cls(field=name, descending=descending)

        allowed = ", ".join(SORTABLE_FIELDS)
        raise BadRequestError(f"Cannot sort by '{name}'. Allowed fields: {allowed}")


@dataclass(frozen=True)
class PageWindow:
    """1-indexed page of ``limit`` results."""

    page: int = 1
    limit: int = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise BadRequestError("page must be greater than or equal to 1")
        if self.limit < 1:
            raise BadRequestError("limit must be greater than or equal to 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)


@dataclass(frozen=True)
class BookPage:
    """One page of filter results together with the unpaged match count."""

    window: PageWindow
    total: int
    results: list

    @property
    def total_pages(self) -> int:
        return self.window.total_pages(self.total)


@dataclass(frozen=True)
class FacetCount:
    """A distinct field value and the number of books sharing it."""

    name: str | int
    count: int


@dataclass(frozen=True)
class BookFacets:
    authors: list[FacetCount]
    genres: list[FacetCount]
    years: list[FacetCount]
