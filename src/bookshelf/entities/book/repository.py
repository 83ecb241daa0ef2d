"""Data access layer for books."""

import uuid
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from loguru import logger
from pydantic import ValidationError
from sqlalchemy import ColumnElement, and_, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from src.bookshelf.core.errors import (
    BookValidationError,
    InvalidIdentifierError,
    StorageError,
    field_errors,
)
from src.bookshelf.entities._base import utcnow
from src.bookshelf.entities.book.entity import Book, BookCreate, BookFields
from src.bookshelf.entities.book.query import (
    BookFacets,
    BookFilter,
    BookPage,
    FacetCount,
    PageWindow,
    SortOption,
)
from src.bookshelf.entities.book.table import BookTable


def check_book_id(book_id: str) -> str:
    """Return the stored form of ``book_id``.

    Any spelling ``uuid.UUID`` accepts (upper case, no dashes, braces) maps to
    the lower-case dashed form the table holds.
    """
    try:
        return str(uuid.UUID(book_id))
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdentifierError("id", book_id) from None


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.bind(operation=operation, error_type=type(exc).__name__).error(
            "Storage operation failed"
        )
        raise StorageError(f"Storage operation '{operation}' failed: {exc}") from exc


class BookRepository:
    """Data-access layer for books.

    Writes are flushed but not committed; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @staticmethod
    def _to_entity(row: BookTable) -> Book:
        return Book.model_validate(row, from_attributes=True)

    def _get_row(self, book_id: str) -> BookTable | None:
        with _storage_errors("get"):
            return self._session.get(BookTable, check_book_id(book_id))

    def list_all(self) -> list[Book]:
        with _storage_errors("list"):
            rows = self._session.exec(select(BookTable)).all()
        return [self._to_entity(row) for row in rows]

    def get(self, book_id: str) -> Book | None:
        row = self._get_row(book_id)
        if row is None:
            return None
        return self._to_entity(row)

    def create(self, data: BookCreate) -> Book:
        return self.create_many([data])[0]

    def create_many(self, items: Sequence[BookCreate]) -> list[Book]:
        """Insert every item or none of them."""
        rows = [BookTable(**item.model_dump()) for item in items]
        with _storage_errors("insert"):
            self._session.add_all(rows)
            self._session.flush()
        logger.debug("Inserted {} book(s)", len(rows))
        return [self._to_entity(row) for row in rows]

    def update(self, book_id: str, changes: dict[str, Any]) -> Book | None:
        """Merge ``changes`` into the stored record and re-validate the result."""
        row = self._get_row(book_id)
        if row is None:
            return None

        current = {name: getattr(row, name) for name in BookFields.model_fields}
        try:
            merged = BookFields.model_validate({**current, **changes})
        except ValidationError as exc:
            raise BookValidationError(field_errors(exc.errors())) from exc

        for name, value in merged.model_dump().items():
            setattr(row, name, value)
        row.updated_at = utcnow()

        with _storage_errors("update"):
            self._session.add(row)
            self._session.flush()
        return self._to_entity(row)

    def delete(self, book_id: str) -> bool:
        row = self._get_row(book_id)
        if row is None:
            return False
        with _storage_errors("delete"):
            self._session.delete(row)
            self._session.flush()
        return True

    def search(self, text: str) -> list[Book]:
        """Books whose title, author or genre contains ``text``, ignoring case."""
        condition = or_(
            col(BookTable.title).icontains(text, autoescape=True),
            col(BookTable.author).icontains(text, autoescape=True),
            col(BookTable.genre).icontains(text, autoescape=True),
        )
        with _storage_errors("search"):
            rows = self._session.exec(select(BookTable).where(condition)).all()
        return [self._to_entity(row) for row in rows]

    @staticmethod
    def _filter_condition(criteria: BookFilter) -> ColumnElement[bool]:
        clauses: list[ColumnElement[bool]] = []
        if criteria.author is not None:
            clauses.append(
                col(BookTable.author).icontains(criteria.author, autoescape=True)
            )
        if criteria.genre is not None:
            clauses.append(col(BookTable.genre) == criteria.genre)
        if criteria.year is not None:
            clauses.append(col(BookTable.published_year) == criteria.year)
        return and_(*clauses)

    def count(self, criteria: BookFilter | None = None) -> int:
        statement = select(func.count()).select_from(BookTable)
        if criteria is not None and not criteria.is_empty:
            statement = statement.where(self._filter_condition(criteria))
        with _storage_errors("count"):
            return self._session.exec(statement).one()

    def filter(
        self,
        criteria: BookFilter,
        window: PageWindow,
        sort: SortOption | None = None,
    ) -> BookPage:
        statement = select(BookTable).where(self._filter_condition(criteria))
        if sort is not None:
            column = col(getattr(BookTable, sort.field))
            statement = statement.order_by(
                column.desc() if sort.descending else column.asc()
            )
        statement = statement.offset(window.offset).limit(window.limit)

        with _storage_errors("filter"):
            rows = self._session.exec(statement).all()
        total = self.count(criteria)
        return BookPage(
            window=window,
            total=total,
            results=[self._to_entity(row) for row in rows],
        )

    def _facet(self, attribute: str, descending: bool = False) -> list[FacetCount]:
        column = col(getattr(BookTable, attribute))
        statement = (
            select(column, func.count())
            .group_by(column)
            .order_by(column.desc() if descending else column.asc())
        )
        with _storage_errors(f"facet:{attribute}"):
            rows = self._session.exec(statement).all()
        return [FacetCount(name=value, count=count) for value, count in rows]

    def facets(self) -> BookFacets:
        """Distinct authors, genres and years with their record counts."""
        return BookFacets(
            authors=self._facet("author"),
            genres=self._facet("genre"),
            years=self._facet("published_year", descending=True),
        )
