"""Book API router with CRUD, search, filter and facet operations.

Literal paths (``/search``, ``/filter``, ``/sidebar``) are registered before
``/{book_id}`` so they are never captured as an identifier.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, status
from loguru import logger
from pydantic import TypeAdapter, ValidationError
from sqlmodel import Session

from src.bookshelf.api.http.deps import get_db_session
from src.bookshelf.api.http.schemas import (
    ErrorResponse,
    MessageResponse,
    PaginatedBooks,
    SidebarFacets,
)
from src.bookshelf.core.errors import (
    BadRequestError,
    BookValidationError,
    NotFoundError,
    field_errors,
)
from src.bookshelf.entities.book import (
    Book,
    BookCreate,
    BookFilter,
    BookRepository,
    BookUpdate,
    PageWindow,
    SortOption,
)
from src.bookshelf.runtime.context import get_config

BOOK_NOT_FOUND = "Book not found"

_book_batch = TypeAdapter(list[BookCreate])

router = APIRouter(
    prefix="/api/books",
    tags=["books"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.get("", response_model=list[Book])
def list_books(
    session: Session = Depends(get_db_session),
) -> list[Book]:
    """List all books."""
    repository = BookRepository(session)
    return repository.list_all()


@router.get("/search", response_model=list[Book])
def search_books(
    query: str | None = Query(
        default=None, description="Text matched against title, author and genre"
    ),
    session: Session = Depends(get_db_session),
) -> list[Book]:
    """Case-insensitive substring search over title, author and genre."""
    if query is None or not query.strip():
        raise BadRequestError("Query parameter 'query' is required")

    repository = BookRepository(session)
    return repository.search(query.strip())


@router.get("/filter", response_model=PaginatedBooks)
def filter_books(
    author: str | None = Query(default=None, description="Author contains (any case)"),
    genre: str | None = Query(default=None, description="Exact genre"),
    year: int | None = Query(default=None, description="Exact published year"),
    page: int = Query(default=1, description="Page number (1-indexed)"),
    limit: int | None = Query(default=None, description="Page size"),
    sort: str | None = Query(
        default=None, description="Sort field, prefix with '-' for descending"
    ),
    session: Session = Depends(get_db_session),
) -> PaginatedBooks:
    """Filter books by author, genre and/or year with paging and sorting."""
    pagination = get_config().pagination
    if limit is None:
        limit = pagination.default_limit
    # Oversized pages are clamped; the response reports the applied limit
    limit = min(limit, pagination.max_limit)

    criteria = BookFilter.from_params(author=author, genre=genre, year=year)
    window = PageWindow(page=page, limit=limit)
    sort_option = SortOption.parse(sort)

    repository = BookRepository(session)
    result = repository.filter(criteria, window, sort_option)
    return PaginatedBooks.from_page(result)


@router.get("/sidebar", response_model=SidebarFacets)
def sidebar_facets(
    session: Session = Depends(get_db_session),
) -> SidebarFacets:
    """Distinct authors, genres and years with counts."""
    repository = BookRepository(session)
    return SidebarFacets.from_facets(repository.facets())


@router.get("/{book_id}", response_model=Book)
def get_book(
    book_id: str,
    session: Session = Depends(get_db_session),
) -> Book:
    """Get a book by ID."""
    repository = BookRepository(session)
    book = repository.get(book_id)
    if book is None:
        raise NotFoundError(BOOK_NOT_FOUND)
    return book


@router.post(
    "",
    response_model=Book | list[Book],
    status_code=status.HTTP_201_CREATED,
)
def create_books(
    payload: Annotated[dict[str, Any] | list[dict[str, Any]], Body()],
    session: Session = Depends(get_db_session),
) -> Book | list[Book]:
    """Create one book, or several when the body is an array."""
    try:
        if isinstance(payload, list):
            items = _book_batch.validate_python(payload)
        else:
            items = [BookCreate.model_validate(payload)]
    except ValidationError as exc:
        raise BookValidationError(field_errors(exc.errors())) from exc

    if not items:
        raise BadRequestError("At least one book is required")

    repository = BookRepository(session)
    created = repository.create_many(items)
    session.commit()
    logger.info("Created {} book(s)", len(created))

    if isinstance(payload, list):
        return created
    return created[0]


@router.put("/{book_id}", response_model=Book)
def update_book(
    book_id: str,
    book_update: BookUpdate,
    session: Session = Depends(get_db_session),
) -> Book:
    """Merge the supplied fields into a book and return the result."""
    repository = BookRepository(session)
    updated_book = repository.update(book_id, book_update.changes())
    if updated_book is None:
        raise NotFoundError(BOOK_NOT_FOUND)
    session.commit()
    return updated_book


@router.delete("/{book_id}", response_model=MessageResponse)
def delete_book(
    book_id: str,
    session: Session = Depends(get_db_session),
) -> MessageResponse:
    """Delete a book."""
    repository = BookRepository(session)
    deleted = repository.delete(book_id)
    if not deleted:
        raise NotFoundError(BOOK_NOT_FOUND)
    session.commit()
    return MessageResponse(message="Book deleted successfully")
