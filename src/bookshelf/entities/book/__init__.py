"""Entity package: Book."""

from .entity import Book, BookCreate, BookFields, BookUpdate
from .query import BookFacets, BookFilter, BookPage, FacetCount, PageWindow, SortOption
from .repository import BookRepository, check_book_id
from .table import BookTable

__all__ = [
    "Book",
    "BookCreate",
    "BookFacets",
    "BookFields",
    "BookFilter",
    "BookPage",
    "BookRepository",
    "BookTable",
    "BookUpdate",
    "FacetCount",
    "PageWindow",
    "SortOption",
    "check_book_id",
]
