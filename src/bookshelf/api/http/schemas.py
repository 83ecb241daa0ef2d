"""Response schemas for the books API."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.bookshelf.entities.book import Book, BookFacets, BookPage


class MessageResponse(BaseModel):
    message: str


class PaginatedBooks(BaseModel):
    """One page of filter results with pagination metadata."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int
    results: list[Book]

    @classmethod
    def from_page(cls, page: BookPage) -> "PaginatedBooks":
        return cls(
            page=page.window.page,
            limit=page.window.limit,
            total=page.total,
            total_pages=page.total_pages,
            results=page.results,
        )


class Facet(BaseModel):
    name: str | int = Field(description="Distinct field value")
    count: int = Field(description="Number of books with this value")


class SidebarFacets(BaseModel):
    """Facet values used to populate the filter sidebar."""

    authors: list[Facet]
    genres: list[Facet]
    years: list[Facet]

    @classmethod
    def from_facets(cls, facets: BookFacets) -> "SidebarFacets":
        return cls(
            authors=[Facet(name=f.name, count=f.count) for f in facets.authors],
            genres=[Facet(name=f.name, count=f.count) for f in facets.genres],
            years=[Facet(name=f.name, count=f.count) for f in facets.years],
        )


class ErrorResponse(BaseModel):
    status: int
    message: str
    details: list[dict[str, str]] | None = None
    stack: str | None = None
