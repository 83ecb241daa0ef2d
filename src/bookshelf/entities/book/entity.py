"""Entity: Book."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from src.bookshelf.entities._base import Entity

NonEmptyText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class BookFields(BaseModel):
    """The caller-supplied fields every stored book must carry."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    title: NonEmptyText = Field(description="Title")
    author: NonEmptyText = Field(description="Author")
    genre: NonEmptyText = Field(description="Genre")
    published_year: int = Field(description="Year of first publication")


class BookCreate(BookFields):
    """Request body for creating a book.

    Server-assigned attributes (``id``, ``createdAt``, ``updatedAt``) are
    dropped if a client sends them.
    """


class BookUpdate(BaseModel):
    """Partial request body for updating a book.

    Only the fields present in the payload are merged into the stored record;
    the merged result is validated again as a whole.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    title: Any = None
    author: Any = None
    genre: Any = None
    published_year: Any = None

    def changes(self) -> dict[str, Any]:
        """Fields explicitly present in the payload, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class Book(Entity, BookFields):
    """Book entity representing a stored book record."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes, ignoring timestamps."""
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.title == other.title
            and self.author == other.author
            and self.genre == other.genre
            and self.published_year == other.published_year
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.title,
            self.author,
            self.genre,
            self.published_year,
        ))
