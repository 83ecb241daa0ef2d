"""Book database table model."""

from sqlmodel import Field

from src.bookshelf.entities._base import EntityTable


class BookTable(EntityTable, table=True):
    """Database persistence model for books.

    This represents how the Book entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    __tablename__ = "books"

    title: str = Field(nullable=False)
    author: str = Field(nullable=False, index=True)
    genre: str = Field(nullable=False, index=True)
    published_year: int = Field(nullable=False, index=True)
