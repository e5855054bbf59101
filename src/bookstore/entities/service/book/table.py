"""Book database table model."""

from sqlmodel import Field

from src.bookstore.entities._base import EntityTable


class BookTable(EntityTable, table=True):
    """Database persistence model for books.

    The schema itself is owned by the versioned migrations in
    ``core.services.database.migrations``; this model only maps it.
    """

    __tablename__ = "books"

    title: str
    author: str
    genre: str = Field(index=True)
    price: float
