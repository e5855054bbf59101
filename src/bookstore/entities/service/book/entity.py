"""Entity: Book."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.bookstore.entities._base import Entity


def _reject_boolean(value: Any) -> Any:
    # JSON true/false would otherwise coerce to 1.0 / 0.0
    if isinstance(value, bool):
        raise ValueError("must be a number, not a boolean")
    return value


class Book(Entity):
    """Book entity representing a book record.

    This is the read model returned by the repository and the API.
    """

    title: str = Field(description="Title")
    author: str = Field(description="Author")
    genre: str = Field(description="Genre")
    price: float = Field(description="Price")

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes."""
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.title == other.title
            and self.author == other.author
            and self.genre == other.genre
            and self.price == other.price
        )

    def __hash__(self) -> int:
        return hash((
            self.id,
            self.title,
            self.author,
            self.genre,
            self.price,
        ))


class BookCreate(BaseModel):
    """Payload for creating a book; every field is required."""

    title: str = Field(min_length=1, description="Title")
    author: str = Field(min_length=1, description="Author")
    genre: str = Field(min_length=1, description="Genre")
    price: float = Field(gt=0, allow_inf_nan=False, description="Price")

    @field_validator("price", mode="before")
    @classmethod
    def reject_boolean_price(cls, value: Any) -> Any:
        return _reject_boolean(value)


class BookUpdate(BaseModel):
    """Partial update payload; only the supplied fields change."""

    title: str | None = Field(default=None, min_length=1, description="Title")
    author: str | None = Field(default=None, min_length=1, description="Author")
    genre: str | None = Field(default=None, min_length=1, description="Genre")
    price: float | None = Field(
        default=None, gt=0, allow_inf_nan=False, description="Price"
    )

    @field_validator("price", mode="before")
    @classmethod
    def reject_boolean_price(cls, value: Any) -> Any:
        return _reject_boolean(value)

    @field_validator("title", "author", "genre", "price", mode="before")
    @classmethod
    def reject_explicit_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("cannot be null if provided")
        return value

    def changes(self) -> dict[str, Any]:
        """Return only the fields the client supplied."""
        return self.model_dump(exclude_unset=True)
