"""Book repository: data access for the books table."""

from typing import Any

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.bookstore.core.errors import StorageError
from src.bookstore.entities.service.book.entity import Book
from src.bookstore.entities.service.book.table import BookTable


class BookRepository:
    """Data-access layer for books.

    Every method is one unit of work against the books table and commits it.
    Store failures are rolled back and surfaced as ``StorageError``.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _fail(self, operation: str, exc: SQLAlchemyError) -> StorageError:
        logger.opt(exception=exc).error("Database error while {}", operation)
        self._session.rollback()
        return StorageError(operation, exc)

    def create(self, fields: dict[str, Any]) -> Book:
        row = BookTable(**fields)
        try:
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        except SQLAlchemyError as e:
            raise self._fail("creating the book", e) from e
        return Book.model_validate(row, from_attributes=True)

    def get(self, book_id: int) -> Book | None:
        try:
            row = self._session.get(BookTable, book_id)
        except SQLAlchemyError as e:
            raise self._fail(f"fetching the book by ID {book_id}", e) from e
        if row is None:
            return None
        return Book.model_validate(row, from_attributes=True)

    def update(self, book_id: int, fields: dict[str, Any]) -> Book | None:
        """Apply the supplied fields, then re-read the current record."""
        try:
            row = self._session.get(BookTable, book_id)
            if row is None:
                return None
            if fields:
                for name, value in fields.items():
                    setattr(row, name, value)
                self._session.add(row)
                self._session.commit()
                self._session.refresh(row)
        except SQLAlchemyError as e:
            raise self._fail(f"updating the book with ID {book_id}", e) from e
        return Book.model_validate(row, from_attributes=True)

    def delete(self, book_id: int) -> None:
        try:
            row = self._session.get(BookTable, book_id)
            if row is None:
                return
            self._session.delete(row)
            self._session.commit()
        except SQLAlchemyError as e:
            raise self._fail(f"deleting the book with ID {book_id}", e) from e

    def find_by_genre(self, genre: str) -> list[Book]:
        statement = select(BookTable).where(BookTable.genre == genre)
        try:
            rows = self._session.exec(statement).all()
        except SQLAlchemyError as e:
            raise self._fail(f"fetching books by genre {genre}", e) from e
        return [Book.model_validate(row, from_attributes=True) for row in rows]

    def list_all(self) -> list[Book]:
        try:
            rows = self._session.exec(select(BookTable)).all()
        except SQLAlchemyError as e:
            raise self._fail("fetching all books", e) from e
        return [Book.model_validate(row, from_attributes=True) for row in rows]
