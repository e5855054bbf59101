import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from loguru import logger

from src.bookstore.core.errors import ErrorKind, ServiceError, StorageError
from src.bookstore.core.models.results import Failure, Found, NotFound, Result
from src.bookstore.entities.service.book import Book, BookRepository

_CENTS = Decimal("0.01")


class BookService:
    """Book use cases on top of ``BookRepository``.

    Lookups (get, update, delete) return ``Found``, ``NotFound`` or ``Failure``.
    The remaining operations return plain values and raise ``ServiceError``.
    """

    def __init__(self, book_repository: BookRepository):
        self._book_repo = book_repository

    def create_book(self, fields: dict[str, Any]) -> Book:
        try:
            return self._book_repo.create(fields)
        except StorageError as e:
            logger.error("BookService.create_book failed: {}", e)
            raise ServiceError(ErrorKind.STORAGE, "Failed to create the book", e) from e

    def get_book_by_id(self, book_id: int) -> Result[Book]:
        try:
            book = self._book_repo.get(book_id)
        except StorageError as e:
            logger.error("BookService.get_book_by_id (ID: {}) failed: {}", book_id, e)
            return Failure(ServiceError(ErrorKind.STORAGE, "Failed to fetch the book", e))
        if book is None:
            return NotFound(book_id)
        return Found(book)

    def update_book(self, book_id: int, fields: dict[str, Any]) -> Result[Book]:
        try:
            book = self._book_repo.update(book_id, fields)
        except StorageError as e:
            logger.error("BookService.update_book (ID: {}) failed: {}", book_id, e)
            return Failure(ServiceError(ErrorKind.STORAGE, "Failed to update the book", e))
        if book is None:
            return NotFound(book_id)
        return Found(book)

    def delete_book(self, book_id: int) -> Result[Book]:
        """Delete a book, returning the record as it was before deletion."""
        try:
            book = self._book_repo.get(book_id)
            if book is None:
                return NotFound(book_id)
            self._book_repo.delete(book_id)
        except StorageError as e:
            logger.error("BookService.delete_book (ID: {}) failed: {}", book_id, e)
            return Failure(ServiceError(ErrorKind.STORAGE, "Failed to delete the book", e))
        return Found(book)

    def get_books_by_genre(self, genre: str) -> list[Book]:
        try:
            return self._book_repo.find_by_genre(genre)
        except StorageError as e:
            logger.error("BookService.get_books_by_genre (Genre: {}) failed: {}", genre, e)
            raise ServiceError(
                ErrorKind.STORAGE, "Failed to fetch books by genre", e
            ) from e

    def get_all_books(self) -> list[Book]:
        try:
            return self._book_repo.list_all()
        except StorageError as e:
            logger.error("BookService.get_all_books failed: {}", e)
            raise ServiceError(ErrorKind.STORAGE, "Failed to fetch all books", e) from e

    def get_total_discounted_price_by_genre(
        self, genre: str, discount_percent: float
    ) -> float:
        """Sum the prices of a genre and apply a percentage discount.

        The result is rounded half-up to two decimal places and is ``0`` when no
        book matches. ``discount_percent`` must lie in ``[0, 100)``.
        """
        if not 0 <= discount_percent < 100:
            raise ServiceError(
                ErrorKind.INVALID_INPUT,
                "Discount must be at least 0 and less than 100",
            )

        try:
            books = self._book_repo.find_by_genre(genre)
        except StorageError as e:
            logger.error(
                "BookService.get_total_discounted_price_by_genre (Genre: {}) failed: {}",
                genre,
                e,
            )
            raise ServiceError(
                ErrorKind.STORAGE, "Failed to calculate total discounted price", e
            ) from e

        prices = [Decimal(str(book.price)) for book in books]
        if not all(price.is_finite() for price in prices):
            logger.error("Non-finite price stored for genre {}", genre)
            raise ServiceError(
                ErrorKind.OUT_OF_RANGE, "Stored book prices must be finite numbers"
            )

        # enough digits for the integer part of the sum plus the cents
        magnitude = max((price.adjusted() for price in prices), default=0)
        with localcontext() as ctx:
            ctx.prec = max(28, magnitude + len(str(len(prices))) + 30)
            total = sum(prices, Decimal(0))
            factor = 1 - Decimal(str(discount_percent)) / 100
            discounted = (total * factor).quantize(_CENTS, rounding=ROUND_HALF_UP)

        result = float(discounted)
        if math.isinf(result):
            raise ServiceError(
                ErrorKind.OUT_OF_RANGE,
                "Total discounted price is too large to represent",
            )
        return result
