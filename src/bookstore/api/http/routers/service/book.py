"""Book API router with CRUD operations."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from pydantic import BaseModel

from src.bookstore.api.http.deps import get_book_service
from src.bookstore.core.models.results import Found, NotFound, Result
from src.bookstore.core.services import BookService
from src.bookstore.entities.service.book import Book, BookCreate, BookUpdate

router = APIRouter()

# largest value an INTEGER primary key can hold
MAX_BOOK_ID = 2**63 - 1


class DiscountedPrice(BaseModel):
    genre: str
    discount_percentage: float
    total_discount_price: float


class BookDeleted(BaseModel):
    message: str
    book: Book


def _unwrap(result: Result[Book]) -> Book:
    if isinstance(result, Found):
        return result.value
    if isinstance(result, NotFound):
        raise HTTPException(status_code=404, detail="Book not found")
    raise result.error


@router.post("", response_model=Book, status_code=201)
def create_book(
    book: BookCreate,
    service: BookService = Depends(get_book_service),
) -> Book:
    """Create a new book."""
    return service.create_book(book.model_dump())


# Registered before /{book_id} so the literal path wins.
@router.get("/discounted-price", response_model=DiscountedPrice)
def get_total_discounted_price_by_genre(
    genre: str = Query(min_length=1),
    discount: float = Query(gt=0, lt=100),
    service: BookService = Depends(get_book_service),
) -> DiscountedPrice:
    """Total price of a genre after applying a percentage discount."""
    total = service.get_total_discounted_price_by_genre(genre, discount)
    return DiscountedPrice(
        genre=genre,
        discount_percentage=discount,
        total_discount_price=total,
    )


@router.get("", response_model=list[Book])
def list_books(
    service: BookService = Depends(get_book_service),
) -> list[Book]:
    """List all books."""
    return service.get_all_books()


@router.get("/{book_id}", response_model=Book)
def get_book(
    book_id: int = Path(gt=0, le=MAX_BOOK_ID),
    service: BookService = Depends(get_book_service),
) -> Book:
    """Get a book by ID."""
    return _unwrap(service.get_book_by_id(book_id))


@router.put("/{book_id}", response_model=Book)
def update_book(
    book_update: BookUpdate,
    book_id: int = Path(gt=0, le=MAX_BOOK_ID),
    service: BookService = Depends(get_book_service),
) -> Book:
    """Update the supplied fields of a book."""
    return _unwrap(service.update_book(book_id, book_update.changes()))


@router.delete("/{book_id}", response_model=BookDeleted)
def delete_book(
    book_id: int = Path(gt=0, le=MAX_BOOK_ID),
    service: BookService = Depends(get_book_service),
) -> BookDeleted:
    """Delete a book."""
    deleted = _unwrap(service.delete_book(book_id))
    return BookDeleted(message="Book deleted successfully", book=deleted)
