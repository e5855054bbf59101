"""Book repository tests against an in-memory SQLite database."""

import pytest
from sqlmodel import Session

from src.bookstore.core.errors import StorageError
from src.bookstore.entities.service.book import Book, BookRepository


class TestBookRepository:
    """CRUD behaviour with a migrated schema."""

    def test_create_assigns_new_id(self, book_repository: BookRepository, book_data):
        first = book_repository.create(book_data)
        second = book_repository.create(book_data)

        assert isinstance(first, Book)
        assert first.id is not None
        assert second.id != first.id
        assert first.model_dump(exclude={"id"}) == book_data

    def test_get_returns_stored_book(self, book_repository: BookRepository, book_data):
        created = book_repository.create(book_data)
        assert book_repository.get(created.id) == created

    def test_get_missing_returns_none(self, book_repository: BookRepository):
        assert book_repository.get(9999) is None

    def test_update_changes_only_supplied_fields(
        self, book_repository: BookRepository, book_data
    ):
        created = book_repository.create(book_data)

        updated = book_repository.update(created.id, {"title": "Updated Title"})

        assert updated is not None
        assert updated.title == "Updated Title"
        assert updated.author == book_data["author"]
        assert updated.genre == book_data["genre"]
        assert updated.price == book_data["price"]
        assert book_repository.get(created.id) == updated

    def test_update_with_no_fields_rereads(
        self, book_repository: BookRepository, book_data
    ):
        created = book_repository.create(book_data)
        assert book_repository.update(created.id, {}) == created

    def test_update_missing_returns_none(self, book_repository: BookRepository):
        assert book_repository.update(9999, {"title": "Nope"}) is None

    def test_delete_removes_book(self, book_repository: BookRepository, book_data):
        created = book_repository.create(book_data)

        book_repository.delete(created.id)

        assert book_repository.get(created.id) is None

    def test_delete_missing_is_noop(self, book_repository: BookRepository, book_data):
        created = book_repository.create(book_data)

        book_repository.delete(9999)

        assert book_repository.list_all() == [created]

    def test_find_by_genre_is_exact_and_case_sensitive(
        self, book_repository: BookRepository, book_data
    ):
        fiction = book_repository.create({**book_data, "genre": "Fiction"})
        book_repository.create({**book_data, "genre": "fiction"})
        book_repository.create({**book_data, "genre": "Fiction Classics"})

        assert book_repository.find_by_genre("Fiction") == [fiction]
        assert book_repository.find_by_genre("Poetry") == []

    def test_list_all_returns_every_book(
        self, book_repository: BookRepository, book_data
    ):
        created = {
            book_repository.create({**book_data, "title": f"Book {i}"}) for i in range(3)
        }
        assert set(book_repository.list_all()) == created


class TestBookRepositoryFailures:
    """Store failures surface as StorageError with the original cause."""

    @pytest.fixture
    def broken_repository(self, bare_engine) -> BookRepository:
        # no migrations applied, so the books table does not exist
        return BookRepository(Session(bare_engine))

    def test_create_raises_storage_error(self, broken_repository, book_data):
        with pytest.raises(StorageError) as exc_info:
            broken_repository.create(book_data)

        assert exc_info.value.operation == "creating the book"
        assert exc_info.value.cause is not None
        assert "Database error while creating the book" in str(exc_info.value)

    @pytest.mark.parametrize(
        "call",
        [
            lambda repo: repo.get(1),
            lambda repo: repo.update(1, {"title": "x"}),
            lambda repo: repo.delete(1),
            lambda repo: repo.find_by_genre("Fiction"),
            lambda repo: repo.list_all(),
        ],
    )
    def test_every_operation_wraps_failures(self, broken_repository, call):
        with pytest.raises(StorageError):
            call(broken_repository)
