"""HTTP-level tests for the /books endpoints."""

from unittest.mock import Mock

import pytest

from src.bookstore.api.http.app import _STATUS_BY_KIND, app
from src.bookstore.api.http.deps import get_book_service
from src.bookstore.core.errors import ErrorKind

pytestmark = pytest.mark.integration


def _create(client, **overrides) -> dict:
    payload = {
        "title": "Test Book",
        "author": "Test Author",
        "genre": "Fiction",
        "price": 50,
    }
    payload.update(overrides)
    response = client.post("/books", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateBook:
    def test_create_returns_stored_book(self, client):
        response = client.post(
            "/books",
            json={"title": "Test Book", "author": "Test Author", "genre": "Fiction", "price": 50},
        )

        assert response.status_code == 201
        body = response.json()
        assert isinstance(body["id"], int)
        assert body["title"] == "Test Book"
        assert body["price"] == 50

    def test_negative_price_is_rejected_and_nothing_is_stored(self, client):
        response = client.post(
            "/books",
            json={"title": "Bad", "author": "Author", "genre": "Fiction", "price": -5},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert [error["field"] for error in body["errors"]] == ["price"]
        assert client.get("/books").json() == []

    def test_infinite_price_is_rejected_and_nothing_is_stored(self, client):
        body = '{"title": "T", "author": "A", "genre": "F", "price": Infinity}'

        response = client.post(
            "/books", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "price"
        assert client.get("/books").json() == []

    def test_boolean_price_is_rejected(self, client):
        response = client.post(
            "/books",
            json={"title": "T", "author": "A", "genre": "F", "price": True},
        )

        assert response.status_code == 400
        assert client.get("/books").json() == []

    def test_missing_fields_are_reported(self, client):
        response = client.post("/books", json={"title": "Only a title"})

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"author", "genre", "price"}

    def test_storage_failure_is_reported(self, unmigrated_client):
        response = unmigrated_client.post(
            "/books",
            json={"title": "Test Book", "author": "Test Author", "genre": "Fiction", "price": 50},
        )

        assert response.status_code == 500
        assert response.json() == {
            "message": "Failed to create the book",
            "error": "Database error while creating the book",
        }


class TestGetBook:
    def test_get_existing_book(self, client):
        created = _create(client)

        response = client.get(f"/books/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_missing_book(self, client):
        response = client.get("/books/9999")

        assert response.status_code == 404
        assert response.json() == {"message": "Book not found"}

    @pytest.mark.parametrize("book_id", ["abc", "0", "-3"])
    def test_invalid_id_is_rejected(self, client, book_id):
        response = client.get(f"/books/{book_id}")

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "book_id"

    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    def test_id_beyond_key_range_is_rejected(self, client, method):
        kwargs = {"json": {"title": "x"}} if method == "put" else {}

        response = getattr(client, method)("/books/99999999999999999999999", **kwargs)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "book_id"

    def test_largest_id_is_a_plain_miss(self, client):
        response = client.get(f"/books/{2**63 - 1}")

        assert response.status_code == 404

    def test_list_books(self, client):
        created = [_create(client, title=f"Book {i}") for i in range(3)]

        response = client.get("/books")

        assert response.status_code == 200
        assert sorted(response.json(), key=lambda b: b["id"]) == created


class TestUpdateBook:
    def test_partial_update_keeps_other_fields(self, client):
        created = _create(client)

        response = client.put(f"/books/{created['id']}", json={"title": "Updated Title"})

        assert response.status_code == 200
        assert response.json() == {**created, "title": "Updated Title"}
        assert client.get(f"/books/{created['id']}").json()["title"] == "Updated Title"

    def test_update_missing_book(self, client):
        response = client.put("/books/9999", json={"title": "Nope"})

        assert response.status_code == 404
        assert response.json() == {"message": "Book not found"}

    def test_update_with_invalid_price(self, client):
        created = _create(client)

        response = client.put(f"/books/{created['id']}", json={"price": 0})

        assert response.status_code == 400
        assert client.get(f"/books/{created['id']}").json()["price"] == 50


class TestDeleteBook:
    def test_delete_returns_removed_book(self, client):
        created = _create(client)

        response = client.delete(f"/books/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Book deleted successfully", "book": created}
        assert client.get(f"/books/{created['id']}").status_code == 404

    def test_delete_missing_book(self, client):
        response = client.delete("/books/9999")

        assert response.status_code == 404


class TestDiscountedPrice:
    def test_total_for_genre(self, client):
        _create(client, price=50)
        _create(client, price=75)
        _create(client, genre="Poetry", price=1000)

        response = client.get("/books/discounted-price", params={"genre": "Fiction", "discount": 10})

        assert response.status_code == 200
        assert response.json() == {
            "genre": "Fiction",
            "discount_percentage": 10,
            "total_discount_price": 112.5,
        }

    def test_genre_without_books(self, client):
        response = client.get("/books/discounted-price", params={"genre": "Fiction", "discount": 10})

        assert response.status_code == 200
        assert response.json()["total_discount_price"] == 0

    def test_total_too_large_to_represent(self, client):
        _create(client, price=1e308)
        _create(client, price=1e308)

        response = client.get(
            "/books/discounted-price", params={"genre": "Fiction", "discount": 10}
        )

        assert response.status_code == 422
        assert response.json() == {
            "message": "Total discounted price is too large to represent"
        }

    @pytest.mark.parametrize(
        "params",
        [
            {"genre": "Fiction", "discount": 150},
            {"genre": "Fiction", "discount": 0},
            {"genre": "Fiction", "discount": "ten"},
            {"genre": "Fiction"},
            {"discount": 10},
        ],
    )
    def test_invalid_query_is_rejected(self, client, params):
        response = client.get("/books/discounted-price", params=params)

        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"


class TestErrorHandling:
    def test_unknown_route(self, client):
        response = client.get("/nowhere")

        assert response.status_code == 404
        assert response.json() == {"message": "Resource not found"}

    def test_unexpected_error_becomes_500(self, client):
        service = Mock()
        service.get_all_books.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_book_service] = lambda: service

        response = client.get("/books")

        assert response.status_code == 500
        assert response.json() == {"message": "Internal Server Error", "error": "boom"}

    def test_request_id_is_echoed(self, client):
        response = client.get("/books", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_is_generated(self, client):
        assert client.get("/books").headers.get("X-Request-ID")


def test_every_error_kind_has_a_status():
    assert set(_STATUS_BY_KIND) == set(ErrorKind)
    assert "NOT_FOUND" not in ErrorKind.__members__
