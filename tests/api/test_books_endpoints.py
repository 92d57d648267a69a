"""
Tests for the books API endpoints.

The app is built with an in-memory store per test, so requests go through
routing, body parsing, pagination and error mapping for real.
"""

import logging

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.domain.errors import StoreError
from app.infrastructure.db.memory_book_store import InMemoryBookStore
from app.infrastructure.db.sqlite_book_store import SqliteBookStore
from app.main import create_app
from app.api.v1.errors import INTERNAL_SERVER_ERROR_MESSAGE

API_URL = "http://books.test"

GIRL_WOMAN_OTHER = {"title": "Girl, Woman, Other", "author": "Bernardine Evaristo"}


class FailingBookStore(InMemoryBookStore):
    """Store whose reads fail like a lost database connection."""

    def get_book(self, book_id):
        raise StoreError("unexpected error when getting a book: connection refused")

    def get_books(self, offset, limit):
        raise StoreError("unexpected error when getting books: connection refused")

    def is_ready(self):
        return False


@pytest.fixture
def settings():
    return Settings(book_store="memory", api_url=API_URL, default_limit=20, max_limit=50)


@pytest.fixture
def store():
    return InMemoryBookStore()


@pytest.fixture
def client(settings, store):
    app = create_app(settings=settings, store=store)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def failing_client(settings):
    app = create_app(settings=settings, store=FailingBookStore())
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


def add_book(client, body=None) -> dict:
    response = client.post("/books", json=body or GIRL_WOMAN_OTHER)
    assert response.status_code == 201
    return response.json()


# =============================================================================
# POST /books
# =============================================================================


class TestAddBook:

    def test_valid_book(self, client, store):
        response = client.post("/books", json=GIRL_WOMAN_OTHER)

        assert response.status_code == 201
        body = response.json()
        assert body["id"]
        assert body["title"] == "Girl, Woman, Other"
        assert body["history"] == []
        assert body["links"] == {
            "self": f"{API_URL}/books/{body['id']}",
            "reservations": f"{API_URL}/books/{body['id']}/reservations",
            "reviews": f"{API_URL}/books/{body['id']}/reviews",
        }
        assert store.count() == 1

    def test_no_request_body(self, client, store):
        response = client.post("/books", content=b"")

        assert response.status_code == 400
        assert response.json()["kind"] == "empty_request_body"
        assert response.json()["detail"] == "empty request body"
        assert store.count() == 0

    def test_empty_object(self, client, store):
        response = client.post("/books", json={})

        assert response.status_code == 400
        assert response.json()["kind"] == "required_field_missing"
        assert store.count() == 0

    def test_missing_author(self, client):
        response = client.post("/books", json={"title": "Dune"})

        assert response.status_code == 400
        assert response.json()["kind"] == "required_field_missing"

    def test_malformed_json(self, client):
        response = client.post(
            "/books",
            content=b'{"title": "Dune",',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "unable_to_parse_json"

    def test_json_that_is_not_an_object(self, client):
        response = client.post("/books", json=["Dune", "Herbert"])

        assert response.status_code == 400
        assert response.json()["kind"] == "unable_to_parse_json"

    def test_wrong_field_type(self, client):
        response = client.post("/books", json={"title": 42, "author": "Herbert"})

        assert response.status_code == 400
        assert response.json()["kind"] == "unable_to_parse_json"

    def test_client_id_and_history_ignored(self, client):
        body = dict(GIRL_WOMAN_OTHER, id="chosen", history=[{"who": "x"}])

        created = add_book(client, body)

        assert created["id"] != "chosen"
        assert created["history"] == []


# =============================================================================
# GET /books
# =============================================================================


class TestListBooks:

    def test_empty_catalogue(self, client):
        response = client.get("/books")

        assert response.status_code == 200
        assert response.json() == {
            "count": 0,
            "offset": 0,
            "limit": 20,
            "total_count": 0,
            "items": [],
        }

    def test_two_books_with_larger_limit(self, client):
        add_book(client)
        add_book(client, {"title": "Dune", "author": "Herbert"})

        response = client.get("/books", params={"offset": 0, "limit": 20})

        body = response.json()
        assert response.status_code == 200
        assert body["total_count"] == 2
        assert body["count"] == 2
        assert [b["title"] for b in body["items"]] == ["Girl, Woman, Other", "Dune"]

    def test_page_window(self, client):
        for i in range(4):
            add_book(client, {"title": f"Book {i}", "author": "Author"})

        body = client.get("/books?offset=1&limit=2").json()

        assert body["total_count"] == 4
        assert body["count"] == 2
        assert [b["title"] for b in body["items"]] == ["Book 1", "Book 2"]

    @pytest.mark.parametrize(
        "query",
        ["offset=-1", "limit=-3", "offset=abc", "limit=1.5", "limit=51"],
    )
    def test_invalid_pagination(self, client, query):
        response = client.get(f"/books?{query}")

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_pagination"

    def test_non_integer_offset_is_reported(self, client):
        response = client.get("/books?offset=abc")

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_pagination"
        assert "offset" in response.json()["detail"]

    def test_limit_above_max_is_reported(self, client):
        response = client.get("/books?limit=51")

        assert response.json()["detail"] == "limit cannot be greater than 50, got 51"

    def test_rejection_is_logged_with_request_context(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="app.api.v1.errors"):
            client.get("/books?limit=-3")

        assert "GET /books" in caplog.text
        assert "status=400" in caplog.text
        assert "kind=invalid_pagination" in caplog.text

    @pytest.mark.parametrize("query", ["offset=99999999999999999999", "offset=9223372036854775808"])
    def test_offset_past_64_bit_range_on_sqlite(self, settings, tmp_path, query):
        app = create_app(settings=settings, store=SqliteBookStore(tmp_path / "bookStore.db"))
        with TestClient(app) as sqlite_client:
            add_book(sqlite_client)

            response = sqlite_client.get(f"/books?{query}")

        assert response.status_code == 200
        body = response.json()
        assert body["items"] == []
        assert body["count"] == 0
        assert body["total_count"] == 1

    def test_store_error(self, failing_client):
        response = failing_client.get("/books")

        assert response.status_code == 500
        assert response.json() == {
            "kind": "store_error",
            "detail": INTERNAL_SERVER_ERROR_MESSAGE,
        }


# =============================================================================
# GET /books/{id}
# =============================================================================


class TestGetBook:

    def test_existing_book(self, client):
        created = add_book(client)

        response = client.get(f"/books/{created['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    def test_empty_id(self, client):
        response = client.get("/books/")

        assert response.status_code == 400
        assert response.json()["kind"] == "empty_book_id"
        assert response.json()["detail"] == "empty book ID in request"

    def test_blank_id(self, client):
        response = client.get("/books/%20")

        assert response.status_code == 400
        assert response.json()["kind"] == "empty_book_id"

    def test_not_found(self, client):
        response = client.get("/books/3")

        assert response.status_code == 404
        assert response.json()["detail"] == "book not found"

    def test_store_error(self, failing_client):
        response = failing_client.get("/books/1")

        assert response.status_code == 500
        assert response.json()["detail"] == INTERNAL_SERVER_ERROR_MESSAGE


# =============================================================================
# Checkout / check-in
# =============================================================================


class TestCheckoutAndCheckin:

    def test_checkout(self, client):
        book_id = add_book(client)["id"]

        response = client.post(f"/books/{book_id}/checkout", json={"who": "Alice"})

        assert response.status_code == 201
        history = response.json()["history"]
        assert len(history) == 1
        assert history[0]["who"] == "Alice"
        assert history[0]["out"]
        assert history[0]["in"] is None
        assert history[0]["review"] is None

    def test_second_checkout_rejected(self, client):
        book_id = add_book(client)["id"]
        client.post(f"/books/{book_id}/checkout", json={"who": "Alice"})

        response = client.post(f"/books/{book_id}/checkout", json={"who": "Bob"})

        assert response.status_code == 400
        assert response.json()["kind"] == "book_already_checked_out"
        history = client.get(f"/books/{book_id}").json()["history"]
        assert [h["who"] for h in history] == ["Alice"]

    def test_checkout_without_name(self, client):
        book_id = add_book(client)["id"]

        response = client.post(f"/books/{book_id}/checkout", json={})

        assert response.status_code == 400
        assert response.json()["kind"] == "name_missing"

    def test_checkout_without_body(self, client):
        book_id = add_book(client)["id"]

        response = client.post(f"/books/{book_id}/checkout")

        assert response.status_code == 400
        assert response.json()["kind"] == "empty_request_body"

    def test_checkout_unknown_book(self, client):
        response = client.post("/books/nope/checkout", json={"who": "Alice"})

        assert response.status_code == 404

    def test_checkin(self, client):
        book_id = add_book(client)["id"]
        client.post(f"/books/{book_id}/checkout", json={"who": "Alice"})

        response = client.post(f"/books/{book_id}/checkin", json={"review": 4})

        assert response.status_code == 201
        entry = response.json()["history"][-1]
        assert entry["who"] == "Alice"
        assert entry["in"] is not None
        assert entry["review"] == 4

    def test_checkin_review_out_of_range(self, client):
        book_id = add_book(client)["id"]
        client.post(f"/books/{book_id}/checkout", json={"who": "Alice"})

        response = client.post(f"/books/{book_id}/checkin", json={"review": 6})

        assert response.status_code == 400
        assert response.json()["kind"] == "review_missing"
        entry = client.get(f"/books/{book_id}").json()["history"][-1]
        assert entry["in"] is None
        assert entry["review"] is None

    def test_checkin_review_as_string(self, client):
        book_id = add_book(client)["id"]
        client.post(f"/books/{book_id}/checkout", json={"who": "Alice"})

        response = client.post(f"/books/{book_id}/checkin", json={"review": "4"})

        assert response.status_code == 400
        assert response.json()["kind"] == "unable_to_parse_json"

    def test_checkin_not_checked_out(self, client):
        book_id = add_book(client)["id"]

        response = client.post(f"/books/{book_id}/checkin", json={"review": 3})

        assert response.status_code == 400
        assert response.json()["kind"] == "book_not_checked_out"

    def test_checkin_unknown_book(self, client):
        response = client.post("/books/nope/checkin", json={"review": 3})

        assert response.status_code == 404
        assert response.json()["kind"] == "book_not_found"


# =============================================================================
# Reviews
# =============================================================================


class TestReviews:

    def test_list_and_get_reviews(self, client):
        book_id = add_book(client)["id"]
        client.post(f"/books/{book_id}/checkout", json={"who": "Alice"})
        client.post(f"/books/{book_id}/checkin", json={"review": 5})
        client.post(f"/books/{book_id}/checkout", json={"who": "Bob"})

        listing = client.get(f"/books/{book_id}/reviews").json()

        assert listing["total_count"] == 1
        assert listing["items"][0]["who"] == "Alice"
        assert listing["items"][0]["review"] == 5

        review = client.get(f"/books/{book_id}/reviews/1")
        assert review.status_code == 200
        assert review.json()["book_id"] == book_id
        assert review.json()["in"] is not None

    def test_review_not_found(self, client):
        book_id = add_book(client)["id"]

        response = client.get(f"/books/{book_id}/reviews/7")

        assert response.status_code == 404
        assert response.json()["kind"] == "review_not_found"

    def test_empty_review_id(self, client):
        book_id = add_book(client)["id"]

        response = client.get(f"/books/{book_id}/reviews/")

        assert response.status_code == 400
        assert response.json()["kind"] == "empty_review_id"

    def test_reviews_of_unknown_book(self, client):
        response = client.get("/books/nope/reviews")

        assert response.status_code == 404


# =============================================================================
# Health
# =============================================================================


class TestHealth:

    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "components": {"book_store": True}}

    def test_store_unavailable(self, failing_client):
        response = failing_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"
