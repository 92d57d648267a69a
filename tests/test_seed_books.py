"""
Tests for the book seeding script.
"""

import json

import pytest

from app.infrastructure.db.sqlite_book_store import SqliteBookStore
from scripts.seed_books import load_books, main


def test_placeholder_book_without_file():
    books = load_books(None)

    assert len(books) == 1
    assert books[0].title == "default book"
    assert books[0].author == "default author"


def test_load_books_rejects_non_list(tmp_path):
    path = tmp_path / "books.json"
    path.write_text(json.dumps({"title": "Dune"}), encoding="utf-8")

    with pytest.raises(ValueError, match="JSON list"):
        load_books(path)


def test_main_seeds_valid_books_and_skips_invalid(tmp_path):
    path = tmp_path / "books.json"
    path.write_text(
        json.dumps([
            {"title": "Dune", "author": "Frank Herbert", "synopsis": "Spice."},
            {"title": "No author"},
            {"title": "Girl, Woman, Other", "author": "Bernardine Evaristo"},
        ]),
        encoding="utf-8",
    )
    db_path = tmp_path / "bookStore.db"

    added = main(db_path, "books", path)

    assert added == 2
    items, total = SqliteBookStore(db_path).get_books(0, 10)
    assert total == 2
    assert [b.title for b in items] == ["Dune", "Girl, Woman, Other"]
    assert items[0].synopsis == "Spice."
