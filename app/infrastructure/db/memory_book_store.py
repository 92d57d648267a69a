"""
In-memory implementation of the BookStore port.

Useful for tests and for running the API without a database file. Each
instance owns its own books; nothing is shared at module level.
"""

from threading import Lock
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import uuid4

from app.domain.entities import Book, Checkout
from app.domain.errors import ErrorKind, LibraryError
from app.domain.ports import BookStore


class InMemoryBookStore(BookStore):
    """Books kept in an insertion-ordered dict guarded by a lock."""

    def __init__(self) -> None:
        self._books: Dict[str, Book] = {}
        self._lock = Lock()

    def add_book(self, book: Book) -> Book:
        created = book.copy()
        created.id = str(uuid4())
        with self._lock:
            self._books[created.id] = created.copy()
        return created

    def get_book(self, book_id: str) -> Optional[Book]:
        with self._lock:
            book = self._books.get(book_id)
            return book.copy() if book is not None else None

    def get_books(self, offset: int, limit: int) -> Tuple[List[Book], int]:
        with self._lock:
            books = list(self._books.values())
        return [b.copy() for b in books[offset:offset + limit]], len(books)

    def update_history(self, book: Book, expected_history: Sequence[Checkout]) -> None:
        with self._lock:
            stored = self._books.get(book.id)
            if stored is None:
                raise LibraryError(ErrorKind.BOOK_NOT_FOUND)
            if stored.history != list(expected_history):
                raise LibraryError(ErrorKind.BOOK_MODIFIED)
            stored.history = list(book.history)

    def count(self) -> int:
        with self._lock:
            return len(self._books)

    def is_ready(self) -> bool:
        return True
