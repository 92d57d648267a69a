"""
Domain services for the books service.

Services orchestrate domain logic that doesn't naturally belong to a single
entity. They coordinate between entities and ports to implement use cases.

Following Hexagonal Architecture principles, services depend only on domain
entities, value objects, and port protocols (never on concrete implementations).
"""

from datetime import datetime, UTC
from typing import Callable, List, Optional
import logging

from .entities import Book
from .errors import ErrorKind, LibraryError
from .ports import BookStore
from .value_objects import BookPage, PageRequest, Review

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


class LibraryService:
    """
    Use cases over the book catalogue.

    Every mutating use case loads the book, runs the lifecycle rule on the
    loaded value and writes the new history back with a compare-and-swap,
    so a rejected operation never reaches the store.

    Usage:
        service = LibraryService(store=SqliteBookStore(Path("data/bookStore.db")))
        book = service.add_book(Book(title="Dune", author="Frank Herbert"))
        service.checkout_book(book.id, "Alice")
    """

    def __init__(
        self,
        store: BookStore,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize the service with its store.

        Args:
            store: Persistence port for books
            clock: Source of timestamps for checkouts (defaults to UTC now)
        """
        self._store = store
        self._clock = clock or utc_now

    def is_ready(self) -> bool:
        """Whether the underlying store can serve requests."""
        return self._store.is_ready()

    def add_book(self, book: Book) -> Book:
        """
        Validate and store a new book.

        Any id or history supplied by the caller is discarded: ids belong to
        the store and a new book has never been lent.

        Raises:
            LibraryError: REQUIRED_FIELD_MISSING
            StoreError: If the store fails
        """
        book.validate()

        new_book = Book(title=book.title, author=book.author, synopsis=book.synopsis or "")
        created = self._store.add_book(new_book)
        logger.info(f"Added book id={created.id} title={created.title!r}")
        return created

    def get_book(self, book_id: str) -> Book:
        """
        Look a book up by ID.

        Raises:
            LibraryError: EMPTY_BOOK_ID (before touching the store) or BOOK_NOT_FOUND
            StoreError: If the store fails
        """
        if not book_id or not book_id.strip():
            raise LibraryError(ErrorKind.EMPTY_BOOK_ID)

        book = self._store.get_book(book_id)
        if book is None:
            raise LibraryError(ErrorKind.BOOK_NOT_FOUND)
        return book

    def list_books(self, offset: int = 0, limit: int = 20) -> BookPage:
        """
        Return one page of the catalogue.

        The bounds are trusted (the HTTP paginator checked them); slicing is
        left to the store and its errors propagate unchanged.
        """
        page = PageRequest(offset=offset, limit=limit)
        items, total_count = self._store.get_books(page.offset, page.limit)
        return BookPage(
            items=items,
            total_count=total_count,
            offset=page.offset,
            limit=page.limit,
        )

    def checkout_book(self, book_id: str, who: str) -> Book:
        """
        Lend a book to someone and persist the new history.

        Raises:
            LibraryError: EMPTY_BOOK_ID, BOOK_NOT_FOUND, BOOK_ALREADY_CHECKED_OUT,
                NAME_MISSING or BOOK_MODIFIED
            StoreError: If the store fails
        """
        book = self.get_book(book_id)
        expected = list(book.history)

        book.checkout(who, self._clock())
        self._store.update_history(book, expected)

        logger.info(f"Checked out book id={book.id} to {who!r}")
        return book

    def checkin_book(self, book_id: str, review: int) -> Book:
        """
        Return a book with a review and persist the closed entry.

        Raises:
            LibraryError: EMPTY_BOOK_ID, BOOK_NOT_FOUND, BOOK_NOT_CHECKED_OUT,
                REVIEW_MISSING or BOOK_MODIFIED
            StoreError: If the store fails
        """
        book = self.get_book(book_id)
        expected = list(book.history)

        book.checkin(review, self._clock())
        self._store.update_history(book, expected)

        logger.info(f"Checked in book id={book.id} with review={review}")
        return book

    def list_reviews(self, book_id: str) -> List[Review]:
        """All reviews of a book, one per finished checkout, oldest first."""
        book = self.get_book(book_id)
        return [
            Review.from_checkout(book.id, position, entry)
            for position, entry in enumerate(book.history, start=1)
            if not entry.is_open
        ]

    def get_review(self, book_id: str, review_id: str) -> Review:
        """
        Look a single review up.

        Raises:
            LibraryError: EMPTY_BOOK_ID, BOOK_NOT_FOUND, EMPTY_REVIEW_ID or
                REVIEW_NOT_FOUND
        """
        reviews = self.list_reviews(book_id)

        if not review_id or not review_id.strip():
            raise LibraryError(ErrorKind.EMPTY_REVIEW_ID)

        for review in reviews:
            if review.id == review_id.strip():
                return review

        raise LibraryError(ErrorKind.REVIEW_NOT_FOUND)
