"""
Port interfaces (protocols) for the domain layer.

Ports define the contracts between the domain and infrastructure layers.
They are implemented by adapters in the infrastructure layer, allowing
the domain to remain independent of technical details.

Following Hexagonal Architecture principles, the domain layer depends only
on these abstract protocols, never on concrete implementations.
"""

from typing import List, Optional, Protocol, Sequence, Tuple

from .entities import Book, Checkout


class BookStore(Protocol):
    """
    Port for persisting and retrieving books.

    One document per book: id, title, author, synopsis and the checkout
    history. Implementations must apply a history update atomically for a
    single book, so two requests racing on the same book cannot both win.

    Implementations should raise StoreError (wrapping the driver exception)
    for any failure of the backend itself.
    """

    def add_book(self, book: Book) -> Book:
        """
        Persist a new book and assign its ID.

        Args:
            book: The book to store; its id is ignored

        Returns:
            A copy of the book carrying the store-assigned id

        Raises:
            StoreError: If the backend fails
        """
        ...

    def get_book(self, book_id: str) -> Optional[Book]:
        """
        Retrieve a book by its ID.

        Args:
            book_id: The store-assigned identifier

        Returns:
            The Book if found, None otherwise

        Raises:
            StoreError: If the backend fails
        """
        ...

    def get_books(self, offset: int, limit: int) -> Tuple[List[Book], int]:
        """
        Retrieve a window of books in creation order.

        Args:
            offset: Number of books to skip
            limit: Maximum number of books to return

        Returns:
            The books in the window and the total number of books stored

        Raises:
            StoreError: If the backend fails
        """
        ...

    def update_history(self, book: Book, expected_history: Sequence[Checkout]) -> None:
        """
        Replace the stored history of a book, if nobody changed it meanwhile.

        The write only happens when the stored history still equals
        expected_history (compare-and-swap on the document).

        Args:
            book: The book carrying the new history
            expected_history: The history the caller read before mutating

        Raises:
            LibraryError: BOOK_MODIFIED when the stored history differs,
                BOOK_NOT_FOUND when the book no longer exists
            StoreError: If the backend fails
        """
        ...

    def is_ready(self) -> bool:
        """
        Check that the backend can serve requests.

        Used by the health endpoint.

        Returns:
            True if the store is reachable, False otherwise
        """
        ...
