"""
Value objects for the domain layer.

Value objects are immutable objects that represent descriptive aspects
of the domain with no conceptual identity.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from .entities import Book, Checkout


@dataclass(frozen=True)
class PageRequest:
    """
    A window over the catalogue, as supplied by the HTTP paginator.

    The paginator has already validated the bounds; a negative value here is
    a programming error, not a client error.
    """

    offset: int = 0
    """Number of books to skip"""

    limit: int = 20
    """Maximum number of books to return"""

    def __post_init__(self) -> None:
        """Validate pagination bounds."""
        if self.offset < 0:
            raise ValueError(f"offset cannot be negative, got {self.offset}")

        if self.limit < 0:
            raise ValueError(f"limit cannot be negative, got {self.limit}")


@dataclass(frozen=True)
class BookPage:
    """
    One page of books plus the size of the whole catalogue.

    total_count does not depend on the page size, so clients can compare
    how many items they got against how many exist.
    """

    items: List[Book] = field(default_factory=list)
    """Books in this page, in store order"""

    total_count: int = 0
    """Number of books in the whole catalogue"""

    offset: int = 0
    """Offset the page was requested with"""

    limit: int = 20
    """Limit the page was requested with"""

    def __post_init__(self) -> None:
        """Validate page constraints."""
        if self.total_count < 0:
            raise ValueError(f"total_count cannot be negative, got {self.total_count}")

    @property
    def count(self) -> int:
        """Number of books actually returned."""
        return len(self.items)


@dataclass(frozen=True)
class Review:
    """
    Read-only view of a finished checkout.

    Reviews are not stored on their own: each closed history entry of a book
    is one review, identified by its 1-based position in the history.
    """

    id: str
    """Position of the checkout in the book history (1-based)"""

    book_id: str
    """ID of the reviewed book"""

    who: str
    """Who borrowed and reviewed the book"""

    review: int
    """Score from 1 to 5"""

    checked_out_at: datetime
    """When the borrowing started"""

    checked_in_at: datetime
    """When the book was returned"""

    @staticmethod
    def from_checkout(book_id: str, position: int, checkout: Checkout) -> "Review":
        """
        Build a review from a closed history entry.

        Args:
            book_id: ID of the book owning the entry
            position: 1-based index of the entry in the history
            checkout: A closed checkout

        Raises:
            ValueError: If the checkout is still open
        """
        if checkout.is_open or checkout.checked_in_at is None or checkout.review is None:
            raise ValueError("an open checkout has no review yet")

        return Review(
            id=str(position),
            book_id=book_id,
            who=checkout.who,
            review=checkout.review,
            checked_out_at=checkout.checked_out_at,
            checked_in_at=checkout.checked_in_at,
        )
