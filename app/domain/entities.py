"""
Domain entities for the books service.

Entities are objects with a unique identity that runs through time and
different representations. A Book owns its checkout history, and the
checkout/check-in lifecycle is enforced here, on the entity itself.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional

from .errors import ErrorKind, LibraryError

MIN_REVIEW = 1
MAX_REVIEW = 5


@dataclass(frozen=True)
class Checkout:
    """
    A single lending of a book.

    An entry is "open" while checked_in_at is None; that is the only
    way to tell a book is currently out.
    """

    who: str
    """Name of the borrower"""

    checked_out_at: datetime
    """When the book was checked out"""

    checked_in_at: Optional[datetime] = None
    """When the book was returned, None while it is still out"""

    review: Optional[int] = None
    """Score from 1 to 5 given on return, None while the book is out"""

    @property
    def is_open(self) -> bool:
        return self.checked_in_at is None


@dataclass
class Book:
    """
    Represents a book in the catalogue.

    The id is assigned by the store when the book is first added and never
    changes afterwards. The history is append-only, except that checking a
    book in rewrites the last (open) entry.
    """

    title: str
    """Book title"""

    author: str
    """Author name"""

    synopsis: str = ""
    """Optional short summary"""

    id: Optional[str] = None
    """Store-assigned identifier, None until the book is persisted"""

    history: List[Checkout] = field(default_factory=list)
    """Checkouts of this book, oldest first"""

    def __eq__(self, other: object) -> bool:
        """Persisted books are equal when they share an ID."""
        if not isinstance(other, Book):
            return NotImplemented
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id) if self.id is not None else id(self)

    def validate(self) -> None:
        """
        Check the fields a book cannot be stored without.

        Raises:
            LibraryError: REQUIRED_FIELD_MISSING if title or author is empty
        """
        if not self.title or not self.title.strip():
            raise LibraryError(ErrorKind.REQUIRED_FIELD_MISSING)
        if not self.author or not self.author.strip():
            raise LibraryError(ErrorKind.REQUIRED_FIELD_MISSING)

    @property
    def last_checkout(self) -> Optional[Checkout]:
        return self.history[-1] if self.history else None

    def is_checked_out(self) -> bool:
        """True when the last history entry is still open."""
        last = self.last_checkout
        return last is not None and last.is_open

    def checkout(self, who: str, now: datetime) -> Checkout:
        """
        Lend the book to someone.

        The checked-out state is tested before the name, so a book that is
        already out reports BOOK_ALREADY_CHECKED_OUT even when the name is
        missing too.

        Args:
            who: Name of the borrower
            now: Checkout timestamp

        Returns:
            The new open history entry

        Raises:
            LibraryError: BOOK_ALREADY_CHECKED_OUT or NAME_MISSING
        """
        if self.is_checked_out():
            raise LibraryError(ErrorKind.BOOK_ALREADY_CHECKED_OUT)

        if not who or not who.strip():
            raise LibraryError(ErrorKind.NAME_MISSING)

        entry = Checkout(who=who, checked_out_at=now)
        self.history.append(entry)
        return entry

    def checkin(self, review: int, now: datetime) -> Checkout:
        """
        Return the book and record the borrower's review.

        The review is only looked at once an open entry is known to exist,
        and a rejected review leaves the history untouched.

        Args:
            review: Score between 1 and 5 inclusive
            now: Check-in timestamp

        Returns:
            The closed history entry

        Raises:
            LibraryError: BOOK_NOT_CHECKED_OUT or REVIEW_MISSING
        """
        if not self.is_checked_out():
            raise LibraryError(ErrorKind.BOOK_NOT_CHECKED_OUT)

        if not is_valid_review(review):
            raise LibraryError(ErrorKind.REVIEW_MISSING)

        closed = replace(self.history[-1], checked_in_at=now, review=review)
        self.history[-1] = closed
        return closed

    def copy(self) -> "Book":
        """Independent copy, history list included (entries are immutable)."""
        return replace(self, history=list(self.history))


def is_valid_review(review: object) -> bool:
    """Reviews are plain integers from MIN_REVIEW to MAX_REVIEW."""
    if isinstance(review, bool) or not isinstance(review, int):
        return False
    return MIN_REVIEW <= review <= MAX_REVIEW
