"""
Domain layer - Core business logic and entities.

This layer contains the book entity with its checkout lifecycle, the value
objects used for listing, the error kinds, and the store port that the
infrastructure layer must implement.

It has NO dependencies on external frameworks, databases, or APIs.
"""

from .entities import Book, Checkout
from .errors import ErrorKind, LibraryError, StoreError
from .value_objects import BookPage, PageRequest, Review

__all__ = [
    # Entities
    "Book",
    "Checkout",
    # Errors
    "ErrorKind",
    "LibraryError",
    "StoreError",
    # Value Objects
    "BookPage",
    "PageRequest",
    "Review",
]
