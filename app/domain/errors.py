"""
Domain errors for the books service.

Every failure the domain can report is a LibraryError tagged with an
ErrorKind. The HTTP layer maps kinds to status codes; nothing in the
domain knows about HTTP.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Tag identifying what went wrong."""

    REQUIRED_FIELD_MISSING = "required_field_missing"
    EMPTY_REQUEST_BODY = "empty_request_body"
    EMPTY_BOOK_ID = "empty_book_id"
    BOOK_NOT_FOUND = "book_not_found"
    BOOK_ALREADY_CHECKED_OUT = "book_already_checked_out"
    BOOK_NOT_CHECKED_OUT = "book_not_checked_out"
    NAME_MISSING = "name_missing"
    REVIEW_MISSING = "review_missing"
    UNABLE_TO_READ_MESSAGE = "unable_to_read_message"
    UNABLE_TO_PARSE_JSON = "unable_to_parse_json"
    EMPTY_REVIEW_ID = "empty_review_id"
    REVIEW_NOT_FOUND = "review_not_found"
    BOOK_MODIFIED = "book_modified"
    INVALID_PAGINATION = "invalid_pagination"
    STORE_ERROR = "store_error"


DEFAULT_MESSAGES = {
    ErrorKind.REQUIRED_FIELD_MISSING: "invalid book. Missing required field",
    ErrorKind.EMPTY_REQUEST_BODY: "empty request body",
    ErrorKind.EMPTY_BOOK_ID: "empty book ID in request",
    ErrorKind.BOOK_NOT_FOUND: "book not found",
    ErrorKind.BOOK_ALREADY_CHECKED_OUT: "book is already checked out",
    ErrorKind.BOOK_NOT_CHECKED_OUT: "book has not been checked out",
    ErrorKind.NAME_MISSING: "missing name of the person checking out the book",
    ErrorKind.REVIEW_MISSING: "missing review, must be a value from 1 to 5",
    ErrorKind.UNABLE_TO_READ_MESSAGE: "failed to read message body",
    ErrorKind.UNABLE_TO_PARSE_JSON: "failed to parse json body",
    ErrorKind.EMPTY_REVIEW_ID: "empty review ID in request",
    ErrorKind.REVIEW_NOT_FOUND: "review not found",
    ErrorKind.BOOK_MODIFIED: "book was modified by another request",
    ErrorKind.INVALID_PAGINATION: "invalid pagination parameters",
    ErrorKind.STORE_ERROR: "unexpected error in the book store",
}


class LibraryError(Exception):
    """
    Base error for every failure reported by the books domain.

    Attributes:
        kind: The ErrorKind tag, used by callers to dispatch on the failure
        message: Human-readable text (defaults to the kind's standard message)
    """

    def __init__(self, kind: ErrorKind, message: Optional[str] = None) -> None:
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class StoreError(LibraryError):
    """Opaque failure of the underlying persistence backend."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(ErrorKind.STORE_ERROR, message)
