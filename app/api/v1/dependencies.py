"""
FastAPI dependencies for dependency injection.

The store and the service are built once per application by create_app and
kept on app.state; these functions hand them to the endpoints. Nothing is
kept in module globals, so every app (and every test) gets its own books.
"""

import json
import logging

from fastapi import Request
from starlette.requests import ClientDisconnect

from app.config import Settings
from app.domain.errors import ErrorKind, LibraryError
from app.domain.ports import BookStore
from app.domain.services import LibraryService
from app.infrastructure.db.memory_book_store import InMemoryBookStore
from app.infrastructure.db.sqlite_book_store import SqliteBookStore

logger = logging.getLogger(__name__)


def build_book_store(settings: Settings) -> BookStore:
    """Create the store selected by BOOK_STORE."""
    if settings.book_store == "memory":
        logger.info("using in-memory book store")
        return InMemoryBookStore()

    logger.info(
        f"using sqlite book store database={settings.db_path} collection={settings.collection}"
    )
    return SqliteBookStore(settings.db_path, collection=settings.collection)


def get_settings(request: Request) -> Settings:
    """Settings of the application serving the request."""
    return request.app.state.settings


def get_library_service(request: Request) -> LibraryService:
    """Provide the LibraryService wired by create_app."""
    return request.app.state.library_service


async def read_json_body(request: Request) -> dict:
    """
    Read the request body as a JSON object.

    Raises:
        LibraryError: UNABLE_TO_READ_MESSAGE if the body cannot be read,
            EMPTY_REQUEST_BODY if there is none, UNABLE_TO_PARSE_JSON if it
            is not a JSON object
    """
    try:
        payload = await request.body()
    except ClientDisconnect as e:
        raise LibraryError(ErrorKind.UNABLE_TO_READ_MESSAGE) from e

    if not payload.strip():
        raise LibraryError(ErrorKind.EMPTY_REQUEST_BODY)

    try:
        data = json.loads(payload)
    except ValueError as e:
        raise LibraryError(ErrorKind.UNABLE_TO_PARSE_JSON) from e

    if not isinstance(data, dict):
        raise LibraryError(ErrorKind.UNABLE_TO_PARSE_JSON)

    return data
