"""
API endpoints for books, checkouts and reviews.

This module defines the FastAPI routes of the books API. It handles HTTP
concerns (bodies, paths, status codes) and delegates to the LibraryService.
Errors are raised as LibraryError and turned into responses by the handlers
in app.api.v1.errors.
"""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ValidationError

from app.config import Settings
from app.domain.errors import ErrorKind, LibraryError
from app.domain.services import LibraryService
from app.api.v1 import schemas as api
from app.api.v1.converters import (
    api_book_to_domain,
    domain_book_to_api,
    domain_page_to_api,
    domain_review_to_api,
)
from app.api.v1.dependencies import get_library_service, get_settings, read_json_body
from app.api.v1.pagination import Pagination, get_pagination

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": api.ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": api.ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": api.ErrorResponse},
}

router = APIRouter(prefix="/books", responses=ERROR_RESPONSES)


def parse_body(model: type[BaseModel], payload: dict) -> BaseModel:
    """Validate a JSON object against a request model."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise LibraryError(ErrorKind.UNABLE_TO_PARSE_JSON) from e


@router.post("", response_model=api.Book, status_code=status.HTTP_201_CREATED)
def add_book(
    payload: dict = Depends(read_json_body),
    service: LibraryService = Depends(get_library_service),
    settings: Settings = Depends(get_settings),
) -> api.Book:
    """
    Add a book to the catalogue.

    The store assigns the id; title and author are required.
    """
    request = parse_body(api.BookCreate, payload)
    created = service.add_book(api_book_to_domain(request))
    return domain_book_to_api(created, settings.api_url)


@router.get("", response_model=api.BookList)
def list_books(
    pagination: Pagination = Depends(get_pagination),
    service: LibraryService = Depends(get_library_service),
    settings: Settings = Depends(get_settings),
) -> api.BookList:
    """
    List books in the order they were added.

    Returns the requested page together with the size of the whole catalogue.
    """
    page = service.list_books(offset=pagination.offset, limit=pagination.limit)
    return domain_page_to_api(page, settings.api_url)


@router.get("/", include_in_schema=False)
def get_book_without_id() -> None:
    raise LibraryError(ErrorKind.EMPTY_BOOK_ID)


@router.get("/{book_id}", response_model=api.Book)
def get_book(
    book_id: str,
    service: LibraryService = Depends(get_library_service),
    settings: Settings = Depends(get_settings),
) -> api.Book:
    """
    Get a book by its identifier.

    Raises:
        400: Empty book id
        404: Book not found
    """
    book = service.get_book(book_id)
    return domain_book_to_api(book, settings.api_url)


@router.post(
    "/{book_id}/checkout",
    response_model=api.Book,
    status_code=status.HTTP_201_CREATED,
)
def checkout_book(
    book_id: str,
    payload: dict = Depends(read_json_body),
    service: LibraryService = Depends(get_library_service),
    settings: Settings = Depends(get_settings),
) -> api.Book:
    """
    Check a book out to the person named in the body.

    Raises:
        400: Book already checked out, or missing name
        404: Book not found
        409: Book changed by a concurrent request
    """
    request = parse_body(api.CheckoutRequest, payload)
    book = service.checkout_book(book_id, request.who)
    return domain_book_to_api(book, settings.api_url)


@router.post(
    "/{book_id}/checkin",
    response_model=api.Book,
    status_code=status.HTTP_201_CREATED,
)
def checkin_book(
    book_id: str,
    payload: dict = Depends(read_json_body),
    service: LibraryService = Depends(get_library_service),
    settings: Settings = Depends(get_settings),
) -> api.Book:
    """
    Check a book back in with a review from 1 to 5.

    Raises:
        400: Book not checked out, or review out of range
        404: Book not found
        409: Book changed by a concurrent request
    """
    request = parse_body(api.CheckinRequest, payload)
    book = service.checkin_book(book_id, request.review)
    return domain_book_to_api(book, settings.api_url)


@router.get("/{book_id}/reviews", response_model=api.ReviewList)
def list_reviews(
    book_id: str,
    service: LibraryService = Depends(get_library_service),
) -> api.ReviewList:
    """List the reviews left on returning a book, oldest first."""
    reviews = service.list_reviews(book_id)
    return api.ReviewList(
        total_count=len(reviews),
        items=[domain_review_to_api(r) for r in reviews],
    )


@router.get("/{book_id}/reviews/", include_in_schema=False)
def get_review_without_id(
    book_id: str,
    service: LibraryService = Depends(get_library_service),
) -> None:
    service.get_review(book_id, "")


@router.get("/{book_id}/reviews/{review_id}", response_model=api.Review)
def get_review(
    book_id: str,
    review_id: str,
    service: LibraryService = Depends(get_library_service),
) -> api.Review:
    """
    Get one review of a book.

    Raises:
        404: Book or review not found
    """
    return domain_review_to_api(service.get_review(book_id, review_id))
