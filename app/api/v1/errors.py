"""
Mapping of domain errors to HTTP responses.

Every LibraryError raised while handling a request ends up here and is
turned into {"kind", "detail"} with the status of its kind. Server-side
failures are logged in full but only a generic detail is returned.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.domain.errors import ErrorKind, LibraryError

logger = logging.getLogger(__name__)

INTERNAL_SERVER_ERROR_MESSAGE = "internal server error"

STATUS_BY_KIND = {
    ErrorKind.BOOK_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.REVIEW_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.REQUIRED_FIELD_MISSING: status.HTTP_400_BAD_REQUEST,
    ErrorKind.EMPTY_REQUEST_BODY: status.HTTP_400_BAD_REQUEST,
    ErrorKind.EMPTY_BOOK_ID: status.HTTP_400_BAD_REQUEST,
    ErrorKind.EMPTY_REVIEW_ID: status.HTTP_400_BAD_REQUEST,
    ErrorKind.BOOK_ALREADY_CHECKED_OUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.BOOK_NOT_CHECKED_OUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NAME_MISSING: status.HTTP_400_BAD_REQUEST,
    ErrorKind.REVIEW_MISSING: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNABLE_TO_READ_MESSAGE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNABLE_TO_PARSE_JSON: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_PAGINATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.BOOK_MODIFIED: status.HTTP_409_CONFLICT,
    ErrorKind.STORE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(kind: ErrorKind) -> int:
    """HTTP status for an error kind; unknown kinds are server errors."""
    return STATUS_BY_KIND.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(kind: ErrorKind, detail: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"kind": kind.value, "detail": detail},
    )


async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
    status_code = status_for(exc.kind)
    summary = (
        f"request unsuccessful: {request.method} {request.url.path} "
        f"status={status_code} kind={exc.kind.value}: {exc}"
    )

    if status_code >= 500:
        logger.error(summary, exc_info=exc)
        return error_response(exc.kind, INTERNAL_SERVER_ERROR_MESSAGE, status_code)

    logger.warning(summary)
    return error_response(exc.kind, exc.message, status_code)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Query parameter validation failures are reported as invalid pagination."""
    problems = "; ".join(
        f"{error['loc'][-1]}: {error['msg']}" for error in exc.errors()
    )
    return await library_error_handler(
        request, LibraryError(ErrorKind.INVALID_PAGINATION, problems)
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"unexpected error on {request.method} {request.url.path}",
        exc_info=exc,
    )
    return error_response(
        ErrorKind.STORE_ERROR,
        INTERNAL_SERVER_ERROR_MESSAGE,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LibraryError, library_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
