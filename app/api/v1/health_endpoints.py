"""
Health check endpoint.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.domain.services import LibraryService
from app.api.v1.dependencies import get_library_service

router = APIRouter()


@router.get("/health")
def health_check(
    service: LibraryService = Depends(get_library_service),
) -> JSONResponse:
    """
    Report whether the book store can serve requests.

    Returns 200 when it can and 503 otherwise.
    """
    store_ready = service.is_ready()

    body = {
        "status": "ok" if store_ready else "degraded",
        "components": {"book_store": store_ready},
    }
    status_code = status.HTTP_200_OK if store_ready else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=status_code, content=body)
