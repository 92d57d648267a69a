"""
Paginator for list endpoints.

Reads the offset and limit query parameters, applies the configured default
and maximum limit, and caps the offset at the largest value a store can
address. Malformed values fail FastAPI's query validation and are reported
as invalid pagination by the error handlers. Downstream code trusts the
values it receives from here.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Query

from app.config import Settings
from app.domain.errors import ErrorKind, LibraryError
from app.api.v1.dependencies import get_settings

# Largest signed 64-bit integer; any offset past it lies beyond every page.
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class Pagination:
    offset: int
    limit: int


def get_pagination(
    offset: int = Query(default=0, ge=0, description="Number of items to skip"),
    limit: Optional[int] = Query(default=None, ge=0, description="Maximum number of items"),
    settings: Settings = Depends(get_settings),
) -> Pagination:
    """
    FastAPI dependency producing validated pagination bounds.

    Raises:
        LibraryError: INVALID_PAGINATION for a limit above the configured maximum
    """
    if limit is None:
        limit = settings.default_limit

    if limit > settings.max_limit:
        raise LibraryError(
            ErrorKind.INVALID_PAGINATION,
            f"limit cannot be greater than {settings.max_limit}, got {limit}",
        )

    return Pagination(offset=min(offset, MAX_OFFSET), limit=limit)
