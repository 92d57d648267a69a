"""
Main application entry point.
"""

import logging
from typing import Optional

from fastapi import FastAPI

from app.config import Settings, get_settings
from app.domain.ports import BookStore
from app.domain.services import LibraryService
from app.logging_config import configure_logging
from app.api.v1.books_endpoints import router as books_router
from app.api.v1.dependencies import build_book_store
from app.api.v1.errors import register_error_handlers
from app.api.v1.health_endpoints import router as health_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[BookStore] = None,
) -> FastAPI:
    """
    Build the books API.

    Args:
        settings: Configuration (read from the environment when omitted)
        store: Book store to use instead of the one selected by settings

    Returns:
        A FastAPI application with its own store and service
    """
    settings = settings or get_settings()
    store = store if store is not None else build_book_store(settings)

    app = FastAPI(
        title="Books API",
        description="Catalogue of books with checkout and review history.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.library_service = LibraryService(store=store)

    register_error_handlers(app)
    app.include_router(books_router, tags=["books"])
    app.include_router(health_router, tags=["health"])

    logger.info(f"enabling endpoints bind_addr={settings.bind_addr}")
    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
