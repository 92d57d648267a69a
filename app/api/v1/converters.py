"""
Converters between domain entities/value objects and API schemas.

This module centralizes all conversion logic between the domain layer
and the API layer, maintaining clean separation of concerns.
"""

from app.domain import entities as domain
from app.domain import value_objects as domain_vo
from app.api.v1 import schemas as api


def book_links(book_id: str, api_url: str) -> api.Links:
    """Build the related-resource URLs of a book."""
    base = f"{api_url.rstrip('/')}/books/{book_id}"
    return api.Links(
        self_=base,
        reservations=f"{base}/reservations",
        reviews=f"{base}/reviews",
    )


def domain_checkout_to_api(checkout: domain.Checkout) -> api.Checkout:
    return api.Checkout(
        who=checkout.who,
        out=checkout.checked_out_at,
        in_=checkout.checked_in_at,
        review=checkout.review,
    )


def domain_book_to_api(book: domain.Book, api_url: str) -> api.Book:
    """
    Convert a domain Book entity to an API Book model.

    Args:
        book: Persisted domain Book (must carry an id)
        api_url: Public base URL used to build the links

    Returns:
        API Book model
    """
    return api.Book(
        id=book.id,
        title=book.title,
        author=book.author,
        synopsis=book.synopsis,
        links=book_links(book.id, api_url),
        history=[domain_checkout_to_api(c) for c in book.history],
    )


def domain_page_to_api(page: domain_vo.BookPage, api_url: str) -> api.BookList:
    return api.BookList(
        count=page.count,
        offset=page.offset,
        limit=page.limit,
        total_count=page.total_count,
        items=[domain_book_to_api(b, api_url) for b in page.items],
    )


def domain_review_to_api(review: domain_vo.Review) -> api.Review:
    return api.Review(
        id=review.id,
        book_id=review.book_id,
        who=review.who,
        review=review.review,
        out=review.checked_out_at,
        in_=review.checked_in_at,
    )


def api_book_to_domain(book: api.BookCreate) -> domain.Book:
    """
    Convert an API create request to a domain Book (no id yet).

    Args:
        book: API BookCreate model

    Returns:
        Unvalidated domain Book
    """
    return domain.Book(
        title=book.title,
        author=book.author,
        synopsis=book.synopsis or "",
    )
