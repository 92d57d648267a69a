"""
Request and response models for the books API.

These are the JSON shapes seen by clients. They mirror the domain entities
but keep the wire names (history entries use "out" and "in").
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# request bodies

class BookCreate(BaseModel):
    """
    Request body for POST /books.

    Missing title or author is not a parsing error: the domain rejects it
    with required_field_missing. Unknown fields (id, links, history) are ignored.
    """
    title: str = Field(default="", description="Book title (required)")
    author: str = Field(default="", description="Author name (required)")
    synopsis: str | None = Field(default=None, description="Optional short summary")


class CheckoutRequest(BaseModel):
    """Request body for POST /books/{id}/checkout."""
    who: str = Field(default="", description="Name of the borrower")


class CheckinRequest(BaseModel):
    """Request body for POST /books/{id}/checkin."""
    review: int = Field(default=0, strict=True, description="Score from 1 to 5")


# response bodies

class Checkout(BaseModel):
    """One entry of a book history."""
    model_config = ConfigDict(populate_by_name=True)

    who: str = Field(description="Name of the borrower")
    out: datetime = Field(description="When the book was checked out")
    in_: datetime | None = Field(
        default=None,
        alias="in",
        description="When the book was returned, null while it is out",
    )
    review: int | None = Field(default=None, ge=1, le=5, description="Score given on return")


class Links(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    self_: str = Field(alias="self")
    reservations: str
    reviews: str


class Book(BaseModel):
    """
    API representation of a Book entity.

    Maps from the domain Book entity for API responses.
    """
    id: str = Field(description="Store-assigned identifier")
    title: str = Field(description="Book title")
    author: str = Field(description="Author name")
    synopsis: str = Field(default="", description="Short summary")
    links: Links | None = Field(default=None, description="Related resources")
    history: list[Checkout] = Field(default_factory=list, description="Checkouts, oldest first")


class BookList(BaseModel):
    """Response body for GET /books."""
    count: int = Field(ge=0, description="Number of items in this page")
    offset: int = Field(ge=0)
    limit: int = Field(ge=0)
    total_count: int = Field(ge=0, description="Number of books in the catalogue")
    items: list[Book]


class Review(BaseModel):
    id: str = Field(description="Position of the checkout in the book history")
    book_id: str
    who: str
    review: int = Field(ge=1, le=5)
    out: datetime
    in_: datetime = Field(alias="in")

    model_config = ConfigDict(populate_by_name=True)


class ReviewList(BaseModel):
    total_count: int = Field(ge=0)
    items: list[Review]


class ErrorResponse(BaseModel):
    """Body of every unsuccessful response."""
    kind: str = Field(description="Machine-readable error kind")
    detail: str = Field(description="Human-readable error text")
