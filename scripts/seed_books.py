#!/usr/bin/env python3
"""
Book Seeding Script.

This script adds books to the configured book store, either from a JSON file
holding a list of {"title", "author", "synopsis"} objects or, without a file,
a single placeholder book.

Usage:
    python -m scripts.seed_books --file data/books.json
    python -m scripts.seed_books --db-path data/bookStore.db
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from app.config import get_settings
from app.domain.entities import Book
from app.domain.errors import LibraryError
from app.domain.services import LibraryService
from app.infrastructure.db.sqlite_book_store import SqliteBookStore
from app.logging_config import configure_logging

logger = logging.getLogger(__name__)

DEFAULT_BOOK = {
    "title": "default book",
    "author": "default author",
    "synopsis": "",
}


def load_books(path: Optional[Path]) -> List[Book]:
    """
    Read the books to seed.

    Args:
        path: JSON file with a list of book objects, or None for the placeholder

    Raises:
        ValueError: If the file does not hold a list of objects
    """
    if path is None:
        records = [DEFAULT_BOOK]
    else:
        records = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise ValueError(f"{path} must contain a JSON list of book objects")

    return [
        Book(
            title=str(r.get("title") or ""),
            author=str(r.get("author") or ""),
            synopsis=str(r.get("synopsis") or ""),
        )
        for r in records
    ]


def main(db_path: Path, collection: str, file: Optional[Path] = None) -> int:
    """
    Main entry point for the seeding script.

    Args:
        db_path: SQLite database file of the book store
        collection: Collection (table) name
        file: Optional JSON file with the books

    Returns:
        Number of books added
    """
    service = LibraryService(store=SqliteBookStore(db_path, collection=collection))

    added = 0
    for book in load_books(file):
        try:
            created = service.add_book(book)
        except LibraryError as e:
            logger.warning(f"Skipping book {book.title!r}: {e}")
            continue
        logger.info(f"Seeded book id={created.id} title={created.title!r}")
        added += 1

    logger.info(f"Seeded {added} book(s) into {db_path} ({collection})")
    return added


if __name__ == "__main__":
    settings = get_settings()
    configure_logging(settings.log_level)

    parser = argparse.ArgumentParser(description="Seed the book store")
    parser.add_argument("--file", type=Path, default=None, help="JSON file with books")
    parser.add_argument("--db-path", type=Path, default=settings.db_path)
    parser.add_argument("--collection", default=settings.collection)
    args = parser.parse_args()

    try:
        main(args.db_path, args.collection, args.file)
    except (OSError, ValueError) as e:
        logger.error(f"Seeding failed: {e}")
        sys.exit(1)
