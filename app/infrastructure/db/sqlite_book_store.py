"""
SQLite implementation of the BookStore port.

This adapter keeps one document per book (_id, title, author, synopsis,
history) in a SQLite table, with the checkout history serialized as a JSON
array. History updates are conditional on the previously read history, which
makes them atomic per book.
"""

import json
import logging
import re
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple
from uuid import uuid4

from app.domain.entities import Book, Checkout
from app.domain.errors import ErrorKind, LibraryError, StoreError
from app.domain.ports import BookStore

logger = logging.getLogger(__name__)

_COLLECTION_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def checkout_to_document(checkout: Checkout) -> dict:
    """Serialize a history entry with the persisted field names."""
    return {
        "who": checkout.who,
        "out": checkout.checked_out_at.isoformat(),
        "in": checkout.checked_in_at.isoformat() if checkout.checked_in_at else None,
        "review": checkout.review,
    }


def checkout_from_document(doc: dict) -> Checkout:
    checked_in = doc.get("in")
    return Checkout(
        who=doc["who"],
        checked_out_at=datetime.fromisoformat(doc["out"]),
        checked_in_at=datetime.fromisoformat(checked_in) if checked_in else None,
        review=doc.get("review"),
    )


def history_to_json(history: Sequence[Checkout]) -> str:
    return json.dumps([checkout_to_document(c) for c in history])


class SqliteBookStore(BookStore):
    """
    Books stored as documents in a single SQLite table.

    Rows keep an autoincrement sequence next to the _id so listing returns
    books in the order they were added.
    """

    def __init__(self, db_path: Path, collection: str = "books") -> None:
        """
        Initialize the store with a database path and collection (table) name.

        Raises:
            ValueError: If the collection name is not a plain identifier
            StoreError: If the schema cannot be created
        """
        if not _COLLECTION_NAME.match(collection):
            raise ValueError(f"invalid collection name '{collection}'")

        self._db_path = Path(db_path)
        self._collection = collection
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection for one operation, committing on success."""
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _location(self) -> str:
        return f"{self._db_path}:{self._collection}"

    def _init_schema(self) -> None:
        """Create the collection table if it doesn't exist."""
        try:
            with self._connect() as conn:
                conn.execute(f"""
                    CREATE TABLE IF NOT EXISTS {self._collection} (
                        seq INTEGER PRIMARY KEY AUTOINCREMENT,
                        _id TEXT NOT NULL UNIQUE,
                        title TEXT NOT NULL,
                        author TEXT NOT NULL,
                        synopsis TEXT NOT NULL DEFAULT '',
                        history TEXT NOT NULL DEFAULT '[]'
                    )
                """)
        except sqlite3.Error as e:
            raise StoreError(f"unable to create collection '{self._collection}': {e}") from e

    def _row_to_book(self, row: sqlite3.Row) -> Book:
        """Convert a database row to a Book entity."""
        return Book(
            id=row["_id"],
            title=row["title"],
            author=row["author"],
            synopsis=row["synopsis"] or "",
            history=[checkout_from_document(doc) for doc in json.loads(row["history"])],
        )

    def add_book(self, book: Book) -> Book:
        """Insert a new document with a freshly generated id."""
        created = book.copy()
        created.id = str(uuid4())

        try:
            with self._connect() as conn:
                conn.execute(
                    f"INSERT INTO {self._collection} (_id, title, author, synopsis, history) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (
                        created.id,
                        created.title,
                        created.author,
                        created.synopsis or "",
                        history_to_json(created.history),
                    ),
                )
        except sqlite3.Error as e:
            logger.error(f"unable to add book {created.id} to {self._location()}: {e}")
            raise StoreError(f"unexpected error when adding a book: {e}") from e

        return created

    def get_book(self, book_id: str) -> Optional[Book]:
        """Retrieve a book by its id, None if absent."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT * FROM {self._collection} WHERE _id = ?",
                    (book_id,),
                ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"unable to get book {book_id} from {self._location()}: {e}")
            raise StoreError(f"unexpected error when getting a book: {e}") from e

        if row is None:
            logger.debug(f"book not found: {book_id}")
            return None

        return self._row_to_book(row)

    def get_books(self, offset: int, limit: int) -> Tuple[List[Book], int]:
        """Retrieve books in insertion order together with the total count."""
        try:
            with self._connect() as conn:
                total = conn.execute(
                    f"SELECT COUNT(*) AS cnt FROM {self._collection}"
                ).fetchone()["cnt"]
                rows = conn.execute(
                    f"SELECT * FROM {self._collection} ORDER BY seq LIMIT ? OFFSET ?",
                    (limit, offset),
                ).fetchall()
        except (sqlite3.Error, OverflowError) as e:
            logger.error(f"unable to retrieve books from {self._location()}: {e}")
            raise StoreError(f"unexpected error when getting books: {e}") from e

        return [self._row_to_book(row) for row in rows], total

    def update_history(self, book: Book, expected_history: Sequence[Checkout]) -> None:
        """Write the new history only if the stored one is still expected_history."""
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    f"UPDATE {self._collection} SET history = ? WHERE _id = ? AND history = ?",
                    (history_to_json(book.history), book.id, history_to_json(expected_history)),
                )
                if cursor.rowcount == 1:
                    return

                exists = conn.execute(
                    f"SELECT 1 FROM {self._collection} WHERE _id = ?",
                    (book.id,),
                ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"unable to update history of book {book.id} in {self._location()}: {e}")
            raise StoreError(f"unexpected error when updating a book: {e}") from e

        if exists is None:
            raise LibraryError(ErrorKind.BOOK_NOT_FOUND)
        raise LibraryError(ErrorKind.BOOK_MODIFIED)

    def count(self) -> int:
        """Get the total number of books in the collection."""
        _, total = self.get_books(0, 0)
        return total

    def is_ready(self) -> bool:
        try:
            with self._connect() as conn:
                conn.execute(f"SELECT 1 FROM {self._collection} LIMIT 1")
            return True
        except sqlite3.Error as e:
            logger.warning(f"book store not ready: {e}")
            return False
