"""Read-only access to a Kobo SQLite database."""

import logging
import sqlite3
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from koldpress.models.content import ContentItem, ContentKind
from koldpress.models.highlight import Highlight
from koldpress.models.library import Book

log = logging.getLogger(__name__)

BOOK_MIME_TYPES = ("application/x-kobo-epub+zip", "application/epub+zip")

BOOKS_QUERY = f"""
    SELECT Title, Attribution, ContentID
    FROM content
    WHERE BookTitle IS NULL
    AND MimeType IN ({", ".join("?" for _ in BOOK_MIME_TYPES)})
"""

CONTENT_QUERY = """
    SELECT ContentID, ContentType, Title, BookTitle, VolumeIndex, BookID
    FROM content
    WHERE ContentType IN (?, ?)
"""

HIGHLIGHTS_QUERY = """
    SELECT Bookmark.ContentID, Bookmark.Text, Bookmark.Hidden,
           Bookmark.VolumeID, Bookmark.ChapterProgress,
           book.Title AS BookTitle
    FROM Bookmark
    LEFT JOIN content AS book ON book.ContentID = Bookmark.VolumeID
    WHERE Bookmark.Text IS NOT NULL
"""


class StoreError(Exception):
    """Error reading from the Kobo database."""

    def __init__(self, operation: str, message: str, **details: Any):
        self.operation = operation
        self.message = message
        self.details = details
        context = ", ".join(f"{k}={v!r}" for k, v in details.items())
        super().__init__(
            f"{operation}: {message}" + (f" ({context})" if context else "")
        )


class StoreUnavailable(StoreError):
    """Database file is missing or cannot be opened."""


class QueryFailure(StoreError):
    """Query does not match the database schema."""


class KoboStore:
    """Read-only connection to a KoboReader.sqlite file."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        if not db_path.is_file():
            raise StoreUnavailable(
                "open database", "file not found", path=str(db_path)
            )
        try:
            self._conn = sqlite3.connect(
                f"{db_path.resolve().as_uri()}?mode=ro", uri=True
            )
        except sqlite3.Error as e:
            raise StoreUnavailable("open database", str(e), path=str(db_path)) from e
        self._conn.row_factory = sqlite3.Row
        log.info("Opened Kobo database at %s", db_path)

    def close(self) -> None:
        self._conn.close()

    def _query(
        self, operation: str, sql: str, params: tuple = (), **details: Any
    ) -> list[sqlite3.Row]:
        log.debug("%s: %s %s", operation, " ".join(sql.split()), params)
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise QueryFailure(operation, str(e), **details) from e

    def fetch_books(self, content_id: str | None = None) -> list[Book]:
        """Fetch top-level books, optionally a single one by content id."""
        sql = BOOKS_QUERY
        params: tuple = BOOK_MIME_TYPES
        if content_id is not None:
            sql += " AND ContentID = ? LIMIT 1"
            params += (content_id,)

        rows = self._query("fetch books", sql, params, content_id=content_id)
        try:
            return [
                Book(
                    title=row["Title"] or "",
                    author=row["Attribution"],
                    content_id=row["ContentID"],
                )
                for row in rows
            ]
        except ValidationError as e:
            raise QueryFailure("fetch books", str(e), content_id=content_id) from e

    def fetch_content_items(self, book_id: str | None = None) -> list[ContentItem]:
        """Fetch highlightable units and chapter titles."""
        sql = CONTENT_QUERY
        params: tuple = (9, 899)
        if book_id is not None:
            sql += " AND BookID = ?"
            params += (book_id,)

        rows = self._query("fetch content items", sql, params, book_id=book_id)
        try:
            return [
                ContentItem(
                    content_id=row["ContentID"],
                    kind=ContentKind.from_content_type(row["ContentType"]),
                    title=row["Title"],
                    book_title=row["BookTitle"],
                    volume_index=row["VolumeIndex"],
                    book_id=row["BookID"],
                )
                for row in rows
            ]
        except ValidationError as e:
            raise QueryFailure("fetch content items", str(e), book_id=book_id) from e

    def fetch_highlights(self, book_id: str | None = None) -> list[Highlight]:
        """Fetch bookmark rows carrying text, hidden ones included."""
        sql = HIGHLIGHTS_QUERY
        params: tuple = ()
        if book_id is not None:
            sql += " AND Bookmark.VolumeID = ?"
            params = (book_id,)

        rows = self._query("fetch highlights", sql, params, book_id=book_id)
        try:
            return [
                Highlight(
                    content_id=row["ContentID"],
                    text=row["Text"],
                    hidden=row["Hidden"],
                    volume_id=row["VolumeID"] or "",
                    chapter_progress=row["ChapterProgress"],
                    book_title=row["BookTitle"] or "",
                )
                for row in rows
            ]
        except ValidationError as e:
            raise QueryFailure("fetch highlights", str(e), book_id=book_id) from e
