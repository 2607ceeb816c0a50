"""Library facade over a Kobo database."""

import logging
from pathlib import Path

from koldpress.core.grouping import group_by_book, group_into_chapters
from koldpress.core.query import HighlightQuery
from koldpress.core.store import KoboStore
from koldpress.models.library import Book, Chapter

log = logging.getLogger(__name__)


class Library:
    """Books and highlights of one Kobo database, opened read-only."""

    def __init__(self, db_path: Path):
        self.store = KoboStore(db_path)
        self.query = HighlightQuery(self.store)

    def __enter__(self) -> "Library":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.store.close()

    def list_books(self) -> list[Book]:
        """All importable books, in store order."""
        books = self.store.fetch_books()
        log.info("Found %d books", len(books))
        return books

    def get_book(self, content_id: str) -> Book | None:
        """Look up one book; None if it does not exist."""
        books = self.store.fetch_books(content_id)
        return books[0] if books else None

    def get_highlights(self) -> dict[str, list[Chapter]]:
        """Highlights of the whole library, keyed by book title."""
        return group_by_book(self.query.fetch())

    def get_highlights_for_book(self, book: Book) -> list[Chapter]:
        """Highlights of one book grouped into chapters."""
        chapters = group_into_chapters(self.query.fetch(book.content_id))
        log.info("Grouped highlights of %r into %d chapters", book.title, len(chapters))
        return chapters
