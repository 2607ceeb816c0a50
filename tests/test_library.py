"""Tests for the Library facade against a Kobo-shaped database."""

import sqlite3

import pytest

from koldpress.core.library import Library
from koldpress.core.store import QueryFailure, StoreError, StoreUnavailable

KEPUB = "application/x-kobo-epub+zip"


@pytest.fixture
def library(kobo_db):
    with Library(kobo_db) as library:
        yield library


def summary(chapters):
    return [(c.title, [h.text for h in c.highlights]) for c in chapters]


class TestBooks:
    def test_list_books_only_importable(self, library):
        books = library.list_books()
        assert sorted(b.content_id for b in books) == ["vol1", "vol2"]

    def test_get_book(self, library):
        book = library.get_book("vol1")
        assert book.title == "Dune"
        assert book.author == "Frank Herbert"
        assert str(book) == "Dune - Frank Herbert"

    def test_get_book_missing_is_none(self, library):
        assert library.get_book("missing") is None

    def test_chapter_row_is_not_a_book(self, library):
        assert library.get_book("vol1!!ch1.xhtml") is None


class TestHighlights:
    def test_highlights_for_book(self, library):
        chapters = library.get_highlights_for_book(library.get_book("vol1"))
        assert summary(chapters) == [
            ("Book One", ["first", "first later"]),
            ("Book Two", ["fallback", "second chapter line"]),
            ("", ["preface"]),
        ]

    def test_highlights_for_whole_library(self, library):
        books = library.get_highlights()
        assert list(books) == ["Dune", "Emma"]
        assert summary(books["Emma"]) == [("Volume I", ["Emma Woodhouse"])]
        assert len(books["Dune"]) == 3

    def test_runs_are_identical(self, kobo_db):
        with Library(kobo_db) as first, Library(kobo_db) as second:
            a = [c.model_dump_json() for c in first.get_highlights()["Dune"]]
            b = [c.model_dump_json() for c in second.get_highlights()["Dune"]]
        assert a == b


def test_end_to_end_scenario(make_kobo_db):
    db_path = make_kobo_db(
        content=[
            ("book", 6, KEPUB, None, None, "Scenario", "Anon", -1),
            ("c1", 899, KEPUB, "book", "Scenario", "Ch1", None, 1),
            ("c2", 899, KEPUB, "book", "Scenario", "Ch2", None, 2),
        ],
        bookmarks=[
            ("h1", "book", "c1-p3", "hello", "false", 1),
            ("h2", "book", "c2-p1", "world", "false", 1),
            ("h3", "book", "c2-p9", "", "false", 2),
        ],
    )
    with Library(db_path) as library:
        chapters = library.get_highlights_for_book(library.get_book("book"))
    assert summary(chapters) == [("Ch1", ["hello"]), ("Ch2", ["world"])]


def test_chapters_without_volume_index_stay_contiguous(make_kobo_db):
    db_path = make_kobo_db(
        content=[
            ("book", 6, KEPUB, None, None, "Unindexed", "Anon", -1),
            ("book!!a.xhtml-1", 899, KEPUB, "book", "Unindexed", "Alpha", None, None),
            ("book!!b.xhtml-1", 899, KEPUB, "book", "Unindexed", "Beta", None, None),
        ],
        bookmarks=[
            ("a1", "book", "book!!a.xhtml", "a1", "false", 0.1),
            ("b1", "book", "book!!b.xhtml", "b1", "false", 0.2),
            ("a2", "book", "book!!a.xhtml", "a2", "false", 0.3),
            ("b2", "book", "book!!b.xhtml", "b2", "false", 0.4),
        ],
    )
    with Library(db_path) as library:
        chapters = library.get_highlights_for_book(library.get_book("book"))
    assert summary(chapters) == [("Alpha", ["a1", "a2"]), ("Beta", ["b1", "b2"])]


class TestErrors:
    def test_missing_database(self, tmp_path):
        with pytest.raises(StoreUnavailable) as exc_info:
            Library(tmp_path / "nope.sqlite")
        assert exc_info.value.operation == "open database"
        assert "nope.sqlite" in str(exc_info.value)

    def test_directory_is_unavailable(self, tmp_path):
        with pytest.raises(StoreUnavailable):
            Library(tmp_path)

    def test_missing_table_is_query_failure(self, tmp_path):
        db_path = tmp_path / "partial.sqlite"
        conn = sqlite3.connect(db_path)
        conn.execute(
            "CREATE TABLE content (ContentID TEXT, ContentType TEXT, MimeType TEXT, "
            "BookID TEXT, BookTitle TEXT, Title TEXT, Attribution TEXT, VolumeIndex INTEGER)"
        )
        conn.commit()
        conn.close()

        with Library(db_path) as library:
            assert library.list_books() == []
            with pytest.raises(QueryFailure) as exc_info:
                library.get_highlights()
        assert exc_info.value.operation == "fetch highlights"
        assert isinstance(exc_info.value, StoreError)

    def test_query_failure_carries_book_id(self, tmp_path):
        db_path = tmp_path / "empty.sqlite"
        sqlite3.connect(db_path).close()

        with Library(db_path) as library:
            with pytest.raises(QueryFailure) as exc_info:
                library.store.fetch_content_items("vol1")
        assert exc_info.value.details == {"book_id": "vol1"}
        assert "book_id='vol1'" in str(exc_info.value)

    def test_invalid_row_is_query_failure(self, make_kobo_db):
        db_path = make_kobo_db(
            content=[("book", 6, KEPUB, None, None, "Odd", "Anon", -1)],
            bookmarks=[("h1", "book", "book!!a.xhtml", "text", "maybe", 0.1)],
        )
        with Library(db_path) as library:
            with pytest.raises(QueryFailure) as exc_info:
                library.get_highlights()
        assert exc_info.value.operation == "fetch highlights"
        assert "hidden" in exc_info.value.message

    def test_database_is_read_only(self, library):
        with pytest.raises(sqlite3.OperationalError):
            library.store._conn.execute("DELETE FROM Bookmark")
