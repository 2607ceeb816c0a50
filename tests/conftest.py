"""Shared fixtures: small Kobo-shaped SQLite databases."""

import sqlite3
from pathlib import Path

import pytest

SCHEMA = """
CREATE TABLE content (
    ContentID TEXT NOT NULL PRIMARY KEY,
    ContentType TEXT NOT NULL,
    MimeType TEXT NOT NULL,
    BookID TEXT,
    BookTitle TEXT,
    Title TEXT,
    Attribution TEXT,
    VolumeIndex INTEGER,
    ChapterIDBookmarked TEXT
);
CREATE TABLE Bookmark (
    BookmarkID TEXT NOT NULL PRIMARY KEY,
    VolumeID TEXT NOT NULL,
    ContentID TEXT NOT NULL,
    Text TEXT,
    Hidden BOOL DEFAULT false,
    ChapterProgress NUMERIC DEFAULT 0
);
"""

KEPUB = "application/x-kobo-epub+zip"

# ContentID, ContentType, MimeType, BookID, BookTitle, Title, Attribution, VolumeIndex
LIBRARY_CONTENT = [
    ("vol1", 6, KEPUB, None, None, "Dune", "Frank Herbert", -1),
    ("vol2", 6, "application/epub+zip", None, None, "Emma", "Jane Austen", -1),
    ("scan.pdf", 6, "application/pdf", None, None, "Scanned", "Nobody", -1),
    ("vol1!!front.xhtml", 9, KEPUB, "vol1", "Dune", "front", None, 0),
    ("vol1!!ch1.xhtml", 9, KEPUB, "vol1", "Dune", "ch1", None, 1),
    ("vol1!!ch2.xhtml", 9, KEPUB, "vol1", "Dune", "ch2", None, 3),
    ("vol1!!ch2b.xhtml", 9, KEPUB, "vol1", "Dune", "ch2b", None, 4),
    ("vol1!!ch1.xhtml-1", 899, KEPUB, "vol1", "Dune", "Book One", None, 1),
    ("vol1!!ch2.xhtml-1", 899, KEPUB, "vol1", "Dune", "Book Two", None, 3),
    ("vol2!!a.html", 9, KEPUB, "vol2", "Emma", "a", None, 1),
    ("vol2!!a.html#c1", 899, KEPUB, "vol2", "Emma", "Volume I", None, 1),
]

# BookmarkID, VolumeID, ContentID, Text, Hidden, ChapterProgress
LIBRARY_BOOKMARKS = [
    ("b1", "vol1", "vol1!!ch2.xhtml", "second chapter line", "false", 0.5),
    ("b2", "vol1", "vol1!!ch1.xhtml", "first", "false", 0.2),
    ("b3", "vol1", "vol1!!ch1.xhtml", "first later", None, 0.7),
    ("b4", "vol1", "vol1!!ch1.xhtml", "hidden one", "true", 0.4),
    ("b5", "vol1", "vol1!!ch1.xhtml", "", "false", 0.5),
    ("b6", "vol1", "vol1!!ch1.xhtml", None, "false", 0.6),
    ("b7", "vol1", "vol1!!ch2b.xhtml", "fallback", "false", 0.1),
    ("b8", "vol1", "vol1!!front.xhtml", "preface", "false", 0.3),
    ("b9", "vol2", "vol2!!a.html", "Emma Woodhouse", "false", 0.0),
]


def build_kobo_db(path: Path, content: list[tuple], bookmarks: list[tuple]) -> Path:
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA)
        conn.executemany(
            "INSERT INTO content (ContentID, ContentType, MimeType, BookID, "
            "BookTitle, Title, Attribution, VolumeIndex) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            content,
        )
        conn.executemany(
            "INSERT INTO Bookmark (BookmarkID, VolumeID, ContentID, Text, Hidden, "
            "ChapterProgress) VALUES (?, ?, ?, ?, ?, ?)",
            bookmarks,
        )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def make_kobo_db(tmp_path):
    """Factory building a database from content and bookmark rows."""

    def _make(content, bookmarks, name="KoboReader.sqlite"):
        return build_kobo_db(tmp_path / name, content, bookmarks)

    return _make


@pytest.fixture
def kobo_db(make_kobo_db) -> Path:
    return make_kobo_db(LIBRARY_CONTENT, LIBRARY_BOOKMARKS)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Keep the user's config and environment out of tests."""
    for name in ("KOLDPRESS_DB_PATH", "KOLDPRESS_OUTPUT_FORMAT", "KOLDPRESS_TEMPLATE_PATH"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
