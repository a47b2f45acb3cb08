"""Shared fixtures: a small KoboReader.sqlite built in a temporary directory."""

import sqlite3

import pytest

SCHEMA = """
CREATE TABLE content (
    ContentID TEXT PRIMARY KEY,
    ContentType INTEGER,
    Title TEXT,
    BookTitle TEXT,
    Attribution TEXT,
    Publisher TEXT,
    DateLastRead TEXT,
    ReadStatus INTEGER,
    ___PercentRead INTEGER,
    ISBN TEXT,
    Series TEXT,
    SeriesNumber TEXT,
    TimeSpentReading INTEGER,
    Description TEXT
);
CREATE TABLE Bookmark (
    BookmarkID TEXT PRIMARY KEY,
    VolumeID TEXT,
    ContentID TEXT,
    Text TEXT,
    Annotation TEXT,
    {color_column}
    DateCreated TEXT,
    ChapterProgress REAL
);
"""

CONTENT_ROWS = [
    # ContentID, ContentType, Title, BookTitle, Attribution, Publisher, ReadStatus, PercentRead
    ("book-dune", 6, "Dune", None, "Frank Herbert", "Chilton", 2, 100),
    ("book-emma", 6, "Emma", None, None, None, 0, 0),
    ("book-dune!OEBPS!ch1.xhtml-1", 899, "Chapter 1", "Dune", None, None, None, None),
    ("book-dune!OEBPS!ch2.xhtml", 899, "Chapter 2", "Dune", None, None, None, None),
]

BOOKMARK_ROWS = [
    # BookmarkID, VolumeID, ContentID, Text, Annotation, Color, DateCreated, ChapterProgress
    ("b1", "book-dune", "book-dune!OEBPS!ch1.xhtml", "  Fear is the mind-killer  ", "Litany", 0, "2024-01-02", 0.5),
    ("b2", "book-dune", "book-dune!OEBPS!ch2.xhtml", "kwisatz", None, 1, "2024-01-03", 0.1),
    ("b3", "book-dune", "book-dune!OEBPS!ch2.xhtml", None, "bookmark only", 0, "2024-01-01", 0.0),
    ("b4", "book-dune", "book-dune!OEBPS!ch2.xhtml", "   ", None, 0, "2024-01-01", 0.0),
    ("b5", "unknown-volume", "orphan!chapter", "Nobody's book", None, 0, "2024-01-01", 0.0),
    ("b6", "", "book-dune!OEBPS!ch2.xhtml", "Recovered through BookTitle", "  ", 0, "2024-01-04", 0.9),
    ("b7", "book-dune", "book-dune!missing", "Lost chapter", None, 0, "2024-01-05", 0.2),
]


@pytest.fixture
def make_kobo_db(tmp_path):
    """Factory for a Kobo database file; pass with_color=False for old firmware."""

    def _make(with_color: bool = True):
        db_path = tmp_path / ("KoboReader.sqlite" if with_color else "KoboReader-old.sqlite")
        conn = sqlite3.connect(db_path)
        conn.executescript(SCHEMA.format(color_column="Color INTEGER," if with_color else ""))
        conn.executemany(
            """
            INSERT INTO content
                (ContentID, ContentType, Title, BookTitle, Attribution, Publisher,
                 ReadStatus, ___PercentRead)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            CONTENT_ROWS,
        )
        if with_color:
            conn.executemany("INSERT INTO Bookmark VALUES (?, ?, ?, ?, ?, ?, ?, ?)", BOOKMARK_ROWS)
        else:
            conn.executemany(
                "INSERT INTO Bookmark VALUES (?, ?, ?, ?, ?, ?, ?)",
                [row[:5] + row[6:] for row in BOOKMARK_ROWS],
            )
        conn.commit()
        conn.close()
        return db_path

    return _make


@pytest.fixture
def kobo_db_path(make_kobo_db):
    """Path to a Kobo database with one highlighted book and one unread book."""
    return make_kobo_db()
