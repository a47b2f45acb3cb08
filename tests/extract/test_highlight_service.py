"""Tests for reading highlights from a Kobo database."""

import logging

import pytest

from extract.highlight_service import HighlightService
from extract.kobo_db import KoboDatabase
from extract.types import ReadStatus, SourceError, SourceNotFoundError, SourceReadError


class TestKoboDatabase:
    """Tests for KoboDatabase."""

    def test_unset_path(self):
        """Test that a missing configuration raises SourceNotFoundError."""
        with pytest.raises(SourceNotFoundError):
            KoboDatabase(None).connect()

    def test_missing_file(self, tmp_path):
        """Test that a nonexistent file raises SourceNotFoundError."""
        with pytest.raises(SourceNotFoundError):
            KoboDatabase(tmp_path / "nope.sqlite").connect()

    def test_query_without_connection(self, kobo_db_path):
        """Test that querying before connect raises SourceError."""
        with pytest.raises(SourceError):
            KoboDatabase(kobo_db_path).fetchall("SELECT 1")

    def test_context_manager(self, kobo_db_path):
        """Test connecting and closing through a with block."""
        db = KoboDatabase(kobo_db_path)
        with db:
            assert "connected" in repr(db)
            assert db.fetchone("SELECT COUNT(*) AS n FROM content") == {"n": 4}
        assert db._conn is None

    def test_opened_read_only(self, kobo_db_path):
        """Test that the database cannot be modified."""
        with KoboDatabase(kobo_db_path) as db:
            with pytest.raises(SourceReadError):
                db.fetchall("DELETE FROM Bookmark")

    def test_column_names(self, kobo_db_path):
        """Test reading table columns."""
        with KoboDatabase(kobo_db_path) as db:
            assert {"Text", "Color", "VolumeID"} <= db.column_names("Bookmark")
            assert db.column_names("NoSuchTable") == set()


class TestHighlightService:
    """Tests for HighlightService."""

    @pytest.fixture
    def service(self, kobo_db_path):
        """Service over the shared Kobo fixture database."""
        with KoboDatabase(kobo_db_path) as db:
            yield HighlightService(db)

    def test_groups_by_book_and_chapter(self, service):
        """Test grouping in creation-time order."""
        content = service.get_all_highlight()

        assert list(content) == ["Dune"]
        chapters = content["Dune"]
        assert list(chapters) == ["Chapter 1", "Chapter 2", "Unknown Chapter"]
        assert [h.text for h in chapters["Chapter 2"]] == ["kwisatz", "Recovered through BookTitle"]

    def test_text_and_note_are_trimmed(self, service):
        """Test that text is stripped and blank notes become None."""
        chapters = service.get_all_highlight()["Dune"]

        fear = chapters["Chapter 1"][0]
        recovered = chapters["Chapter 2"][1]
        assert fear.text == "Fear is the mind-killer"
        assert fear.note == "Litany"
        assert recovered.note is None

    def test_vocabulary_color(self, service):
        """Test that color 1 marks vocabulary."""
        chapters = service.get_all_highlight()["Dune"]
        assert chapters["Chapter 2"][0].is_vocabulary is True
        assert chapters["Chapter 1"][0].is_vocabulary is False

    def test_sort_by_chapter_progress(self, service):
        """Test ordering by chapter progress."""
        chapters = service.get_all_highlight(sort_by_progress=True)["Dune"]
        assert list(chapters) == ["Chapter 2", "Unknown Chapter", "Chapter 1"]

    def test_unmatched_bookmarks_are_skipped(self, service, caplog):
        """Test that highlights with no book are dropped with a warning."""
        with caplog.at_level(logging.WARNING):
            content = service.get_all_highlight()

        texts = [h.text for chapters in content.values() for hs in chapters.values() for h in hs]
        assert "Nobody's book" not in texts
        assert "Skipped 1 highlight(s)" in caplog.text

    def test_database_without_color_column(self, make_kobo_db):
        """Test that old databases read every highlight as a quote."""
        with KoboDatabase(make_kobo_db(with_color=False)) as db:
            service = HighlightService(db)
            chapters = service.get_all_highlight()["Dune"]

            assert all(not h.is_vocabulary for hs in chapters.values() for h in hs)
            assert service.get_color_counts() == []

    def test_get_all_books(self, service):
        """Test listing books regardless of highlights."""
        assert service.get_all_books() == {"Dune": "book-dune", "Emma": "book-emma"}
        assert service.get_all_books_by_volume()["book-emma"] == "Emma"

    def test_get_book_details(self, service):
        """Test reading book metadata."""
        details = service.get_book_details("Dune")

        assert details.title == "Dune"
        assert details.author == "Frank Herbert"
        assert details.publisher == "Chilton"
        assert details.read_status == ReadStatus.READ
        assert details.percent_read == 100

    def test_get_book_details_defaults(self, service):
        """Test defaults for missing author and missing book."""
        assert service.get_book_details("Emma").author == "Unknown Author"
        missing = service.get_book_details("Not on device")
        assert missing.title == "Not on device"
        assert missing.author == "Unknown Author"
        assert missing.read_status == ReadStatus.UNOPENED

    def test_get_color_counts(self, service):
        """Test counting highlights per color."""
        assert service.get_color_counts() == [(0, 5), (1, 1)]

    def test_create_empty_content_map(self, service):
        assert service.create_empty_content_map() == {}
