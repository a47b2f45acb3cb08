"""Map Kobo bookmark rows to per-book chapter maps.

Kobo stores every highlight in the Bookmark table. Its VolumeID points at
the book row of the content table (ContentType 6) and its ContentID at the
chapter row, whose ContentID is often the bookmark's ContentID with a
suffix appended, so chapters are looked up by exact match first and by
prefix second.
"""

from common.constants import UNKNOWN_CHAPTER
from common.logger import get_logger

from .kobo_db import KoboDatabase, Row
from .models import BookDetails, ChapterMap, Highlight
from .types import ReadStatus

logger = get_logger(__name__)

BOOK_CONTENT_TYPE = 6


class HighlightService:
    """Read highlights, books and book metadata from a connected KoboDatabase."""

    def __init__(self, db: KoboDatabase):
        self.db = db
        self._chapter_cache: dict[str, str] = {}

    def get_all_highlight(self, sort_by_progress: bool = False) -> dict[str, ChapterMap]:
        """Get every highlight grouped by book title, then chapter name.

        Args:
            sort_by_progress: Order by chapter progress, then creation time.
                When False, order by creation time only.

        Returns:
            Mapping from book title to its ChapterMap
        """
        volume_titles = self.get_all_books_by_volume()
        content: dict[str, ChapterMap] = {}
        # trimmed chapter name -> stored chapter name, per book
        chapter_keys: dict[str, dict[str, str]] = {}
        skipped = 0

        for row in self._bookmark_rows(sort_by_progress):
            text = (row["Text"] or "").strip()
            if not text:
                continue

            book_title = volume_titles.get(row["VolumeID"]) or self._book_title_from_content(
                row["ContentID"]
            )
            if not book_title:
                skipped += 1
                logger.debug(f"No book found for bookmark {row['BookmarkID']}, skipping")
                continue

            chapter = self._chapter_name(row["ContentID"])
            chapters = content.setdefault(book_title, self.create_empty_content_map())
            keys = chapter_keys.setdefault(book_title, {})
            chapter = keys.setdefault(chapter.strip(), chapter)

            note = (row["Annotation"] or "").strip() or None
            chapters.setdefault(chapter, []).append(
                Highlight(
                    text=text,
                    note=note,
                    color=int(row["Color"] or 0),
                    bookmark_id=row["BookmarkID"],
                    date_created=row["DateCreated"],
                    chapter_progress=row["ChapterProgress"],
                )
            )

        if skipped:
            logger.warning(f"Skipped {skipped} highlight(s) that could not be matched to a book")

        logger.debug(f"Found highlights for {len(content)} book(s)")
        return content

    def get_all_books(self) -> dict[str, str]:
        """Get every book in the library.

        Returns:
            Mapping from book title to its ContentID
        """
        rows = self.db.fetchall(
            """
            SELECT DISTINCT Title, ContentID
            FROM content
            WHERE ContentType = ? AND Title IS NOT NULL
            ORDER BY Title
            """,
            (BOOK_CONTENT_TYPE,),
        )
        books: dict[str, str] = {}
        for row in rows:
            books.setdefault(row["Title"], row["ContentID"])
        return books

    def get_all_books_by_volume(self) -> dict[str, str]:
        """Map each book ContentID (a bookmark's VolumeID) to its title."""
        return {content_id: title for title, content_id in self.get_all_books().items()}

    def get_book_details(self, book_title: str) -> BookDetails:
        """Get metadata for a book.

        Args:
            book_title: Title as returned by get_all_highlight/get_all_books

        Returns:
            BookDetails; only the title is known when the book row is missing
        """
        row = self.db.fetchone(
            """
            SELECT Title, Attribution, Publisher, DateLastRead, ReadStatus,
                   ___PercentRead AS PercentRead, ISBN, Series, SeriesNumber,
                   TimeSpentReading, Description
            FROM content
            WHERE Title = ? AND ContentType = ?
            LIMIT 1
            """,
            (book_title, BOOK_CONTENT_TYPE),
        )
        if row is None:
            logger.debug(f"No metadata found for '{book_title}'")
            return BookDetails(title=book_title, author="Unknown Author")

        return BookDetails(
            title=row["Title"],
            author=row["Attribution"] or "Unknown Author",
            read_status=_read_status(row["ReadStatus"]),
            publisher=row["Publisher"],
            date_last_read=row["DateLastRead"],
            percent_read=row["PercentRead"],
            isbn=row["ISBN"],
            series=row["Series"],
            series_number=row["SeriesNumber"],
            time_spent_reading=row["TimeSpentReading"],
            description=row["Description"],
        )

    def create_empty_content_map(self) -> ChapterMap:
        """Chapter map for a book without highlights."""
        return {}

    def get_color_counts(self) -> list[tuple[int | None, int]]:
        """Count bookmarks with text per Color value.

        Returns:
            (color, count) pairs ordered by color; empty when the column is missing
        """
        if "Color" not in self.db.column_names("Bookmark"):
            return []
        rows = self.db.fetchall(
            """
            SELECT Color, COUNT(*) AS Count
            FROM Bookmark
            WHERE Text IS NOT NULL
            GROUP BY Color
            ORDER BY Color
            """
        )
        return [(row["Color"], row["Count"]) for row in rows]

    def _bookmark_rows(self, sort_by_progress: bool) -> list[Row]:
        # Firmware before color highlights has no Color column
        has_color = "Color" in self.db.column_names("Bookmark")
        color = "Color" if has_color else "0 AS Color"
        if not has_color:
            logger.debug("Bookmark table has no Color column, treating all highlights as quotes")

        order = "ChapterProgress ASC, DateCreated ASC" if sort_by_progress else "DateCreated ASC"
        return self.db.fetchall(
            f"""
            SELECT BookmarkID, VolumeID, ContentID, Text, Annotation, {color},
                   DateCreated, ChapterProgress
            FROM Bookmark
            WHERE Text IS NOT NULL
            ORDER BY {order}
            """
        )

    def _chapter_name(self, content_id: str) -> str:
        if content_id in self._chapter_cache:
            return self._chapter_cache[content_id]

        row = self.db.fetchone(
            "SELECT Title FROM content WHERE ContentID = ? AND Title IS NOT NULL",
            (content_id,),
        )
        if row is None:
            row = self.db.fetchone(
                """
                SELECT Title FROM content
                WHERE ContentID LIKE ? AND Title IS NOT NULL AND ContentType != ?
                ORDER BY ContentID
                LIMIT 1
                """,
                (f"{content_id}%", BOOK_CONTENT_TYPE),
            )

        name = row["Title"] if row else UNKNOWN_CHAPTER
        self._chapter_cache[content_id] = name
        return name

    def _book_title_from_content(self, content_id: str) -> str | None:
        row = self.db.fetchone(
            """
            SELECT BookTitle FROM content
            WHERE (ContentID = ? OR ContentID LIKE ?) AND BookTitle IS NOT NULL
            LIMIT 1
            """,
            (content_id, f"{content_id}%"),
        )
        return row["BookTitle"] if row else None


def _read_status(value) -> ReadStatus:
    try:
        return ReadStatus(int(value or 0))
    except ValueError:
        return ReadStatus.UNOPENED
