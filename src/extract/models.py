"""Data models for highlights extracted from a Kobo database."""

from dataclasses import dataclass

from common.constants import VOCABULARY_COLOR

from .types import ReadStatus


@dataclass
class Highlight:
    """A single highlighted passage or vocabulary term."""

    text: str
    note: str | None = None
    color: int = 0
    bookmark_id: str | None = None
    date_created: str | None = None
    chapter_progress: float | None = None

    @property
    def is_vocabulary(self) -> bool:
        """Vocabulary entries are highlighted with color 1."""
        return self.color == VOCABULARY_COLOR


# Chapter name -> highlights, in source order
ChapterMap = dict[str, list[Highlight]]


@dataclass
class BookDetails:
    """Book metadata from the Kobo content table."""

    title: str
    author: str
    read_status: ReadStatus = ReadStatus.UNOPENED
    publisher: str | None = None
    date_last_read: str | None = None
    percent_read: int | None = None
    isbn: str | None = None
    series: str | None = None
    series_number: str | None = None
    time_spent_reading: int | None = None
    description: str | None = None


def unique_highlights(chapters: ChapterMap) -> ChapterMap:
    """Drop repeated highlight texts within each chapter, keeping the first."""
    unique: ChapterMap = {}
    for chapter_name, highlights in chapters.items():
        seen: set[str] = set()
        unique[chapter_name] = []
        for highlight in highlights:
            if highlight.text not in seen:
                seen.add(highlight.text)
                unique[chapter_name].append(highlight)
    return unique


def vocabulary_terms(chapters: ChapterMap) -> list[str]:
    """All vocabulary highlight texts of a book, in chapter order."""
    return [
        highlight.text
        for highlights in chapters.values()
        for highlight in highlights
        if highlight.is_vocabulary
    ]
