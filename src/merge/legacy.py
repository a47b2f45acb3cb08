"""Append-only merge of new highlights into an existing document.

This is the alternative to re-rendering: the existing document is never
regenerated. Highlights already listed under the document's `## Highlights`
section are left alone and only highlights whose text is not there yet are
inserted at the end of their chapter (or in a new chapter section at the
end of the document). Existing lines are never modified, which also means
a placeholder definition written earlier is never replaced.
"""

import re

from common.constants import DEFINITION_PLACEHOLDER
from common.logger import get_logger
from extract.models import ChapterMap, Highlight

from .lines import Heading, VocabLine, classify_line, split_lines

logger = get_logger(__name__)

HIGHLIGHTS_SECTION = re.compile(r"^##\s+Highlights\s*$")
META_LINE = re.compile(r"^(##|#|\*Created:|\*\*Note:\*\*)")
QUOTE_LINE = re.compile(r"^>\s*Quote\s*:\s*(.*)$")
CARD_LINE = re.compile(r"^-\s*\[.\]\s*\*\*(.+?)\*\*\s*::(?!:)")


def normalize_text(text: str) -> str:
    """Collapse runs of whitespace (line breaks included) into single spaces."""
    return " ".join(text.split())


def highlight_identity(line: str) -> str:
    """Recover the highlight text from a rendered highlight line.

    Quote lines, flashcard lines and definition lines yield their text;
    any other line is its own identity. Identities are whitespace-normalized.
    """
    stripped = line.strip()

    quote = QUOTE_LINE.match(stripped)
    if quote:
        return normalize_text(quote.group(1))

    card = CARD_LINE.match(stripped)
    if card:
        return normalize_text(card.group(1))

    parsed = classify_line(stripped)
    if isinstance(parsed, VocabLine):
        return normalize_text(parsed.term)

    return normalize_text(stripped)


def format_highlight(highlight: Highlight, definitions: dict[str, str]) -> list[str]:
    """Lines for one highlight, each entry followed by a blank line.

    Multi-paragraph text is written on a single line so that it is
    recognized as one highlight on the next run.
    """
    text = normalize_text(highlight.text)
    if highlight.is_vocabulary:
        definition = normalize_text(definitions.get(highlight.text, DEFINITION_PLACEHOLDER))
        lines = [f"- [ ] **{text}** :: {definition} #card", ""]
    else:
        lines = [f"> Quote : {text}", ""]

    if highlight.note:
        lines.extend([f"**Note:** {normalize_text(highlight.note)}", ""])

    return lines


def _find_heading(lines: list[str], chapter: str) -> int | None:
    for index, line in enumerate(lines):
        if index == 0:
            continue
        parsed = classify_line(line)
        if isinstance(parsed, Heading) and parsed.key == chapter:
            return index
    return None


def _existing_highlights(lines: list[str]) -> tuple[bool, dict[str, set[str]]]:
    in_section = False
    chapter = ""
    present: dict[str, set[str]] = {}

    for line in lines:
        if HIGHLIGHTS_SECTION.match(line):
            in_section = True
            continue
        if not in_section:
            continue

        parsed = classify_line(line)
        if isinstance(parsed, Heading):
            chapter = parsed.key
            present.setdefault(chapter, set())
        elif chapter and line.strip() and not META_LINE.match(line):
            present[chapter].add(highlight_identity(line))

    return in_section, present


def merge_append_only(
    existing: str,
    chapters: ChapterMap,
    definitions: dict[str, str] | None = None,
) -> str:
    """Insert highlights that are not in the document yet.

    Args:
        existing: Current document text
        chapters: Highlights of the book from the source database
        definitions: Definitions for new vocabulary lines

    Returns:
        Document with the new highlights added
    """
    definitions = definitions or {}
    result = split_lines(existing) if existing.strip() else []
    has_section, present = _existing_highlights(result)

    if not has_section:
        if result:
            result.append("")
        result.extend(["## Highlights", ""])

    added = 0
    for chapter_name, highlights in chapters.items():
        chapter = chapter_name.strip()
        seen = present.setdefault(chapter, set())

        new_lines: list[str] = []
        for highlight in highlights:
            identity = normalize_text(highlight.text)
            if identity in seen:
                continue
            seen.add(identity)
            new_lines.extend(format_highlight(highlight, definitions))
            added += 1

        if not new_lines:
            continue

        heading_index = _find_heading(result, chapter)
        if heading_index is None:
            result.extend([f"## {chapter}", ""])
            result.extend(new_lines)
            continue

        insert_at = heading_index + 1
        while insert_at < len(result) and not isinstance(classify_line(result[insert_at]), Heading):
            insert_at += 1
        result[insert_at:insert_at] = new_lines

    logger.debug(f"Appended {added} new highlight(s)")
    return "\n".join(result)


def recorded_highlights(existing: str | None) -> dict[str, set[str]]:
    """Texts of the highlights already listed under `## Highlights`, per chapter."""
    if not existing:
        return {}
    _, present = _existing_highlights(split_lines(existing))
    return present


def pending_vocabulary(existing: str | None, chapters: ChapterMap) -> list[str]:
    """Vocabulary terms that an append-only merge would add to the document."""
    recorded = recorded_highlights(existing)
    return [
        highlight.text
        for chapter_name, highlights in chapters.items()
        for highlight in highlights
        if highlight.is_vocabulary
        and normalize_text(highlight.text) not in recorded.get(chapter_name.strip(), set())
    ]
