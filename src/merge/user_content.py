"""Preserve human-written text across re-renders of a book document.

Everything between a chapter's end marker and the next heading belongs to
the reader. extract_user_content collects those blocks from the existing
document and reinsert_user_content puts each one back after the same
chapter's end marker in the freshly rendered document. Text anywhere else
(front matter, inside the markers) is regenerated every run.
"""

from enum import Enum

from common.constants import TRAILING_KEY
from common.logger import get_logger

from .lines import EndMarker, Heading, StartMarker, classify_line, split_lines

logger = get_logger(__name__)


class ExtractorState(Enum):
    """Where the extractor is relative to the chapter markers."""

    BEFORE_CHAPTER = "before_chapter"
    MACHINE_REGION = "machine_region"
    USER_REGION = "user_region"


def extract_user_content(text: str | None) -> dict[str, str]:
    """Collect human-written blocks keyed by trimmed chapter name.

    Args:
        text: Existing document text

    Returns:
        Mapping from chapter name to its block; a block found with no chapter
        heading before it is stored under TRAILING_KEY. Empty blocks are
        dropped and a document without headings or markers yields {}.
    """
    blocks: dict[str, str] = {}
    if not text:
        return blocks

    state = ExtractorState.BEFORE_CHAPTER
    chapter: str | None = None
    collected: list[str] = []

    def flush() -> None:
        nonlocal collected
        block = "\n".join(collected).strip()
        collected = []
        if not block:
            return
        key = chapter if chapter is not None else TRAILING_KEY
        # Same heading twice: keep both blocks
        blocks[key] = f"{blocks[key]}\n\n{block}" if key in blocks else block

    for line in split_lines(text):
        parsed = classify_line(line)

        if isinstance(parsed, Heading):
            flush()
            chapter = parsed.key
            state = ExtractorState.MACHINE_REGION
        elif isinstance(parsed, EndMarker):
            state = ExtractorState.USER_REGION
        elif isinstance(parsed, StartMarker):
            state = ExtractorState.MACHINE_REGION
        elif state is ExtractorState.USER_REGION:
            collected.append(line)

    flush()

    if blocks:
        logger.debug(f"Found user content for {len(blocks)} section(s)")
    return blocks


def reinsert_user_content(
    rendered: str,
    user_content: dict[str, str],
    keep_orphans: bool = False,
) -> str:
    """Put preserved blocks back into a freshly rendered document.

    Each block is emitted once, after the first end marker of its chapter,
    separated by a blank line. The trailing block goes at the end.

    A block whose chapter is not in the rendered document any more (the
    chapter was renamed or removed upstream) is dropped with a warning, or
    appended at the end when keep_orphans is True.

    Args:
        rendered: Canonical document from the renderer
        user_content: Blocks from extract_user_content
        keep_orphans: Append blocks of vanished chapters instead of dropping them

    Returns:
        Final document text
    """
    if not user_content:
        return rendered

    output: list[str] = []
    chapter: str | None = None
    emitted: set[str] = set()

    for line in split_lines(rendered):
        parsed = classify_line(line)
        output.append(line)

        if isinstance(parsed, Heading):
            chapter = parsed.key
        elif isinstance(parsed, EndMarker) and chapter is not None:
            if chapter in user_content and chapter not in emitted:
                output.extend(["", user_content[chapter]])
                emitted.add(chapter)

    if TRAILING_KEY in user_content:
        output.extend(["", user_content[TRAILING_KEY]])

    orphans = [key for key in user_content if key != TRAILING_KEY and key not in emitted]
    for key in orphans:
        if keep_orphans:
            logger.warning(f"Chapter '{key}' no longer exists, keeping its notes at the end")
            output.extend(["", user_content[key]])
        else:
            logger.warning(f"Chapter '{key}' no longer exists, dropping its notes")

    return "\n".join(output)
