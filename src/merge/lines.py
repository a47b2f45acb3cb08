"""Classify lines of a book document.

The document grammar is line based:

    ## <chapter>                   chapter heading
    %% kobo-highlights-start %%    opens the machine-owned region
    %% kobo-highlights-end %%      closes it
    - <term> ::: <definition>      vocabulary term with its definition
    anything else                  plain text

Every parser in this package goes through classify_line so that the
grammar is defined in one place.
"""

import re
from dataclasses import dataclass

from common.constants import END_MARKER, START_MARKER

HEADING_PATTERN = re.compile(r"^##(?!#)\s+(.*)$")
VOCAB_PATTERN = re.compile(r"^-\s+(.+?)\s*:::\s*(.+?)\s*$")


@dataclass(frozen=True)
class Heading:
    name: str

    @property
    def key(self) -> str:
        """Chapter name as used for comparisons."""
        return self.name.strip()


@dataclass(frozen=True)
class StartMarker:
    pass


@dataclass(frozen=True)
class EndMarker:
    pass


@dataclass(frozen=True)
class VocabLine:
    term: str
    definition: str


@dataclass(frozen=True)
class PlainLine:
    text: str


Line = Heading | StartMarker | EndMarker | VocabLine | PlainLine


def classify_line(line: str) -> Line:
    """Classify a single line (without its newline).

    Markers are recognized anywhere in the line and take precedence over
    headings, which take precedence over vocabulary lines.
    """
    if START_MARKER in line:
        return StartMarker()
    if END_MARKER in line:
        return EndMarker()

    heading = HEADING_PATTERN.match(line)
    if heading:
        return Heading(heading.group(1))

    vocab = VOCAB_PATTERN.match(line.strip())
    if vocab:
        return VocabLine(term=vocab.group(1).strip(), definition=vocab.group(2).strip())

    return PlainLine(line)


def split_lines(text: str) -> list[str]:
    """Split a document into lines, accepting both LF and CRLF endings."""
    return text.replace("\r\n", "\n").split("\n")
