"""Read cached vocabulary definitions back from an existing document."""

from collections.abc import Iterable

from common.constants import DEFINITION_PLACEHOLDER

from .lines import VocabLine, classify_line, split_lines


def read_definition_cache(text: str | None) -> dict[str, str]:
    """Collect `- term ::: definition` lines into a term -> definition map.

    Malformed lines are ignored. The first definition of a term wins.

    Args:
        text: Full text of an existing document, or None if there is none

    Returns:
        Cached definitions (empty for an empty or missing document)
    """
    if not text:
        return {}

    cache: dict[str, str] = {}
    for line in split_lines(text):
        parsed = classify_line(line)
        if isinstance(parsed, VocabLine):
            cache.setdefault(parsed.term, parsed.definition)
    return cache


def missing_terms(terms: Iterable[str], cache: dict[str, str]) -> list[str]:
    """Terms that still need a definition, unique and in first-seen order.

    A term cached with the placeholder counts as missing so that a failed
    request is retried on the next run.
    """
    missing = []
    for term in dict.fromkeys(terms):
        if cache.get(term, DEFINITION_PLACEHOLDER) == DEFINITION_PLACEHOLDER:
            missing.append(term)
    return missing


def merge_definitions(cache: dict[str, str], fetched: dict[str, str]) -> dict[str, str]:
    """Add fetched definitions to the cache without overwriting real ones.

    A fetched definition only replaces a cached placeholder, and a fetched
    placeholder never replaces anything, so the result always contains
    every cached term.
    """
    merged = dict(cache)
    for term, definition in fetched.items():
        if merged.get(term, DEFINITION_PLACEHOLDER) == DEFINITION_PLACEHOLDER:
            merged[term] = definition
    return merged
