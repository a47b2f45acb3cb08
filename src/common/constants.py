"""Shared constants for kobo-highlights-sync.

For environment-based configuration (database path, model, etc.), use the env module:
    from common.env import env
    db_path = env.kobo_db_path()
"""

from pathlib import Path

# Output directory used when STORAGE_FOLDER is not set
DEFAULT_STORAGE_FOLDER = Path("./highlights")

# Markers bracketing the machine-owned region of each chapter section
START_MARKER = "%% kobo-highlights-start %%"
END_MARKER = "%% kobo-highlights-end %%"

# Separator between a vocabulary term and its definition (`- term ::: definition`)
DEFINITION_SEPARATOR = ":::"

# Definition used whenever none could be obtained
DEFINITION_PLACEHOLDER = "..."

# Key of the user block that is not attached to any chapter
TRAILING_KEY = "__trailing__"

# Kobo Bookmark.Color value for vocabulary highlights; any other value is a quote
VOCABULARY_COLOR = 1

# Chapter name used when a bookmark cannot be matched to a content row
UNKNOWN_CHAPTER = "Unknown Chapter"

DOCUMENT_EXTENSION = ".md"

# Language detection
LANGUAGE_SAMPLE_SIZE = 50
FRENCH_ACCENT_RATIO = 0.3
FRENCH_ACCENTS: frozenset[str] = frozenset("àâäæçéèêëïîôùûüÿœ")
SUPPORTED_LANGUAGES: set[str] = {"en", "fr"}
