"""Merge freshly rendered documents with what is already on disk."""

from .definitions import merge_definitions, missing_terms, read_definition_cache
from .legacy import merge_append_only
from .user_content import extract_user_content, reinsert_user_content

__all__ = [
    "extract_user_content",
    "merge_append_only",
    "merge_definitions",
    "missing_terms",
    "read_definition_cache",
    "reinsert_user_content",
]
