"""Environment configuration interface for kobo-highlights-sync.

This module provides a clean interface for accessing environment variables,
centralizing all environment variable access in one place.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from common.constants import DEFAULT_STORAGE_FOLDER

# Load environment variables from .env file if it exists
load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(name: str) -> bool:
    return os.getenv(name, "false").strip().lower() in _TRUTHY


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def kobo_db_path() -> Path | None:
        """Get the path to the KoboReader.sqlite export.

        Returns:
            Path to the database, or None when KOBO_DB_PATH is unset
        """
        value = os.getenv("KOBO_DB_PATH", "").strip()
        return Path(value) if value else None

    @staticmethod
    def storage_folder() -> Path:
        """Get the folder where book documents are written.

        Returns:
            Storage folder, defaults to ./highlights
        """
        value = os.getenv("STORAGE_FOLDER", "").strip()
        return Path(value) if value else DEFAULT_STORAGE_FOLDER

    @staticmethod
    def template_path() -> Path | None:
        """Get the path of a custom layout template.

        Returns:
            Template path, or None to use the built-in template
        """
        value = os.getenv("TEMPLATE_PATH", "").strip()
        return Path(value) if value else None

    @staticmethod
    def sort_by_chapter_progress() -> bool:
        """Whether highlights are ordered by chapter progress instead of creation time."""
        return _flag("SORT_BY_CHAPTER_PROGRESS")

    @staticmethod
    def import_all_books() -> bool:
        """Whether books without highlights also get a document."""
        return _flag("IMPORT_ALL_BOOKS")

    @staticmethod
    def ollama_model() -> str:
        """Get the Ollama model used for vocabulary definitions.

        Returns:
            Model name, empty string when definitions are disabled
        """
        return os.getenv("OLLAMA_MODEL", "").strip()

    @staticmethod
    def ollama_base_url() -> str:
        """Get the Ollama server URL.

        Returns:
            Base URL, defaults to http://localhost:11434
        """
        return os.getenv("OLLAMA_BASE_URL", "http://localhost:11434").rstrip("/")

    @staticmethod
    def definition_workers() -> int:
        """Get the number of concurrent definition requests per book.

        Returns:
            Worker count, defaults to 8
        """
        return int(os.getenv("DEFINITION_WORKERS", "8"))

    @staticmethod
    def merge_strategy() -> str:
        """Get the merge strategy for existing documents.

        Returns:
            'rerender' (default) or 'append'
        """
        return os.getenv("MERGE_STRATEGY", "rerender").strip().lower()

    @staticmethod
    def keep_orphaned_notes() -> bool:
        """Whether notes of chapters that disappeared upstream are kept."""
        return _flag("KEEP_ORPHANED_NOTES")


# Singleton instance for convenient access
env = Environment()
