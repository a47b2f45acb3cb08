"""Shared types and exceptions for reading the Kobo database."""

from enum import IntEnum


class ReadStatus(IntEnum):
    """Kobo content.ReadStatus values."""

    UNOPENED = 0
    READING = 1
    READ = 2


class SourceError(Exception):
    """Base exception for source database operations."""

    pass


class SourceNotFoundError(SourceError):
    """The source database path is unset or does not exist."""

    pass


class SourceReadError(SourceError):
    """Error querying the source database."""

    pass
