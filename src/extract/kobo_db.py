"""Read-only access to a KoboReader.sqlite export.

Wraps sqlite3 the same way across the package: connect, query as dicts,
close. The database is opened read-only so an export copied from a device
is never modified.
"""

import sqlite3
from pathlib import Path
from typing import Any

from common.logger import get_logger

from .types import SourceError, SourceNotFoundError, SourceReadError

logger = get_logger(__name__)

Row = dict[str, Any]


class KoboDatabase:
    """Read-only SQLite connection to a Kobo database."""

    def __init__(self, db_path: str | Path | None):
        """Initialize the database wrapper.

        Args:
            db_path: Path to KoboReader.sqlite (None when not configured)
        """
        self.db_path = Path(db_path) if db_path else None
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> None:
        """Open the database.

        Raises:
            SourceNotFoundError: If no path is configured or the file is missing
            SourceReadError: If SQLite cannot open the file
        """
        if self.db_path is None:
            raise SourceNotFoundError("No Kobo database selected (set KOBO_DB_PATH or --db)")
        if not self.db_path.is_file():
            raise SourceNotFoundError(f"Kobo database not found: {self.db_path}")

        try:
            self._conn = sqlite3.connect(f"{self.db_path.resolve().as_uri()}?mode=ro", uri=True)
            self._conn.row_factory = sqlite3.Row
        except sqlite3.Error as e:
            raise SourceReadError(f"Failed to open Kobo database {self.db_path}: {e}") from e

        logger.debug(f"Connected to Kobo database at {self.db_path}")

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def fetchall(self, query: str, params: tuple = ()) -> list[Row]:
        """Execute a query and fetch all results as dictionaries."""
        if not self._conn:
            raise SourceError("No active connection")
        try:
            cursor = self._conn.execute(query, params)
            return [dict(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise SourceReadError(f"Query failed on {self.db_path}: {e}") from e

    def fetchone(self, query: str, params: tuple = ()) -> Row | None:
        """Execute a query and fetch the first result as a dictionary."""
        rows = self.fetchall(query, params)
        return rows[0] if rows else None

    def column_names(self, table: str) -> set[str]:
        """Get the column names of a table (empty if the table does not exist)."""
        return {row["name"] for row in self.fetchall(f"PRAGMA table_info({table})")}

    def __enter__(self) -> "KoboDatabase":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        status = "connected" if self._conn else "disconnected"
        return f"KoboDatabase(db_path={self.db_path}, status={status})"
