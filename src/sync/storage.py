"""One markdown document per book inside a storage folder."""

import hashlib
import re
from pathlib import Path

from common.constants import DOCUMENT_EXTENSION
from common.logger import get_logger

logger = get_logger(__name__)

INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f]')
# Windows refuses these names whatever the extension
RESERVED_NAMES = re.compile(r"^(con|prn|aux|nul|com\d|lpt\d)$", re.IGNORECASE)
MAX_FILENAME_LENGTH = 255


class StorageError(Exception):
    """Reading or writing a book document failed."""

    pass


def sanitize_filename(name: str) -> str:
    """Make a book title safe to use as a file name."""
    safe_name = INVALID_FILENAME_CHARS.sub("", name).strip()
    # Trailing dots and spaces are stripped silently by some filesystems
    safe_name = safe_name.rstrip(". ")
    if not safe_name or safe_name in {".", ".."} or RESERVED_NAMES.match(safe_name):
        safe_name = f"_{safe_name}"
    max_stem = MAX_FILENAME_LENGTH - len(DOCUMENT_EXTENSION)
    return safe_name[:max_stem]


class DocumentStorage:
    """Read and write book documents under a folder.

    Two titles can sanitize to the same file name (`A/B` and `AB`). The
    first title seen keeps the plain name; later ones get a suffix derived
    from the full title so that books never share a document.
    """

    def __init__(self, folder: str | Path):
        self.folder = Path(folder)
        self._claimed: dict[Path, str] = {}

    def path_for(self, book_title: str) -> Path:
        """Document path for a book title."""
        stem = sanitize_filename(book_title)
        path = self.folder / f"{stem}{DOCUMENT_EXTENSION}"

        owner = self._claimed.setdefault(path, book_title)
        if owner == book_title:
            return path

        digest = hashlib.sha256(book_title.encode("utf-8")).hexdigest()[:8]
        suffix = f" ({digest})"
        max_stem = MAX_FILENAME_LENGTH - len(DOCUMENT_EXTENSION) - len(suffix)
        unique_path = self.folder / f"{stem[:max_stem]}{suffix}{DOCUMENT_EXTENSION}"
        logger.warning(
            f"'{book_title}' and '{owner}' map to the same file name, "
            f"writing '{book_title}' to {unique_path.name}"
        )
        self._claimed[unique_path] = book_title
        return unique_path

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read(self, path: Path) -> str:
        """Read a document.

        Raises:
            StorageError: If the file cannot be read
        """
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def write(self, path: Path, content: str) -> None:
        """Write a document in one call, creating the folder if needed.

        Raises:
            StorageError: If the file cannot be written
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e
