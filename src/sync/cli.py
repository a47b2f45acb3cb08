#!/usr/bin/env python3
"""CLI for syncing Kobo highlights into markdown documents."""

import argparse
import sys
from pathlib import Path

from rich.table import Table

from common.env import env
from common.logger import console, error, get_logger, setup_logging, success
from enrich.clients.ollama import OllamaClient
from extract.highlight_service import HighlightService
from extract.kobo_db import KoboDatabase
from extract.types import SourceError
from render.template import load_template

from .orchestrator import LibrarySync
from .settings import MergeStrategy, SyncSettings
from .storage import StorageError

logger = get_logger(__name__)


def settings_from_args(args) -> SyncSettings:
    """Environment settings with command-line overrides applied."""
    settings = SyncSettings.from_env()

    if args.db is not None:
        settings.db_path = args.db
    if getattr(args, "output", None) is not None:
        settings.storage_folder = args.output
    if getattr(args, "template", None) is not None:
        settings.template = load_template(args.template)
    if getattr(args, "sort_by_progress", False):
        settings.sort_by_chapter_progress = True
    if getattr(args, "import_all_books", False):
        settings.import_all_books = True
    if getattr(args, "model", None) is not None:
        settings.ollama_model = args.model
    if getattr(args, "ollama_url", None) is not None:
        settings.ollama_base_url = args.ollama_url.rstrip("/")
    if getattr(args, "strategy", None) is not None:
        settings.strategy = MergeStrategy(args.strategy)
    if getattr(args, "keep_orphans", False):
        settings.keep_orphans = True

    return settings


def cmd_run(args):
    """Extract highlights and create or update one document per book.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        settings = settings_from_args(args)
    except ValueError as e:
        error(str(e))
        return 1

    client = OllamaClient(
        settings.ollama_model,
        base_url=settings.ollama_base_url,
        max_workers=settings.definition_workers,
    )
    if not client.configured:
        logger.info("No Ollama model configured, vocabulary definitions are left as placeholders")

    try:
        with KoboDatabase(settings.db_path) as db:
            sync = LibrarySync(settings, definition_client=client)
            report = sync.run(HighlightService(db))
    except (SourceError, StorageError) as e:
        error(f"Failed to extract highlights: {e}")
        return 1
    finally:
        client.close()

    if report.template_errors:
        logger.warning(
            f"{len(report.template_errors)} document(s) contain the template error message, "
            "fix the template and run again"
        )

    plural = "" if report.total == 1 else "s"
    success(
        f"Extracted highlights from {report.total} book{plural} "
        f"({len(report.created)} created, {len(report.updated)} updated) "
        f"into {settings.storage_folder}"
    )
    return 0


def cmd_colors(args):
    """Show how many highlights use each Kobo highlight color."""
    db_path = args.db if args.db is not None else env.kobo_db_path()

    try:
        with KoboDatabase(db_path) as db:
            counts = HighlightService(db).get_color_counts()
    except SourceError as e:
        error(str(e))
        return 1

    if not counts:
        logger.warning("Bookmark table has no Color column; all highlights are imported as quotes")
        return 0

    table = Table(title="Highlight colors")
    table.add_column("Color", justify="right")
    table.add_column("Imported as")
    table.add_column("Count", justify="right")
    for color, count in counts:
        kind = "vocabulary" if color == 1 else "quote"
        table.add_row("NULL" if color is None else str(color), kind, str(count))
    console.print(table)
    return 0


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Sync Kobo highlights and vocabulary into markdown documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Create or update one document per book",
        description=(
            "Read KoboReader.sqlite and write one markdown document per book.\n\n"
            "Existing documents are updated in place: generated sections are\n"
            "refreshed and text you added after a chapter is kept.\n\n"
            "Examples:\n"
            "  kobo-sync run --db /Volumes/KOBOeReader/.kobo/KoboReader.sqlite\n"
            "  kobo-sync run --db KoboReader.sqlite --output vault/books --model llama3.2\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    run_parser.add_argument(
        "--db", type=Path, default=None, help="KoboReader.sqlite (default: $KOBO_DB_PATH)"
    )
    run_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Folder for the documents (default: $STORAGE_FOLDER or ./highlights)",
    )
    run_parser.add_argument(
        "--template", type=Path, default=None, help="Jinja2 template (default: built-in)"
    )
    run_parser.add_argument(
        "--sort-by-progress",
        action="store_true",
        help="Order highlights by chapter progress instead of creation date",
    )
    run_parser.add_argument(
        "--import-all-books",
        action="store_true",
        help="Also write documents for books without highlights",
    )
    run_parser.add_argument(
        "--model", default=None, help="Ollama model for vocabulary definitions"
    )
    run_parser.add_argument("--ollama-url", default=None, help="Ollama server URL")
    run_parser.add_argument(
        "--strategy",
        choices=[s.value for s in MergeStrategy],
        default=None,
        help="Merge strategy for existing documents (default: rerender)",
    )
    run_parser.add_argument(
        "--keep-orphans",
        action="store_true",
        help="Keep notes of chapters that are no longer in the database",
    )
    run_parser.set_defaults(func=cmd_run)

    colors_parser = subparsers.add_parser(
        "colors", help="Show highlight color counts in the database"
    )
    colors_parser.add_argument(
        "--db", type=Path, default=None, help="KoboReader.sqlite (default: $KOBO_DB_PATH)"
    )
    colors_parser.set_defaults(func=cmd_colors)

    args = parser.parse_args()
    setup_logging(level=args.log_level, log_file=args.log_file)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
