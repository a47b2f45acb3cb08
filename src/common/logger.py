"""Logging utilities with rich output for the command line.

Every module gets its logger from here so that output goes through one
rich console.

Usage:
    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Writing 'Dune.md'")
    logger.warning("Definition request failed for 'château'")
"""

import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler

# Global console instance for consistent output
console = Console()

# Names of the loggers handed out by get_logger
_module_loggers: set[str] = set()


def _rich_handler(show_time: bool = False, show_path: bool = False) -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        markup=True,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def get_logger(
    name: str,
    level: str | None = None,
    show_time: bool = False,
    show_path: bool = False,
) -> logging.Logger:
    """Get a configured logger with rich output.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, uses environment variable LOG_LEVEL or defaults to INFO.
        show_time: Show timestamp in log output
        show_path: Show file path in log output

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding multiple handlers if logger already configured
    if logger.handlers:
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")

    logger.setLevel(level.upper())
    logger.addHandler(_rich_handler(show_time=show_time, show_path=show_path))
    _module_loggers.add(name)

    # Propagate so pytest caplog sees the records
    logger.propagate = True

    return logger


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging once, at the CLI entry point.

    Loggers from get_logger already print to the console; this sets their
    level and optionally copies every record to a file through the root
    logger.

    Args:
        level: Default logging level; LOG_LEVEL overrides it
        log_file: Optional file path to also log to a file
    """
    level = os.getenv("LOG_LEVEL", level).upper()

    for name in _module_loggers:
        logging.getLogger(name).setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)


def success(message: str) -> None:
    """Print a success line with a green checkmark."""
    console.print(f"[green]✓[/green] {message}")


def error(message: str) -> None:
    """Print an error line with a red X icon on stderr."""
    Console(file=sys.stderr).print(f"[red]✗[/red] {message}")
