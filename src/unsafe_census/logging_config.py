"""
Logging configuration for unsafe-census.

Standard output belongs to the region diagnostic lines (and the JSON summary
that follows them), which are read line by line by other tools. Log records
never go there: they are rendered by rich on stderr and, on request, copied
as plain text to a log file.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .exceptions import InvalidConfigError

ROOT_LOGGER = "unsafe_census"

# ScanConfig.verbosity -> level of the unsafe_census logger tree.
VERBOSITY_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Route unsafe-census log records to stderr (and optionally a file).

    Args:
        verbosity: "quiet" (errors only), "normal" (warnings, such as
            files scanned despite syntax errors) or "verbose" (region
            entry/exit tracing)
        log_file: Optional file path to append plain-text records to

    Returns:
        The configured unsafe_census logger

    Raises:
        InvalidConfigError: If verbosity is not one of the known levels
    """
    level = VERBOSITY_LEVELS.get(verbosity)
    if level is None:
        raise InvalidConfigError("verbosity", verbosity, "expected quiet, normal or verbose")
    verbose = level == logging.DEBUG

    # Region text and paths contain brackets; markup would eat them.
    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=verbose,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the unsafe_census tree; bare module names are prefixed."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
