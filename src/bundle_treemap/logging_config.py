"""Logging setup for the bundle-treemap CLI.

All log output goes to stderr through rich; stdout is reserved for the JSON
payload of ``bundle-treemap build``.
"""

import logging
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "bundle_treemap"

FILE_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def log_level(verbose: bool = False, quiet: bool = False) -> int:
    """``quiet`` wins over ``verbose``; warnings and up otherwise."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def _stderr_handler(verbose: bool) -> logging.Handler:
    # Script URLs may contain [brackets], so rich markup stays off.
    return RichHandler(
        console=Console(stderr=True),
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        show_path=verbose,
        log_time_format="[%X]",
    )


def _file_handler(log_file: str) -> logging.Handler:
    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """Install the stderr handler (and an optional file handler) on the root logger.

    Calling it again replaces the handlers of the previous call.

    Returns:
        The ``bundle_treemap`` package logger
    """
    level = log_level(verbose, quiet)

    handlers: List[logging.Handler] = [_stderr_handler(verbose)]
    if log_file:
        handlers.append(_file_handler(log_file))

    logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    return logger
