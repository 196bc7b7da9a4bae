"""
Logging setup for the bdiff CLI.

Console output goes through rich on stderr so stdout carries nothing but
the dump. An optional log file captures everything at DEBUG.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    name: str = "bdiff",
    level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
    rich_console: bool = True,
) -> logging.Logger:
    """
    Configure and return the package logger.

    Calling it again returns the logger as already configured, so the
    first caller decides the handlers.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(level)
    logger.propagate = False

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))
        logger.addHandler(fh)

    if rich_console:
        ch = RichHandler(
            console=Console(stderr=True),
            level=console_level,
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        ch.setLevel(console_level)
        logger.addHandler(ch)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    logger.debug("Logger initialized: %s (console level %s, log file %s)",
                 name, logging.getLevelName(console_level), log_file)
    return logger


def reset_logging(name: str = "bdiff"):
    """Drop and close every handler on the package logger."""
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
