"""Centralized logging configuration for Store Collections.

Provides the application root logger with console output and optional file
logging. Modules create child loggers below ``storecoll``.

``setup_logging`` may be called again (for example after the settings file
changed the log level); it reconfigures the handlers it installed instead of
stacking new ones.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

__all__ = ["LOG_FILE_NAME", "logger", "setup_logging"]

logger = logging.getLogger("storecoll")

LOG_FILE_NAME = "storecollections.log"

_CONSOLE_HANDLER = "storecoll.console"
_FILE_HANDLER = "storecoll.file"

_FORMATTER = logging.Formatter(
    fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)


def _find_handler(name: str) -> logging.Handler | None:
    for handler in logger.handlers:
        if handler.get_name() == name:
            return handler
    return None


def _attach_file_handler(log_file: Path) -> None:
    current = _find_handler(_FILE_HANDLER)
    if isinstance(current, logging.FileHandler) and Path(current.baseFilename) == log_file.resolve():
        return
    if current is not None:
        logger.removeHandler(current)
        current.close()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.set_name(_FILE_HANDLER)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(_FORMATTER)
    logger.addHandler(file_handler)


def setup_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
) -> None:
    """Configure the root application logger.

    The console follows ``level``; the log file always records DEBUG and
    above. A repeated call applies the new level to the existing console
    handler and, when ``log_file`` points elsewhere, swaps the file handler.

    Args:
        level: The console logging level (default: INFO).
        log_file: Optional path to a log file. If provided, logs will
            also be written to this file. None keeps any file already
            attached.
    """
    console_handler = _find_handler(_CONSOLE_HANDLER)
    if console_handler is None:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.set_name(_CONSOLE_HANDLER)
        console_handler.setFormatter(_FORMATTER)
        logger.addHandler(console_handler)
    console_handler.setLevel(level)

    if log_file is not None:
        _attach_file_handler(log_file)

    # The logger gates all handlers, so it must let DEBUG through to the file
    logger.setLevel(logging.DEBUG if _find_handler(_FILE_HANDLER) is not None else level)
