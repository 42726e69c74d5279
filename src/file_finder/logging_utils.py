"""Logging helpers for selection progress tracking."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure the file_finder logger once for the process.

    Console output goes to stderr so stdout stays free for the JSON report.
    When ``log_file`` is given, DEBUG and above are also appended there.
    Child loggers (discovery, ordering, selector) propagate to this one.
    """
    normalized = (level or "INFO").upper()
    log_level = getattr(logging, normalized, logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logger = logging.getLogger("file_finder")
    logger.setLevel(logging.DEBUG if log_file else log_level)
    logger.propagate = False

    console = next(
        (handler for handler in logger.handlers if not isinstance(handler, logging.FileHandler)),
        None,
    )
    if console is None:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console)
    console.setLevel(log_level)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        target = os.path.abspath(log_file)
        if not any(
            isinstance(handler, logging.FileHandler) and handler.baseFilename == target
            for handler in logger.handlers
        ):
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(file_handler)

    return logger
