"""Logging utilities.

We use Python's standard `logging` module with a plain structured format.

- Logs go to stderr (stdout carries the processed text).
- Optionally also to a UTF-8 log file.

Calling setup_logging again replaces the handlers it installed earlier.
"""

from __future__ import annotations
import logging
import os
from typing import List, Optional

_HANDLERS: List[logging.Handler] = []


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """
    Setup logging configuration.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a log file (parent directories are created)
    """
    root = logging.getLogger()
    for handler in _HANDLERS:
        root.removeHandler(handler)
        handler.close()
    _HANDLERS.clear()

    root.setLevel(getattr(logging, level.upper()))

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    # File
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(fmt)
        _HANDLERS.append(fh)

    # Console
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    _HANDLERS.append(ch)

    for handler in _HANDLERS:
        root.addHandler(handler)
