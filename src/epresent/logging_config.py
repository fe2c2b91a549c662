"""Logging configuration for epresent.

Slides are drawn on the terminal, so a running presentation can send its
log to a file instead of stderr with ``log_file``.
"""

import sys
from pathlib import Path

from loguru import logger


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure loguru with one sink, stderr or ``log_file``."""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    if log_file is None:
        logger.add(sys.stderr, level=level, format="{level.icon} {message}")
        return
    logger.add(
        log_file,
        level=level,
        format="{time:HH:mm:ss} {level: <8} {name}:{function} {message}",
        rotation="1 MB",
    )
