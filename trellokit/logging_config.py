"""Centralized logging configuration for trellokit."""

from __future__ import annotations

import logging
import sys

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def setup_logging(level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Configure the ``trellokit`` logger tree.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR). Unknown names fall back to INFO.
        log_file: Optional path to log file. If provided, records go to both
                  stderr and the file.

    Returns:
        The configured ``trellokit`` logger.

    Example:
        >>> setup_logging("DEBUG")  # Trace requests and card parsing
        >>> setup_logging("INFO", "trellokit.log")
    """
    logger = logging.getLogger("trellokit")
    logger.setLevel(LEVELS.get(level.upper(), logging.INFO))

    # Calling setup twice must not duplicate output
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
