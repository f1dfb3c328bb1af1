"""Logger setup for the interactive calculator."""

from __future__ import annotations

import logging
import os
import sys
from typing import Final

DEFAULT_LOG_LEVEL: Final[str] = os.environ.get("MATCALC_LOG_LEVEL", "WARNING").upper()


def setup_logging(level: int | str = DEFAULT_LOG_LEVEL, log_file: str | None = None) -> logging.Logger:
    """Configure the ``matcalc`` logger.

    Args:
        level: logging level name or number (e.g. ``"DEBUG"``, ``logging.INFO``).
        log_file: optional path that receives the same records as stderr.
    """
    logger = logging.getLogger("matcalc")
    logger.setLevel(level)

    # Re-running setup must not duplicate output.
    if logger.handlers:
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    # stderr, so results on stdout stay clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
