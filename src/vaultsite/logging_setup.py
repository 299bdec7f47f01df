"""Logging setup for the command line: one stream handler on the ``vaultsite`` logger.

Library modules only create module-level loggers; handlers are attached here,
once, by the CLI.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOGGER_NAME = "vaultsite"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: int = logging.INFO, log_file: Path | None = None) -> logging.Logger:
    """Attach handlers to the package logger; calling it again only updates the level."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)
    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(formatter)
        logger.addHandler(fh)
    return logger
