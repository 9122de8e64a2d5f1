"""Diagnostic logging to a rotating file.

The terminal belongs to the full-screen UI, so nothing is logged to stderr.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from platformdirs import user_log_dir

APP_NAME = "pomoterm"
LOG_FILE = "pomoterm.log"
MAX_BYTES = 1024 * 1024
BACKUP_COUNT = 2


def default_log_path() -> Path:
    return Path(user_log_dir(APP_NAME)) / LOG_FILE


def configure_logging(log_file: Optional[Path] = None, debug: bool = False) -> Path:
    """Attach a rotating file handler to the package logger.

    Returns:
        Path of the log file.
    """
    path = log_file or default_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    logger = logging.getLogger(APP_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()
    logger.addHandler(handler)
    logger.propagate = False
    return path
