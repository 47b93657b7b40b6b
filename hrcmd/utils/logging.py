"""Simple logging utilities for hrcmd.

Most modules use the standard pattern:

    import logging
    logger = logging.getLogger(__name__)

The CLI configures the ``hrcmd`` logger once via ``setup_logging()``. The
Textual host uses ``get_logger()`` instead, because console handlers would
draw over the TUI.

This module builds the config path inline instead of importing
HRCMD_CONFIG_DIR to avoid circular imports during early startup.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from hrcmd.config.constants import DEFAULT_LOG_FILENAME

# Max log file size: 5MB, keep 2 backups
_MAX_LOG_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2

_DETAILED_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s"
_SIMPLE_FORMAT = "%(levelname)s: %(message)s"


def _default_log_file() -> Path:
    log_dir = Path.home() / ".config" / "hrcmd"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / DEFAULT_LOG_FILENAME


def get_logger(name: str) -> logging.Logger:
    """Get a logger that writes to the rotating hrcmd log file."""
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        handler = RotatingFileHandler(
            _default_log_file(), maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT
        )
        handler.setLevel(logging.INFO)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    return logger


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
    level: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging for the hrcmd CLI.

    Args:
        verbose: Enable verbose (DEBUG) logging on the console
        quiet: Only show errors on the console
        log_file: Optional log file path (defaults to ~/.config/hrcmd/hrcmd.log)
        level: Console level name used when neither verbose nor quiet is set
    """
    if verbose:
        console_level = logging.DEBUG
    elif quiet:
        console_level = logging.ERROR
    else:
        console_level = getattr(logging, (level or "WARNING").upper(), logging.WARNING)

    logger = logging.getLogger("hrcmd")
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(_SIMPLE_FORMAT))
    logger.addHandler(console_handler)

    try:
        file_handler = RotatingFileHandler(
            log_file or _default_log_file(),
            maxBytes=_MAX_LOG_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_DETAILED_FORMAT))
        logger.addHandler(file_handler)
    except OSError as e:
        # If we can't create the log file, continue without it
        logger.debug("Could not create log file: %s", e)

    return logger
