"""Logging configuration for edit-guard with log rotation.

Hook processes talk to the host over stdout/stderr, so log records only ever
go to a rotating file:

- Max file size: 1 MB per log file
- Backup count: 3 (keeps edit-guard.log, edit-guard.log.1, ..., edit-guard.log.3)
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

DEFAULT_LOG_FILE = "edit-guard.log"
DEFAULT_MAX_BYTES = 1024 * 1024
DEFAULT_BACKUP_COUNT = 3
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

ROOT_LOGGER = "edit_guard"


def configure_logging(
    log_dir: Path,
    log_level: int | str = logging.INFO,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> logging.Logger:
    """Configure the edit_guard logger tree with a rotating file handler.

    If the log directory cannot be created the logger keeps only a
    NullHandler; a hook must never fail because its log is unwritable.

    Returns:
        The root edit_guard logger instance.
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(log_level)

    # Clear existing handlers to avoid duplicates on reconfiguration
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    except OSError:
        root_logger.addHandler(logging.NullHandler())
    else:
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
        root_logger.addHandler(file_handler)

    root_logger.propagate = False
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for an edit-guard component.

    Example:
        logger = get_logger("gate")
        # Logs as: edit_guard.gate - INFO - ...
    """
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
