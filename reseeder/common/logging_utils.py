"""
Logging setup for the reseed server.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from reseeder.common.config import Config


def setup_logger(logger: logging.Logger, config: Config | None = None) -> None:
    """
    Configure a logger from the reseed server settings.

    Console output always goes to stderr. When ``config.LOG_FILE`` is set,
    records are also written to a size-rotated file, so a long-running
    server keeps its rebuild and telemetry history.

    Args:
        logger: The logger instance to configure
        config: Settings providing the level, format and optional log file
    """
    config = config or Config()
    logger.setLevel(config.LOG_LEVEL)
    if logger.handlers:
        return

    formatter = logging.Formatter(config.LOG_FORMAT)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.LOG_LEVEL)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if config.LOG_FILE:
        log_path = Path(config.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=config.LOG_FILE_MAX_BYTES,
            backupCount=config.LOG_FILE_BACKUPS,
        )
        file_handler.setLevel(config.LOG_LEVEL)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
