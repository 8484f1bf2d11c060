"""Logging configuration applied once at process start."""

import logging
from logging.handlers import RotatingFileHandler

from .config import LoggingConfig


def setup_logging(config: LoggingConfig, verbose: bool = False):
    """Configure the root logger from a LoggingConfig."""
    level = logging.DEBUG if verbose else getattr(logging, config.level.upper(), logging.INFO)

    handlers = [logging.StreamHandler()]
    if config.file_path:
        handlers.append(RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
        ))

    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=handlers,
        force=True,
    )

    # uvicorn access lines are noisy at INFO for a polling dashboard
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
