"""Logging configuration for the console application."""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from cpce_prep.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(settings: Settings | None = None) -> None:
    """Send all records to a rotating log file.

    The console belongs to the rich UI, so nothing is attached to stdout.
    """
    settings = settings or get_settings()
    log_file = Path(settings.log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    # Avoid stacking handlers when called twice
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=settings.log_max_bytes,
        backupCount=settings.log_backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(file_handler)

    logging.getLogger(__name__).info("Logging initialised at %s", log_file)
