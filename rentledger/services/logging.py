"""Logging setup shared by the API server and the backfill command.

Level and file come from Settings (LOG_LEVEL, LOG_FILE, including values read
from .env). Records go to stdout and to the log file in one format.
"""

import logging
import sys
from pathlib import Path

from rentledger.config import settings

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Server loggers that should go through the root handlers instead of their own
PROPAGATED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "alembic")


def resolve_level(name: str) -> int:
    """Map a level name to its logging constant, INFO when unknown."""
    return logging.getLevelNamesMapping().get(name.strip().upper(), logging.INFO)


def setup_server_logging(log_level: str | None = None, log_file: str | None = None) -> None:
    """Configure the root logger.

    Args:
        log_level: Level name (default: settings.log_level)
        log_file: Log file path (default: settings.log_file)

    Calling it again replaces the previous handlers.
    """
    level = resolve_level(log_level or settings.log_level)
    log_path = Path(log_file or settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout), logging.FileHandler(log_path)]

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in PROPAGATED_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True

    logging.getLogger(__name__).debug(
        "Logging configured: level=%s file=%s", logging.getLevelName(level), log_path
    )


__all__ = ["resolve_level", "setup_server_logging"]
