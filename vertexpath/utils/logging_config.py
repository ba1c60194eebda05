"""Logging for the API process: a rotating log file plus stdout."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FILE = "vertexpath.log"

# Server loggers share our handlers so one file holds the whole request story
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def resolve_level(level: int | str) -> int:
    """Numeric level for ``level``; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    log_dir: Optional[str] = "logs",
    level: int | str = logging.INFO,
    console: bool = True,
) -> logging.Logger:
    """Configure the ``vertexpath`` logger.

    An empty ``log_dir`` disables the file handler (containers usually log
    to stdout only). Calling this again replaces the previous handlers.
    """
    level = resolve_level(level)
    handlers: list[logging.Handler] = []

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        # 5MB per file, 3 backups
        handlers.append(
            RotatingFileHandler(
                log_path / LOG_FILE,
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
        )
    if console:
        handlers.append(logging.StreamHandler(sys.stdout))

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logger = logging.getLogger("vertexpath")
    logger.setLevel(level)
    logger.handlers = list(handlers)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = list(handlers)
        server_logger.propagate = False

    # SQL echo is far too noisy below WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(max(level, logging.WARNING))

    return logger
