"""Logging setup shared by every module.

Usage::

    from electron_stage.core.logger import setup_logger

    logger = setup_logger(__name__)
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler

from electron_stage.config import env

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_LOG_FILE_NAME = "electron-stage.log"


class CustomLogger(logging.Logger):
    """Logger with helpers that attach a traceback only when debugging."""

    def error_trace(self, msg, *args, **kwargs) -> None:
        kwargs.setdefault("exc_info", env.DEBUG)
        self.error(msg, *args, **kwargs)

    def warning_trace(self, msg, *args, **kwargs) -> None:
        kwargs.setdefault("exc_info", env.DEBUG)
        self.warning(msg, *args, **kwargs)


def _resolve_level(level_name: str) -> int:
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def setup_logger(name: str) -> CustomLogger:
    """Return a configured logger, adding handlers only once per name."""
    previous_class = logging.getLoggerClass()
    logging.setLoggerClass(CustomLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(previous_class)

    if logger.handlers:
        return logger  # type: ignore[return-value]

    logger.setLevel(_resolve_level(env.LOG_LEVEL))
    logger.propagate = False
    formatter = logging.Formatter(_LOG_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if env.ENABLE_LOGGING:
        try:
            env.LOG_DIR.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                env.LOG_DIR / _LOG_FILE_NAME,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
            )
        except OSError as e:
            logger.warning("File logging disabled (%s): %s", env.LOG_DIR, e)
        else:
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger  # type: ignore[return-value]
