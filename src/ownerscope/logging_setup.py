from __future__ import annotations

import logging
import os
import sys

from loguru import logger

LOG_LEVEL_ENV = "OWNERSCOPE_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
_VALID_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class InterceptHandler(logging.Handler):
    """Route stdlib ``logging`` records through loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def resolve_log_level(level: str | None = None) -> str:
    raw = level if level is not None else os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)
    candidate = raw.strip().upper()
    if candidate not in _VALID_LEVELS:
        return DEFAULT_LOG_LEVEL
    return candidate


def setup_logging(level: str | None = None) -> str:
    """Configure the stderr sink and enable ownerscope's own log records."""
    resolved = resolve_log_level(level)
    logger.remove()
    logger.add(
        sys.stderr,
        level=resolved,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=False,
        diagnose=False,
    )
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.enable("ownerscope")
    logger.debug("logging initialized with level {}", resolved)
    return resolved
