"""Logging setup for the matching service"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Optional

from app.config import settings


# root logger of the app package; module loggers (app.utils.*, app.services.*) inherit it
LOGGER_NAME = "app"

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level_name: Optional[str] = None) -> int:
    """Level name ("debug", "INFO", ...) → logging level, INFO when unknown"""
    name = (level_name or settings.LOG_LEVEL or "INFO").upper()
    return getattr(logging, name, logging.INFO)


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)


def setup_logger(
    name: str = LOGGER_NAME,
    level: Optional[int] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the service logger

    Console output always; file output when a path is given or
    settings.LOG_FILE is set. Calling it again is a no-op.

    Args:
        name: logger name
        level: log level (settings.LOG_LEVEL when None)
        log_file: file path (settings.LOG_FILE when None)

    Returns:
        configured logger
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = resolve_level() if level is None else level
    log_file = log_file or settings.LOG_FILE
    logger.setLevel(level)

    _attach(logger, logging.StreamHandler(sys.stdout), level)
    if log_file:
        _attach(logger, logging.FileHandler(log_file, encoding="utf-8"), level)

    # no propagation to the root logger
    logger.propagate = False
    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    logger = logging.getLogger(name)
    return logger if logger.handlers else setup_logger(name)


@contextmanager
def log_timing(operation: str, logger: Optional[logging.Logger] = None):
    """
    Log the elapsed time of a block at DEBUG

    Usage:
        with log_timing("browse listings", logger):
            results = _apply_search_filters(...)
    """
    _logger = logger or get_logger()
    started = time.perf_counter()
    _logger.debug(f"[START] {operation}")
    try:
        yield
    finally:
        _logger.debug(f"[END] {operation} ({(time.perf_counter() - started) * 1000:.1f}ms)")


def log_funnel(logger: logging.Logger, operation: str, total: int, kept: int) -> None:
    """One-line summary of how many listings survived a pipeline"""
    ratio = (kept / total * 100) if total > 0 else 0
    logger.info(f"[{operation}] kept {kept} of {total} ({ratio:.1f}%)")
