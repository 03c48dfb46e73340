"""
RagBot - Logging
=================
Logger factory shared by every RagBot module, plus a timing helper for
the pipeline stages.

Verbosity comes from ``settings.LOG_LEVEL`` when set, otherwise from
``settings.ENV``:
  • ``"dev"``  → DEBUG
  • ``"prod"`` → WARNING

The same resolved level is handed to uvicorn so access logs and
application logs agree.

Usage:
    from ragbot.src.utils.logger import get_logger, log_duration
    logger = get_logger(__name__)

    with log_duration(logger, "Embed query"):
        ...
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager

from ragbot.config.settings import settings

_ENV_LEVEL_MAP = {
    "dev": logging.DEBUG,
    "prod": logging.WARNING,
}

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(env: str, override: str | None = None) -> int:
    """Map an explicit level name or, failing that, an ENV mode to a logging level."""
    if override:
        return logging.getLevelName(override.upper())
    return _ENV_LEVEL_MAP.get(env, logging.INFO)


_DEFAULT_LEVEL = resolve_level(settings.ENV, settings.LOG_LEVEL)


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Return the named logger, attaching the RagBot stdout handler once.

    Args:
        name:  Typically ``__name__`` of the calling module.
        level: Explicit level; defaults to the one resolved from settings.
    """
    resolved_level = level if level is not None else _DEFAULT_LEVEL
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(resolved_level)
        handler.setFormatter(logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT))
        logger.addHandler(handler)

        logger.propagate = False

    return logger


class Timing:
    """Elapsed milliseconds of a ``log_duration`` block, readable after it exits."""

    __slots__ = ("ms",)

    def __init__(self) -> None:
        self.ms = 0.0


@contextmanager
def log_duration(logger: logging.Logger, label: str, level: int = logging.DEBUG) -> Iterator[Timing]:
    """Time the enclosed block and log ``"<label> took N.Nms"``; nothing is logged if it raises."""
    timing = Timing()
    t_start = time.perf_counter()
    yield timing
    timing.ms = (time.perf_counter() - t_start) * 1000
    logger.log(level, "%s took %.1fms", label, timing.ms)
