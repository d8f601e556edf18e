"""Logging configuration using loguru.

``setup_logging`` installs one stderr sink owned by the catalog and routes
stdlib ``logging`` (``markdown`` logs through it) into loguru.  It may be
called any number of times: each call replaces the catalog's own sink and
leaves sinks added by an embedding application alone.
"""

from __future__ import annotations

import contextlib
import logging
import sys

from loguru import logger

from flowcatalog.settings import get_settings

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Chatty stdlib loggers, capped at WARNING.
_QUIET_LOGGERS = ("MARKDOWN", "asyncio")

_sink_id: int | None = None


def _stderr_sink(message: str) -> None:
    # Resolved per message: the CLI test runner swaps sys.stderr between calls.
    sys.stderr.write(message)


def _loguru_level(record: logging.LogRecord) -> str | int:
    try:
        return logger.level(record.levelname).name
    except ValueError:
        return record.levelno


class _InterceptHandler(logging.Handler):
    """Forward stdlib records to loguru, tagged with the stdlib logger name."""

    def emit(self, record: logging.LogRecord) -> None:
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.bind(stdlib_logger=record.name).opt(depth=depth, exception=record.exc_info).log(
            _loguru_level(record), record.getMessage()
        )


def setup_logging(level: str | None = None) -> None:
    """Point loguru at stderr with *level* (default: ``FLOWCAT_LOG_LEVEL``)."""
    global _sink_id  # noqa: PLW0603

    level = (level or get_settings().log_level).upper()

    # Loguru's default stderr handler is id 0; later calls replace our own sink.
    with contextlib.suppress(ValueError):
        logger.remove(0 if _sink_id is None else _sink_id)
    _sink_id = logger.add(_stderr_sink, level=level, format=_FORMAT, colorize=sys.stderr.isatty())

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug("Logging initialised (level={})", level)
