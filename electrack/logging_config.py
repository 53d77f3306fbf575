"""
Structured logging setup built on structlog.
Call sites log an event name plus key/value context.
"""

import logging
import sys

import structlog

from electrack.config import settings


def setup_logging(level: str = None, log_format: str = None) -> None:
    """
    Configure structlog and the standard library root logger.
    """
    level_name = (level or settings.log_level).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    if (log_format or settings.log_format) == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = None):
    """Return a structlog logger bound to the module name."""
    return structlog.get_logger(name)
