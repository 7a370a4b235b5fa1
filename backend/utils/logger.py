"""
WatchCompile Structured Logging Module.

structlog setup for the watcher: console output for interactive runs,
JSON lines when LOG_FORMAT=json.
Requires Python 3.11+.
"""

import logging

import structlog
from structlog.types import Processor

from utils.config import get_settings


def _renderer(log_format: str) -> list[Processor]:
    if log_format == "json":
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(level: str | None = None) -> None:
    """
    Configure structured logging for the watcher.

    Call this once at startup, before the first pass.

    Args:
        level: Overrides LOG_LEVEL when given (e.g. "DEBUG" from the CLI)
    """
    settings = get_settings().logging
    level_no = getattr(logging, (level or settings.level).upper())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False),
            *_renderer(settings.format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, named after the calling module or class."""
    return structlog.get_logger(name)


logger = get_logger("watch_compile")


class LoggerMixin:
    """Gives a class a ``self.log`` logger named after the class."""

    @property
    def log(self) -> structlog.stdlib.BoundLogger:
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger
