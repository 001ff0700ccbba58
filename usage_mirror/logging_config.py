"""
Usage Mirror — Structured logging configuration.

Every module obtains its logger with ``structlog.get_logger(...)``; this
module wires the processor chain once per process.  JSON lines go to stderr
so that command-line output on stdout stays machine-readable.
"""

from __future__ import annotations

import logging
import sys

import structlog

from usage_mirror.config import get_settings


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure structlog for the current process.

    Parameters
    ----------
    level:
        Log level name (``"DEBUG"``, ``"INFO"``, ...).  Defaults to
        ``Settings.LOG_LEVEL``.
    fmt:
        ``"json"`` or ``"console"``.  Defaults to ``Settings.LOG_FORMAT``.
    """
    settings = get_settings()
    level_name = (level or settings.LOG_LEVEL).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    renderer = (
        structlog.dev.ConsoleRenderer()
        if (fmt or settings.LOG_FORMAT) == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
