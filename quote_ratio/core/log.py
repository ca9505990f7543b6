"""
Structured logging for the analysis pipeline.

structlog is configured once on first import. Output goes to stderr so it never
interleaves with the progress line written to stdout. ``LOG_FORMAT=json``
switches to one JSON object per line; the default is the console renderer.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.WARNING)

LOG_FORMAT = os.getenv("LOG_FORMAT", "console").strip().lower()


def configure_structlog(level: int = LOG_LEVEL_VALUE, fmt: str = LOG_FORMAT) -> None:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_structlog()


LEVELS = ("debug", "info", "warning", "error")


def set_level(name: str) -> None:
    """Reconfigure the minimum level, e.g. from a ``--log-level`` flag."""
    if name.lower() not in LEVELS:
        raise ValueError(f"Unknown log level {name!r} (choose from {', '.join(LEVELS)})")
    configure_structlog(level=getattr(logging, name.upper()))


def get_logger(name: str) -> Any:
    # stays lazy so a later set_level() reaches loggers created at import time
    return structlog.get_logger(name, logger_name=name)


__all__ = ["LEVELS", "configure_structlog", "get_logger", "set_level"]
