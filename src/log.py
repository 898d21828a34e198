"""structlog configuration shared by scripts."""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.processors import StackInfoRenderer, TimeStamper, format_exc_info

shared_processors = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    TimeStamper(fmt="iso", utc=True),
    StackInfoRenderer(),
    format_exc_info,
]


def configure_logging(level: str = "INFO", *, json_output: bool = False) -> None:
    """Route structlog output to stderr with a console or JSON renderer."""
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False, pad_event=0)
    )
    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


__all__ = ["configure_logging"]
