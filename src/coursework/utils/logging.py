"""Structured logging configuration using structlog.

Exercise output goes to stdout, so log lines are written to stderr and
filtered by level (WARNING unless the CLI runs with --verbose).

Example:
    >>> from coursework.utils.logging import setup_logging
    >>> setup_logging("DEBUG")
    >>> logger = structlog.get_logger(__name__)
    >>> logger.info("exercise_started", kind="hw", index=0)
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor


def _stderr_logger_factory(*args: object) -> structlog.PrintLogger:
    # Resolved per logger so redirected streams (tests, pipes) are honoured
    return structlog.PrintLogger(file=sys.stderr)


def setup_logging(level: str = "WARNING") -> None:
    """Configure structlog for the CLI.

    Args:
        level: Standard logging level name (DEBUG, INFO, WARNING, ...).
            Unknown names fall back to WARNING.
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.ConsoleRenderer(colors=False),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )


def bind_context(**kwargs: object) -> None:
    """Bind context variables (e.g. the selected exercise) to later log calls."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
