"""Structured logging configuration using structlog.

Console output for interactive use, JSON for when the retrieval runs inside
another program. Everything goes to stderr so stdout stays free for the
timetable table or JSON dump.
"""

import logging
import sys
from typing import TextIO

import structlog


def setup_logging(
    json_output: bool = False,
    log_level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and route stdlib logging to the same stream.

    Args:
        json_output: If True, render JSON lines. If False, use the console renderer.
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        stream: Where log lines go. Defaults to stderr.
    """
    stream = stream or sys.stderr
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    processors = [
        # Picks up school/date bound by query_context() for every event in a retrieval
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if json_output:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )

    # urllib3 logs connection retries/pool activity through stdlib logging
    root = logging.getLogger()
    root.handlers = [logging.StreamHandler(stream)]
    root.setLevel(numeric_level)


def query_context(**values):
    """Bind key/values to every log event emitted inside the ``with`` block.

    Uses contextvars, so concurrent retrievals running as separate asyncio
    tasks keep their own context.
    """
    return structlog.contextvars.bound_contextvars(**values)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance bound with the module name.

    Args:
        name: Logger name (typically __name__ from calling module).

    Returns:
        Configured structlog logger with module name context.
    """
    return structlog.get_logger(name)
