"""Structured logging configuration."""

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(
    level: int = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = False,
) -> None:
    """Configure structured logging for the application.

    Logs always go to ``output`` (stderr by default) so that stdout
    carries nothing but model output.

    Args:
        level: Logging level (default: INFO).
        output: Output stream (default: stderr).
        json_format: Whether to use JSON format (default: False).
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=output.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=output,
        level=level,
    )


def bind_invocation_context(invocation_id: str, mode: str) -> None:
    """Bind invocation context to all subsequent log messages.

    Args:
        invocation_id: Unique identifier of this process invocation.
        mode: Request mode being run.
    """
    structlog.contextvars.bind_contextvars(invocation_id=invocation_id, mode=mode)


def clear_invocation_context() -> None:
    """Clear invocation context from log messages."""
    structlog.contextvars.unbind_contextvars("invocation_id", "mode")
