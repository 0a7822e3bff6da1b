"""Structured logging with a per-run correlation id.

Uses structlog on top of the stdlib ``logging`` module, so records from
plain ``logging.getLogger(__name__)`` loggers in the engine and from
structlog loggers in the CLI share one handler on stderr.  The run id is
held in structlog's context variables and merged into every structlog
event.
"""

from __future__ import annotations

import logging
import sys
import uuid
from typing import Any

import structlog

from ..core.config import ObservabilityConfig


def new_run_id() -> str:
    """Generate a run id and bind it to the logging context."""
    rid = uuid.uuid4().hex[:12]
    structlog.contextvars.bind_contextvars(run_id=rid)
    return rid


def get_run_id() -> str:
    """Current run id, creating one on first use."""
    rid = structlog.contextvars.get_contextvars().get("run_id")
    return rid or new_run_id()


def setup_logging(
    level: str = "INFO",
    format: str = "console",
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for machine-readable output, "console" for humans.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # stdout carries command output, so logs go to stderr
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
        force=True,
    )


def configure_from_settings(config: ObservabilityConfig) -> str:
    """Apply the observability settings and start a new run; returns the run id."""
    setup_logging(level=config.log_level, format=config.log_format.value)
    return new_run_id()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)
