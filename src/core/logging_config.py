"""Structured logging configuration.

This module configures structlog once, on import, with a stable JSON
format so every pipeline stage emits the same event shape.
"""

from __future__ import annotations

from typing import Any

import structlog

_PROCESSORS = (
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.add_log_level,
    structlog.processors.JSONRenderer(),
)


def configure_logging() -> None:
    """Install the shared structlog processor chain."""
    structlog.configure(processors=list(_PROCESSORS), cache_logger_on_first_use=True)


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    return structlog.get_logger(name)


configure_logging()
