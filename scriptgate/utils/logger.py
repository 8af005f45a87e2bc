"""Structured logging utilities for ScriptGate.

This module provides async-safe structured logging using structlog.
Every log line emitted while a request is in flight carries its request_id.
"""

import logging
import sys
import time
from contextvars import ContextVar
from typing import Any, Optional, TextIO

import structlog
from structlog.types import EventDict, Processor

# Context variable for request tracking
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def add_request_id(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add request_id to log context if available."""
    request_id = request_id_var.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON format. If False, use console format.
        stream: Destination stream. Defaults to stderr so operator diagnostics
                never mix with anything a wrapper script pipes from stdout.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_request_id,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.extend([
            structlog.dev.ConsoleRenderer(colors=True),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = "scriptgate") -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Logger name (typically module name)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class PerformanceLogger:
    """Context manager for tracking operation performance."""

    def __init__(
        self,
        operation: str,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
        slow_threshold_ms: float = 50.0,
    ):
        self.operation = operation
        self.logger = logger or get_logger()
        self.slow_threshold_ms = slow_threshold_ms
        self.start_time: float = 0

    def __enter__(self) -> "PerformanceLogger":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        duration_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(
                f"{self.operation} failed",
                operation=self.operation,
                duration_ms=duration_ms,
                error=str(exc_val),
            )
        else:
            log_method = (
                self.logger.warning if duration_ms > self.slow_threshold_ms else self.logger.debug
            )
            log_method(
                f"{self.operation} completed",
                operation=self.operation,
                duration_ms=duration_ms,
            )


def set_request_id(request_id: str) -> None:
    """Set request ID in context for all subsequent logs."""
    request_id_var.set(request_id)


def clear_request_id() -> None:
    """Clear request ID from context."""
    request_id_var.set(None)


# Initialize logging with sensible defaults
# This will be reconfigured by main.py based on environment
configure_logging()
