"""
Structured logging configuration for the GPP decoder.

Provides consistent JSON logging with correlation IDs,
structured fields, and configurable log levels.
"""

import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from functools import wraps
from typing import Any, Callable

import structlog

# Context variable for the caller's correlation ID
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Get the current correlation ID from context."""
    return correlation_id_var.get()


def generate_correlation_id() -> str:
    """Generate a new unique correlation ID."""
    return f"{int(time.time())}-{uuid.uuid4().hex[:8]}"


def add_correlation_id(
    logger: structlog.typing.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor to add the correlation ID to log entries."""
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def add_service_info(
    logger: structlog.typing.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor to add service info to log entries."""
    event_dict["service"] = "iabgpp"
    return event_dict


# Handler attached by configure_logging, replaced on reconfigure
_handler: logging.Handler | None = None


def _configure_structlog(format: str, show_timestamps: bool) -> None:
    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        add_correlation_id,
        add_service_info,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if show_timestamps:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if format == "console":
        processors.append(
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        )
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_logging(
    level: str | None = None,
    format: str | None = None,
    show_timestamps: bool = True,
) -> None:
    """
    Configure structured logging for the iabgpp loggers.

    Only the "iabgpp" logger gets a handler; the root logger is left to
    the host application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR), $LOG_LEVEL if omitted
        format: Output format ('json' or 'console'), $LOG_FORMAT if omitted
        show_timestamps: Whether to include timestamps
    """
    global _handler

    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    format = (format or os.getenv("LOG_FORMAT", "json")).lower()

    package_logger = logging.getLogger("iabgpp")
    if _handler is not None:
        package_logger.removeHandler(_handler)

    # Logs go to stderr so CLI output on stdout stays machine readable
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(_handler)
    package_logger.setLevel(getattr(logging, level, logging.INFO))

    _configure_structlog(format, show_timestamps)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structured logger
    """
    return structlog.get_logger(name)


def decoder_logger(section_id: int | None = None) -> structlog.stdlib.BoundLogger:
    """Get logger for section decoding events."""
    logger = get_logger("iabgpp.decoder")
    if section_id is not None:
        return logger.bind(section_id=int(section_id))
    return logger


def cli_logger() -> structlog.stdlib.BoundLogger:
    """Get logger for command line events."""
    return get_logger("iabgpp.cli")


class LogContext:
    """Context manager for correlation-scoped logging."""

    def __init__(self, correlation_id: str | None = None, **initial_context: Any):
        """
        Initialize log context.

        Args:
            correlation_id: Optional correlation ID (generated if not provided)
            **initial_context: Additional context to bind
        """
        self.correlation_id = correlation_id or generate_correlation_id()
        self.initial_context = initial_context
        self.token = None

    def __enter__(self) -> "LogContext":
        self.token = correlation_id_var.set(self.correlation_id)
        if self.initial_context:
            structlog.contextvars.bind_contextvars(**self.initial_context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        correlation_id_var.reset(self.token)
        if self.initial_context:
            structlog.contextvars.unbind_contextvars(*self.initial_context)


def log_execution_time(logger: structlog.stdlib.BoundLogger | None = None):
    """
    Decorator to log function execution time.

    Args:
        logger: Optional logger instance (uses default if not provided)
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            _logger = logger or get_logger(func.__module__)
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                duration_ms = (time.perf_counter() - start) * 1000
                _logger.debug(
                    "Function executed",
                    function=func.__name__,
                    duration_ms=round(duration_ms, 2),
                )
                return result
            except Exception as e:
                duration_ms = (time.perf_counter() - start) * 1000
                _logger.error(
                    "Function failed",
                    function=func.__name__,
                    duration_ms=round(duration_ms, 2),
                    error=str(e),
                    exc_info=True,
                )
                raise
        return wrapper
    return decorator


# Render through the stdlib unless the host already configured structlog
if not structlog.is_configured():
    _configure_structlog("json", show_timestamps=True)
