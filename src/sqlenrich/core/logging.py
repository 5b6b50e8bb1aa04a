"""Structured logging infrastructure for sqlenrich.

Provides structured logging using structlog on top of the standard library
``logging`` module, with optional JSON output, file rotation, and the SQL
exception enricher installed as a processor.

Example usage:
    from sqlenrich.core.logging import configure_logging, get_logger
    from sqlenrich.core.config import EnricherOptions

    # Configure once at startup
    configure_logging(level="INFO", format="json", enricher_options=EnricherOptions())

    # Get a component-specific logger
    logger = get_logger("orders")

    try:
        cursor.execute(sql)
    except Exception:
        # The exception's SQL Server details are added to the event
        logger.exception("order_insert_failed", order_id=42)
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from sqlenrich.core.config import EnricherOptions

# Sensitive field patterns that should never be logged.
# Connection strings tend to leak these through bound context.
SENSITIVE_PATTERNS = frozenset({
    "password",
    "pwd",
    "secret",
    "token",
    "credential",
    "connection_string",
})


def _sanitize_value(key: str, value: Any) -> Any:
    """Sanitize potentially sensitive values.

    Args:
        key: The key/field name being logged.
        value: The value to potentially sanitize.

    Returns:
        Original value if safe, "[REDACTED]" if sensitive.
    """
    key_lower = key.lower()
    for pattern in SENSITIVE_PATTERNS:
        if pattern in key_lower:
            return "[REDACTED]"
    return value


def _sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that sanitizes sensitive fields.

    Nested dicts are sanitized one level deep.
    """
    sanitized: EventDict = {}
    for key, value in event_dict.items():
        if isinstance(value, dict):
            sanitized[key] = {
                k: _sanitize_value(k, v) for k, v in value.items()
            }
        else:
            sanitized[key] = _sanitize_value(key, value)
    return sanitized


def _add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that adds ISO8601 UTC timestamp."""
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


class _RenderedEventFormatter(logging.Formatter):
    """Emit the structlog-rendered message only.

    structlog already rendered the traceback and stack into the message
    (format_exc_info, StackInfoRenderer); the stdlib record still carries
    exc_info and stack_info, which the default formatter would append again.
    """

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


class SqlEnrichLogger:
    """Component logger wrapper around structlog.

    The underlying structlog logger is fetched on every call so that loggers
    created at import time still respect configuration applied later via
    configure_logging().
    """

    def __init__(
        self,
        component: str,
        **initial_context: Any,
    ) -> None:
        """Initialize a logger for a component.

        Args:
            component: The component name (e.g., "enricher", "errors", "cli").
            **initial_context: Additional context to bind.
        """
        self._component = component
        self._context: dict[str, Any] = {"component": component, **initial_context}

    def _get_logger(self) -> structlog.stdlib.BoundLogger:
        logger: structlog.stdlib.BoundLogger = structlog.get_logger().bind(**self._context)
        return logger

    def bind(self, **context: Any) -> SqlEnrichLogger:
        """Create a new logger with additional bound context."""
        new_logger = SqlEnrichLogger.__new__(SqlEnrichLogger)
        new_logger._component = self._component
        new_logger._context = {**self._context, **context}
        return new_logger

    def unbind(self, *keys: str) -> SqlEnrichLogger:
        """Create a new logger with specified keys removed."""
        new_logger = SqlEnrichLogger.__new__(SqlEnrichLogger)
        new_logger._component = self._component
        new_logger._context = {k: v for k, v in self._context.items() if k not in keys}
        return new_logger

    def debug(self, event: str, **kw: Any) -> None:
        self._get_logger().debug(event, **kw)

    def info(self, event: str, **kw: Any) -> None:
        self._get_logger().info(event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._get_logger().warning(event, **kw)

    def error(self, event: str, **kw: Any) -> None:
        self._get_logger().error(event, **kw)

    def critical(self, event: str, **kw: Any) -> None:
        self._get_logger().critical(event, **kw)

    def exception(self, event: str, **kw: Any) -> None:
        """Log an exception with traceback.

        Should be called from within an exception handler. When the SQL
        exception enricher is configured, the active exception's SQL Server
        details are added to the event.
        """
        self._get_logger().exception(event, **kw)


def build_processors(
    format: Literal["json", "console"] = "console",  # noqa: A002
    include_timestamps: bool = True,
    enricher_options: EnricherOptions | None = None,
) -> list[Processor]:
    """Build the structlog processor chain.

    Args:
        format: "json" for structured output, "console" for human-readable.
        include_timestamps: Whether to add timestamps to log entries.
        enricher_options: When given, the SQL exception enricher is inserted
            ahead of exception formatting with these options.

    Returns:
        List of processors ending in the renderer for ``format``.
    """
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        _sanitize_event_dict,
    ]

    if include_timestamps:
        processors.append(_add_timestamp)

    renderer: Processor
    if format == "json":
        renderer = structlog.processors.JSONRenderer(default=str)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    processors.extend([
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ])

    if enricher_options is not None:
        # Deferred import: the enrichment package logs through this module.
        from sqlenrich.enrichment.processor import add_sql_exception_enricher

        processors = add_sql_exception_enricher(processors, enricher_options)

    return processors


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO",
    format: Literal["json", "console"] = "console",  # noqa: A002
    file_path: Path | None = None,
    max_file_size_mb: int = 50,
    backup_count: int = 5,
    include_timestamps: bool = True,
    enricher_options: EnricherOptions | None = None,
) -> None:
    """Configure sqlenrich structured logging.

    This should be called once at application startup before any logging occurs.

    Args:
        level: Minimum log level to capture.
        format: Output format - "json" for structured, "console" for human-readable.
        file_path: Optional file path; output goes to a rotating file instead
            of stderr when set.
        max_file_size_mb: Maximum log file size before rotation (MB).
        backup_count: Number of rotated log files to keep.
        include_timestamps: Whether to include ISO8601 timestamps in log entries.
        enricher_options: Options for the SQL exception enricher. The enricher
            is not installed when None.

    Raises:
        pydantic.ValidationError: If ``enricher_options`` were built from
            invalid values (raised when the options model was constructed).
    """
    log_level = getattr(logging, level)

    handler: logging.Handler
    if file_path is not None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            file_path,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(_RenderedEventFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    # NOTE: cache_logger_on_first_use=False ensures loggers respect runtime config
    # even when created at module import time before configure_logging() is called
    structlog.configure(
        processors=build_processors(format, include_timestamps, enricher_options),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(component: str, **initial_context: Any) -> SqlEnrichLogger:
    """Get a logger for a component.

    Args:
        component: The component name (e.g., "enricher", "errors", "cli").
        **initial_context: Additional context to bind.

    Returns:
        A SqlEnrichLogger instance bound to the component.
    """
    return SqlEnrichLogger(component, **initial_context)


__all__ = [
    "SENSITIVE_PATTERNS",
    "SqlEnrichLogger",
    "build_processors",
    "configure_logging",
    "get_logger",
]
