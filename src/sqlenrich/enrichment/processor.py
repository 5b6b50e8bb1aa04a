"""structlog processor that enriches events carrying a SQL Server exception.

Example:
    import structlog
    from sqlenrich.core.config import EnricherOptions
    from sqlenrich.enrichment import SqlExceptionEnricher

    structlog.configure(processors=[
        structlog.stdlib.add_log_level,
        SqlExceptionEnricher(EnricherOptions(use_open_telemetry_semantics=True)),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ])
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from sqlenrich.core.config import EnricherOptions
from sqlenrich.core.errors.classifier import SqlErrorClassifier
from sqlenrich.core.errors.models import ClassificationResult, SqlExceptionInfo
from sqlenrich.core.errors.naming import AttributeNamer
from sqlenrich.core.logging import get_logger

from .adapters import DEFAULT_ADAPTERS, Adapter, find_sql_exception

_logger = get_logger("enricher")


def _exception_from_event(event_dict: EventDict) -> BaseException | None:
    """Resolve the exception attached to an event, if any.

    ``exc_info`` may be True (use the active exception), an exc_info tuple,
    or an exception instance. An ``exception`` key holding an exception
    instance is also accepted.
    """
    exc_info = event_dict.get("exc_info")
    if exc_info is True:
        return sys.exc_info()[1]
    if isinstance(exc_info, BaseException):
        return exc_info
    if isinstance(exc_info, tuple) and len(exc_info) == 3:
        return exc_info[1]

    exception = event_dict.get("exception")
    if isinstance(exception, BaseException):
        return exception
    return None


class SqlExceptionEnricher:
    """Adds SQL Server exception details to structlog events.

    Keys are only added when absent; anything already bound on the event wins.
    The instance holds no per-event state and can be shared between threads.
    """

    def __init__(
        self,
        options: EnricherOptions | None = None,
        adapters: Sequence[Adapter] = DEFAULT_ADAPTERS,
    ) -> None:
        self.options = options if options is not None else EnricherOptions()
        self.adapters = tuple(adapters)
        self.namer = AttributeNamer(
            prefix=self.options.property_prefix,
            use_open_telemetry=self.options.use_open_telemetry_semantics,
        )
        self._classifier = SqlErrorClassifier()
        self._diagnose(
            f"SqlExceptionEnricher initialized with {self.namer!r}, "
            f"deadlock_graph={self.options.emits_deadlock_graph}"
        )

    def _diagnose(self, message: str) -> None:
        if not self.options.enable_diagnostics:
            return
        if self.options.diagnostic_logger is not None:
            self.options.diagnostic_logger(message)
        _logger.debug("enricher_diagnostic", detail=message)

    def __call__(
        self,
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        exception = _exception_from_event(event_dict)
        if exception is None:
            return event_dict

        info = find_sql_exception(exception, self.adapters)
        if info is None:
            return event_dict

        for key, value in self.build_properties(info).items():
            event_dict.setdefault(key, value)

        self._diagnose(
            f"Enriched {method_name} event with SQL error "
            f"{info.primary.code if info.primary else 'none'} ({info.error_count} total)"
        )
        return event_dict

    def build_properties(self, info: SqlExceptionInfo) -> dict[str, Any]:
        """Compute every enabled property for a decoded exception.

        Returns:
            Mapping of output property names to primitive values, in a
            stable order.
        """
        opts = self.options
        props: dict[str, Any] = {}

        def put(semantic_key: str, value: Any) -> None:
            props.setdefault(self.namer.name(semantic_key), value)

        put("IsSqlException", True)
        put("ErrorCount", info.error_count)

        if opts.include_connection_context and info.connection is not None:
            conn = info.connection
            if conn.data_source:
                put("DataSource", conn.data_source)
            if conn.database:
                put("Database", conn.database)
            if conn.connection_timeout is not None:
                put("ConnectionTimeout", conn.connection_timeout)
            if conn.client_connection_id is not None:
                put("ClientConnectionId", str(conn.client_connection_id))

        record = info.primary
        if record is None:
            return props

        put("Number", record.code)
        put("State", record.state)
        put("Class", record.severity_class)
        put("Line", record.line)
        if record.procedure.strip():
            put("Procedure", record.procedure)
        if record.server.strip():
            put("Server", record.server)
        if record.message.strip():
            put("Message", record.message)

        if opts.include_all_errors and info.error_count > 1:
            put("AllNumbers", [e.code for e in info.errors])
            put("AllStates", [e.state for e in info.errors])
            put("AllClasses", [e.severity_class for e in info.errors])
            put("AllMessages", [e.message for e in info.errors])

        result = self._classifier.classify(
            record, extract_deadlock_graph=opts.emits_deadlock_graph
        )
        self._put_classification(put, result)
        return props

    def _put_classification(
        self,
        put: Callable[[str, Any], None],
        result: ClassificationResult,
    ) -> None:
        opts = self.options

        if opts.detect_transient_failures:
            put("IsTransient", result.is_transient)

        if opts.detect_deadlocks:
            put("IsDeadlock", result.is_deadlock)
            if opts.include_deadlock_graph and result.deadlock_graph is not None:
                put("DeadlockGraph", result.deadlock_graph)

        if opts.classify_timeouts:
            put("IsTimeout", result.is_timeout)
            if result.is_timeout:
                put("TimeoutType", result.timeout_type.value)

        if opts.categorize_errors:
            put("ErrorCategory", result.category.value)
            put("IsUserError", result.is_user_error)
            put("IsSystemError", result.is_system_error)

        if opts.provide_retry_guidance:
            guidance = result.guidance
            put("ShouldRetry", guidance.should_retry)
            put("RetryStrategy", guidance.strategy.value)
            put("SuggestedRetryDelay", guidance.delay_text)
            put("MaxRetries", guidance.max_retries)
            put("RetryReason", guidance.reason)

        if opts.include_severity_level:
            put("SeverityLevel", result.severity_level.value)
            put("RequiresImmediateAttention", result.requires_immediate_attention)


def add_sql_exception_enricher(
    processors: Sequence[Processor],
    options: EnricherOptions | None = None,
) -> list[Processor]:
    """Return a copy of a processor chain with the SQL exception enricher installed.

    The enricher must see the raw ``exc_info``, so it is inserted before
    ``format_exc_info`` / ``dict_tracebacks`` when present, otherwise before
    the last processor (the renderer), otherwise appended.
    """
    enricher = SqlExceptionEnricher(options)
    chain = list(processors)
    for index, processor in enumerate(chain):
        if isinstance(processor, structlog.processors.ExceptionRenderer):
            chain.insert(index, enricher)
            return chain
    if chain:
        chain.insert(len(chain) - 1, enricher)
    else:
        chain.append(enricher)
    return chain
