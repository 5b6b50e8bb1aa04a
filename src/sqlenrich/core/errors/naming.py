"""Property naming for enriched log events.

Enriched keys are either the semantic key behind a configurable prefix
(``SqlException_Number``) or a fixed OpenTelemetry-style attribute name
(``db.error.code``). Both vocabularies are read by dashboards and alerts, so
the tables below are part of the external contract.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from sqlenrich.core.constants import DEFAULT_PROPERTY_PREFIX

OPEN_TELEMETRY_NAMES: Mapping[str, str] = MappingProxyType({
    "IsSqlException": "db.exception.sql",
    "Number": "db.error.code",
    "State": "db.error.state",
    "Class": "db.error.severity",
    "Message": "exception.message",
    "Procedure": "db.operation",
    "Server": "server.address",
    "Database": "db.name",
    "DataSource": "server.address",
    "ClientConnectionId": "db.client.connection.id",
    "IsTransient": "db.error.transient",
    "IsDeadlock": "db.error.deadlock",
    "IsTimeout": "db.error.timeout",
    "TimeoutType": "db.error.timeout.type",
    "ErrorCategory": "db.error.category",
    "IsUserError": "db.error.user_caused",
    "IsSystemError": "db.error.system_caused",
    "DeadlockGraph": "db.deadlock.graph",
    "ErrorCount": "db.error.count",
    "AllNumbers": "db.error.all_codes",
    "AllStates": "db.error.all_states",
    "AllClasses": "db.error.all_severities",
    "AllMessages": "db.error.all_messages",
    "Line": "db.error.line",
    "ConnectionTimeout": "db.connection.timeout",
    "ShouldRetry": "db.error.retry.recommended",
    "RetryStrategy": "db.error.retry.strategy",
    "SuggestedRetryDelay": "db.error.retry.delay",
    "MaxRetries": "db.error.retry.max_attempts",
    "RetryReason": "db.error.retry.reason",
    "SeverityLevel": "db.error.severity.level",
    "RequiresImmediateAttention": "db.error.critical",
})


def open_telemetry_name(semantic_key: str) -> str:
    """Get the OpenTelemetry-style attribute name for a semantic key.

    Keys outside the table fall back to ``db.<lowercased key>``.
    """
    name = OPEN_TELEMETRY_NAMES.get(semantic_key)
    if name is None:
        return f"db.{semantic_key.lower()}"
    return name


class AttributeNamer:
    """Maps semantic keys ("Number", "IsDeadlock", ...) to output property names.

    The prefix is validated here, once; ``name()`` does no per-call validation.

    Raises:
        ValueError: If ``prefix`` is None, empty, or whitespace-only.
    """

    def __init__(
        self,
        prefix: str = DEFAULT_PROPERTY_PREFIX,
        use_open_telemetry: bool = False,
    ) -> None:
        if prefix is None or not prefix.strip():
            raise ValueError("prefix cannot be empty or whitespace")
        self.prefix = prefix
        self.use_open_telemetry = use_open_telemetry

    def name(self, semantic_key: str) -> str:
        if self.use_open_telemetry:
            return open_telemetry_name(semantic_key)
        return f"{self.prefix}{semantic_key}"

    def __repr__(self) -> str:
        mode = "open_telemetry" if self.use_open_telemetry else f"prefix={self.prefix!r}"
        return f"AttributeNamer({mode})"
