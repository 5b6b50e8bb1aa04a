"""Data models for error classification.

Contains the dataclass models shared by the classifier and the enricher.

This module provides:
- ErrorRecord: One decoded error reported by the driver
- ConnectionInfo: Connection context attached to a driver exception
- SqlExceptionInfo: A recognised driver exception with all of its errors
- ClassificationResult: Every derived attribute for a single ErrorRecord
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .codes import ErrorCategory, RetryGuidance, SeverityLevel, TimeoutType

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(frozen=True)
class ErrorRecord:
    """A single error reported by SQL Server or the client driver.

    Attributes:
        code: Error number (negative numbers come from the driver).
        severity_class: Error class, 1-25 in practice.
        state: Error state, used by the server to locate the raise site.
        message: Full error message text.
        procedure: Stored procedure or RPC name, empty if not applicable.
        server: Name of the server that raised the error.
        line: Line number within the batch or procedure.
    """

    code: int
    severity_class: int = 0
    state: int = 0
    message: str = ""
    procedure: str = ""
    server: str = ""
    line: int = 0


@dataclass(frozen=True)
class ConnectionInfo:
    """Connection context available when the exception was raised."""

    data_source: str | None = None
    database: str | None = None
    connection_timeout: int | None = None
    client_connection_id: UUID | str | None = None

    def is_empty(self) -> bool:
        return (
            self.data_source is None
            and self.database is None
            and self.connection_timeout is None
            and self.client_connection_id is None
        )


@dataclass(frozen=True)
class SqlExceptionInfo:
    """A driver exception decoded into primitive records.

    Multi-error conditions (e.g. a batch that raised several errors) keep
    every record in driver order; the first one is the primary error.
    """

    errors: tuple[ErrorRecord, ...]
    connection: ConnectionInfo | None = None
    original: BaseException | None = None

    @property
    def primary(self) -> ErrorRecord | None:
        """The first reported error, or None for an empty collection."""
        return self.errors[0] if self.errors else None

    @property
    def error_count(self) -> int:
        return len(self.errors)


@dataclass(frozen=True)
class ClassificationResult:
    """Complete classification of one ErrorRecord.

    Example:
    ```python
    result = SqlErrorClassifier().classify(ErrorRecord(code=-2, severity_class=11))
    result.timeout_type          # TimeoutType.COMMAND
    result.guidance.max_retries  # 1
    ```
    """

    record: ErrorRecord
    category: ErrorCategory
    is_user_error: bool
    is_timeout: bool
    timeout_type: TimeoutType
    is_deadlock: bool
    guidance: RetryGuidance
    severity_level: SeverityLevel
    requires_immediate_attention: bool
    deadlock_graph: str | None = field(default=None)
    """Well-formed deadlock graph XML found in the message, if any."""

    @property
    def is_system_error(self) -> bool:
        return not self.is_user_error

    @property
    def should_retry(self) -> bool:
        return self.guidance.should_retry

    @property
    def is_transient(self) -> bool:
        """Transient errors are exactly the ones worth retrying."""
        return self.guidance.should_retry
