"""Error categories, timeout types, severity levels, and retry guidance.

Contains the curated SQL Server error code tables used by the classifier.

This module provides:
- ErrorCategory: Operational category of an error number
- TimeoutType: Kind of timeout an error number represents
- SeverityLevel: Human-readable level derived from the error class (1-25)
- RetryStrategy: Backoff shape recommended for a retry
- RetryGuidance: Full retry recommendation for a single error number
- The immutable lookup tables keyed by error number

Error Number Taxonomy
=====================

SQL Server reports a numeric error number and a severity class with every
error. Negative numbers are raised by the client driver itself.

**Connectivity** - network and connection failures

    | Number | Meaning | Retry | Strategy | Delay | Max |
    |--------|---------|-------|----------|-------|-----|
    | -2 | Command timeout | Yes | Linear | 10s | 1 |
    | -1 | Connection timeout | Yes | Linear | 5s | 2 |
    | 4060 | Cannot open database | Yes | Linear | 3s | 2 |
    | 10053 | Transport error | Yes | Linear | 2s | 2 |
    | 10054 | Connection reset | Yes | Linear | 2s | 2 |
    | 10060 | Network timeout | Yes | Linear | 3s | 2 |
    | 10061 | Connection refused | Yes | Linear | 3s | 2 |
    | 40143 | Connection init failed | Yes | Linear | 3s | 2 |
    | 40197 | Service busy | Yes | Exponential | 1s | 3 |
    | 40501 | Service busy | Yes | Exponential | 2s | 3 |
    | 40540 | Service error | Yes | Linear | 5s | 2 |
    | 40613 | Database unavailable | Yes | Exponential | 1s | 3 |

**Resource** - locks, memory, quotas

    | Number | Meaning | Retry | Strategy | Delay | Max |
    |--------|---------|-------|----------|-------|-----|
    | 1205 | Deadlock victim | Yes | Exponential | 100ms | 3 |
    | 1222 | Lock request timeout | Yes | Exponential | 200ms | 3 |
    | 8645 | Memory grant timeout | Yes | Linear | 5s | 1 |

**Syntax / Permission / Constraint** - user errors, never retried

**Corruption** - 823, 824, 825, never retried

Usage
-----

Example::

    guidance = retry_guidance(1205)
    if guidance.should_retry:
        schedule(guidance.suggested_delay, attempts=guidance.max_retries)
"""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple

# =============================================================================
# Well-known error numbers
# =============================================================================

DEADLOCK_VICTIM_NUMBER = 1205
"""The only error number SQL Server raises for a deadlock victim."""


# =============================================================================
# Error Categories
# =============================================================================


class ErrorCategory(str, Enum):
    """Operational category of a SQL Server error.

    Values are the external names written to log events and must stay stable.
    """

    UNKNOWN = "Unknown"
    """Unknown or uncategorized error."""

    CONNECTIVITY = "Connectivity"
    """Network, connection, or connectivity failures."""

    SYNTAX = "Syntax"
    """Malformed SQL or references to missing objects."""

    PERMISSION = "Permission"
    """Permission or authentication errors."""

    CONSTRAINT = "Constraint"
    """Constraint violations (PK, FK, CHECK, UNIQUE, truncation)."""

    RESOURCE = "Resource"
    """Locks, deadlocks, memory and quota exhaustion."""

    CORRUPTION = "Corruption"
    """Database or data corruption."""

    CONCURRENCY = "Concurrency"
    """Optimistic concurrency (snapshot isolation) conflicts."""


# =============================================================================
# Timeout Types
# =============================================================================


class TimeoutType(str, Enum):
    """Categorizes SQL timeout errors by type."""

    UNKNOWN = "Unknown"
    CONNECTION = "Connection"
    COMMAND = "Command"
    NETWORK = "Network"


# =============================================================================
# Severity Levels
# =============================================================================


class SeverityLevel(str, Enum):
    """Human-readable severity derived from the SQL Server error class.

    Unlike the driver's raw class value (1-25), these six levels are ordinal:
    use ``rank`` for comparisons, e.g. ``level.rank >= SeverityLevel.SEVERE.rank``.

    Assignments:
    - INFORMATIONAL: Class 1-10, status information
    - WARNING: Class 11-13, user-correctable issues
    - ERROR: Class 14-16, user-correctable errors
    - SEVERE: Class 17-19, software or hardware errors
    - CRITICAL: Class 20-24, connection-terminating system errors
    - FATAL: Class 25 and above
    """

    INFORMATIONAL = "Informational"
    WARNING = "Warning"
    ERROR = "Error"
    SEVERE = "Severe"
    CRITICAL = "Critical"
    FATAL = "Fatal"

    @property
    def rank(self) -> int:
        """Ordinal position, 0 for INFORMATIONAL up to 5 for FATAL."""
        return _SEVERITY_RANKS[self]


_SEVERITY_RANKS: dict[SeverityLevel, int] = {
    level: rank for rank, level in enumerate(SeverityLevel)
}


# =============================================================================
# Retry Guidance
# =============================================================================


class RetryStrategy(str, Enum):
    """Backoff shape recommended between retry attempts."""

    NONE = "None"
    LINEAR = "Linear"
    EXPONENTIAL = "Exponential"


class RetryGuidance(NamedTuple):
    """Retry recommendation for a specific error number.

    Attributes:
        should_retry: Whether the error is expected to clear on retry.
        strategy: Backoff shape between attempts.
        suggested_delay: Initial delay before the first retry.
        max_retries: Recommended maximum number of attempts (0 = never).
        reason: Human-readable explanation for the recommendation.
    """

    should_retry: bool
    strategy: RetryStrategy
    suggested_delay: timedelta
    max_retries: int
    reason: str

    @property
    def delay_text(self) -> str:
        """Delay rendered as whole seconds ("2s") or milliseconds ("100ms")."""
        return format_delay(self.suggested_delay)


def format_delay(delay: timedelta) -> str:
    """Render a delay the way retry guidance is published in log events.

    Whole seconds render as ``"<n>s"``; anything else (including zero)
    renders as ``"<n>ms"``.
    """
    millis = int(delay.total_seconds() * 1000)
    if millis > 0 and millis % 1000 == 0:
        return f"{millis // 1000}s"
    return f"{millis}ms"


def _retry(strategy: RetryStrategy, millis: int, max_retries: int, reason: str) -> RetryGuidance:
    return RetryGuidance(True, strategy, timedelta(milliseconds=millis), max_retries, reason)


def _no_retry(reason: str) -> RetryGuidance:
    return RetryGuidance(False, RetryStrategy.NONE, timedelta(0), 0, reason)


NO_RETRY_GUIDANCE = RetryGuidance(False, RetryStrategy.NONE, timedelta(0), 0, "")
"""Guidance returned for any error number absent from the table."""


# =============================================================================
# Lookup tables
# =============================================================================

CATEGORY_TABLE: Mapping[int, ErrorCategory] = MappingProxyType({
    # Connectivity
    -2: ErrorCategory.CONNECTIVITY,
    -1: ErrorCategory.CONNECTIVITY,
    4060: ErrorCategory.CONNECTIVITY,
    10053: ErrorCategory.CONNECTIVITY,
    10054: ErrorCategory.CONNECTIVITY,
    10060: ErrorCategory.CONNECTIVITY,
    10061: ErrorCategory.CONNECTIVITY,
    40143: ErrorCategory.CONNECTIVITY,
    40197: ErrorCategory.CONNECTIVITY,
    40501: ErrorCategory.CONNECTIVITY,
    40540: ErrorCategory.CONNECTIVITY,
    40613: ErrorCategory.CONNECTIVITY,
    # Syntax
    102: ErrorCategory.SYNTAX,
    156: ErrorCategory.SYNTAX,
    207: ErrorCategory.SYNTAX,
    208: ErrorCategory.SYNTAX,
    213: ErrorCategory.SYNTAX,
    # Permission
    229: ErrorCategory.PERMISSION,
    230: ErrorCategory.PERMISSION,
    262: ErrorCategory.PERMISSION,
    297: ErrorCategory.PERMISSION,
    18456: ErrorCategory.PERMISSION,
    # Constraint
    547: ErrorCategory.CONSTRAINT,
    2601: ErrorCategory.CONSTRAINT,
    2627: ErrorCategory.CONSTRAINT,
    8152: ErrorCategory.CONSTRAINT,
    # Resource
    1205: ErrorCategory.RESOURCE,
    1222: ErrorCategory.RESOURCE,
    8645: ErrorCategory.RESOURCE,
    8651: ErrorCategory.RESOURCE,
    40544: ErrorCategory.RESOURCE,
    40549: ErrorCategory.RESOURCE,
    40550: ErrorCategory.RESOURCE,
    40551: ErrorCategory.RESOURCE,
    40552: ErrorCategory.RESOURCE,
    40553: ErrorCategory.RESOURCE,
    # Corruption
    823: ErrorCategory.CORRUPTION,
    824: ErrorCategory.CORRUPTION,
    825: ErrorCategory.CORRUPTION,
    # Concurrency
    3960: ErrorCategory.CONCURRENCY,
    3961: ErrorCategory.CONCURRENCY,
})

TIMEOUT_TABLE: Mapping[int, TimeoutType] = MappingProxyType({
    -2: TimeoutType.COMMAND,
    -1: TimeoutType.CONNECTION,
    10060: TimeoutType.NETWORK,
    10061: TimeoutType.NETWORK,
})

USER_ERROR_NUMBERS: frozenset[int] = frozenset({
    102, 156, 207, 208, 213,
    547, 2601, 2627, 8152,
    229, 230, 262, 297,
})

RETRY_TABLE: Mapping[int, RetryGuidance] = MappingProxyType({
    # Transient conflicts and platform busy - exponential backoff
    1205: _retry(RetryStrategy.EXPONENTIAL, 100, 3, "Deadlock victim - transient conflict, safe to retry"),
    1222: _retry(RetryStrategy.EXPONENTIAL, 200, 3, "Lock timeout - retry with exponential backoff"),
    40197: _retry(RetryStrategy.EXPONENTIAL, 1000, 3, "Azure service busy - retry with backoff"),
    40501: _retry(RetryStrategy.EXPONENTIAL, 2000, 3, "Azure service busy - too many concurrent requests"),
    40613: _retry(RetryStrategy.EXPONENTIAL, 1000, 3, "Azure database unavailable - temporary issue"),
    49918: _retry(RetryStrategy.EXPONENTIAL, 2000, 2, "Insufficient resources - retry with backoff"),
    49920: _retry(RetryStrategy.EXPONENTIAL, 2000, 2, "Too many operations - retry with backoff"),
    # Connection issues - linear backoff
    -1: _retry(RetryStrategy.LINEAR, 5000, 2, "Connection timeout - network issue, retry with delay"),
    4060: _retry(RetryStrategy.LINEAR, 3000, 2, "Cannot open database - may be starting up"),
    10053: _retry(RetryStrategy.LINEAR, 2000, 2, "Transport error - network instability"),
    10054: _retry(RetryStrategy.LINEAR, 2000, 2, "Connection reset - network issue"),
    10060: _retry(RetryStrategy.LINEAR, 3000, 2, "Network timeout - connectivity issue"),
    10061: _retry(RetryStrategy.LINEAR, 3000, 2, "Connection refused - service may be restarting"),
    40143: _retry(RetryStrategy.LINEAR, 3000, 2, "Connection initialization failed - retry"),
    40540: _retry(RetryStrategy.LINEAR, 5000, 2, "Azure service error - temporary unavailability"),
    # Command and memory timeouts - a single cautious retry
    -2: _retry(RetryStrategy.LINEAR, 10000, 1, "Command timeout - optimize query or increase timeout, then retry"),
    8645: _retry(RetryStrategy.LINEAR, 5000, 1, "Memory timeout - retry once after delay"),
    # User errors
    102: _no_retry("Syntax error - fix SQL statement"),
    156: _no_retry("Syntax error near keyword - fix SQL"),
    207: _no_retry("Invalid column name - fix query"),
    208: _no_retry("Invalid object name - verify table/view exists"),
    213: _no_retry("Column mismatch - fix INSERT statement"),
    229: _no_retry("Permission denied - grant necessary permissions"),
    230: _no_retry("Execute permission denied - grant EXECUTE permission"),
    262: _no_retry("Permission denied - check user permissions"),
    297: _no_retry("Permission denied - insufficient privileges"),
    18456: _no_retry("Login failed - check credentials"),
    547: _no_retry("Foreign key violation - verify related data exists"),
    2601: _no_retry("Duplicate key in unique index - check data uniqueness"),
    2627: _no_retry("Primary key violation - check for duplicate values"),
    8152: _no_retry("String truncation - reduce data length or increase column size"),
    # System errors
    823: _no_retry("I/O error - investigate storage subsystem"),
    824: _no_retry("Consistency error - run DBCC CHECKDB"),
    825: _no_retry("Read retry - investigate disk issues"),
})


def known_error_numbers() -> list[int]:
    """All error numbers that appear in at least one table, sorted."""
    return sorted(set(CATEGORY_TABLE) | set(TIMEOUT_TABLE) | set(RETRY_TABLE) | USER_ERROR_NUMBERS)
