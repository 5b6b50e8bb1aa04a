"""SQL Server error classification.

Re-exports all public symbols.
"""

from sqlenrich.core.errors.codes import (
    CATEGORY_TABLE,
    DEADLOCK_VICTIM_NUMBER,
    NO_RETRY_GUIDANCE,
    RETRY_TABLE,
    TIMEOUT_TABLE,
    USER_ERROR_NUMBERS,
    ErrorCategory,
    RetryGuidance,
    RetryStrategy,
    SeverityLevel,
    TimeoutType,
    format_delay,
    known_error_numbers,
)
from sqlenrich.core.errors.models import (
    ClassificationResult,
    ConnectionInfo,
    ErrorRecord,
    SqlExceptionInfo,
)
from sqlenrich.core.errors.deadlock import is_deadlock, try_extract_graph
from sqlenrich.core.errors.naming import (
    OPEN_TELEMETRY_NAMES,
    AttributeNamer,
    open_telemetry_name,
)
from sqlenrich.core.errors.classifier import (
    SqlErrorClassifier,
    classify_category,
    is_system_error,
    is_timeout,
    is_user_error,
    requires_immediate_attention,
    retry_guidance,
    severity_level,
    should_retry,
    timeout_type,
)

__all__ = [
    "CATEGORY_TABLE",
    "DEADLOCK_VICTIM_NUMBER",
    "NO_RETRY_GUIDANCE",
    "RETRY_TABLE",
    "TIMEOUT_TABLE",
    "USER_ERROR_NUMBERS",
    "ErrorCategory",
    "RetryGuidance",
    "RetryStrategy",
    "SeverityLevel",
    "TimeoutType",
    "format_delay",
    "known_error_numbers",
    "ClassificationResult",
    "ConnectionInfo",
    "ErrorRecord",
    "SqlExceptionInfo",
    "is_deadlock",
    "try_extract_graph",
    "OPEN_TELEMETRY_NAMES",
    "AttributeNamer",
    "open_telemetry_name",
    "SqlErrorClassifier",
    "classify_category",
    "is_system_error",
    "is_timeout",
    "is_user_error",
    "requires_immediate_attention",
    "retry_guidance",
    "severity_level",
    "should_retry",
    "timeout_type",
]
