"""SqlErrorClassifier and the table-driven classification functions.

Every function here is a pure lookup over the immutable tables in
``codes.py``; unknown error numbers fall through to a defined default and
never raise.
"""

from __future__ import annotations

from sqlenrich.core.constants import (
    SEVERITY_CLASS_MAX,
    SEVERITY_CLASS_MIN,
    SEVERITY_CRITICAL_MAX,
    SEVERITY_ERROR_MAX,
    SEVERITY_IMMEDIATE_ATTENTION_MIN,
    SEVERITY_INFORMATIONAL_MAX,
    SEVERITY_SEVERE_MAX,
    SEVERITY_WARNING_MAX,
)

from .codes import (
    CATEGORY_TABLE,
    NO_RETRY_GUIDANCE,
    RETRY_TABLE,
    TIMEOUT_TABLE,
    USER_ERROR_NUMBERS,
    ErrorCategory,
    RetryGuidance,
    SeverityLevel,
    TimeoutType,
)
from .deadlock import is_deadlock, try_extract_graph
from .models import ClassificationResult, ErrorRecord

# =============================================================================
# Category
# =============================================================================


def classify_category(code: int) -> ErrorCategory:
    """Get the operational category for an error number."""
    return CATEGORY_TABLE.get(code, ErrorCategory.UNKNOWN)


def is_user_error(code: int) -> bool:
    """True if the error is typically caused by the caller (bad SQL, grants, data)."""
    return code in USER_ERROR_NUMBERS


def is_system_error(code: int) -> bool:
    return not is_user_error(code)


# =============================================================================
# Timeouts
# =============================================================================


def is_timeout(code: int) -> bool:
    return code in TIMEOUT_TABLE


def timeout_type(code: int) -> TimeoutType:
    """Get the timeout type; UNKNOWN for error numbers that are not timeouts."""
    return TIMEOUT_TABLE.get(code, TimeoutType.UNKNOWN)


# =============================================================================
# Retry guidance
# =============================================================================


def retry_guidance(code: int) -> RetryGuidance:
    """Get the retry recommendation for an error number.

    Error numbers absent from the table are treated as non-transient.
    """
    return RETRY_TABLE.get(code, NO_RETRY_GUIDANCE)


def should_retry(code: int) -> bool:
    return retry_guidance(code).should_retry


# =============================================================================
# Severity
# =============================================================================


def severity_level(severity_class: int) -> SeverityLevel:
    """Map a SQL Server error class onto the six ordinal severity levels.

    Values outside the single-byte range are clamped first, so the mapping
    is total.
    """
    severity_class = max(SEVERITY_CLASS_MIN, min(SEVERITY_CLASS_MAX, severity_class))
    if severity_class <= SEVERITY_INFORMATIONAL_MAX:
        return SeverityLevel.INFORMATIONAL
    if severity_class <= SEVERITY_WARNING_MAX:
        return SeverityLevel.WARNING
    if severity_class <= SEVERITY_ERROR_MAX:
        return SeverityLevel.ERROR
    if severity_class <= SEVERITY_SEVERE_MAX:
        return SeverityLevel.SEVERE
    if severity_class <= SEVERITY_CRITICAL_MAX:
        return SeverityLevel.CRITICAL
    return SeverityLevel.FATAL


def requires_immediate_attention(severity_class: int) -> bool:
    return severity_class >= SEVERITY_IMMEDIATE_ATTENTION_MIN


# =============================================================================
# Classifier
# =============================================================================


class SqlErrorClassifier:
    """Combines every lookup into one ClassificationResult per ErrorRecord.

    The classifier holds no state; one instance can be shared freely across
    threads and tasks.
    """

    def classify(
        self,
        record: ErrorRecord,
        extract_deadlock_graph: bool = True,
    ) -> ClassificationResult:
        """Classify a single error record.

        Args:
            record: The decoded driver error.
            extract_deadlock_graph: Whether to look for a deadlock graph in
                the message text.

        Returns:
            ClassificationResult with every derived attribute.
        """
        code = record.code
        graph = try_extract_graph(record.message) if extract_deadlock_graph else None
        return ClassificationResult(
            record=record,
            category=classify_category(code),
            is_user_error=is_user_error(code),
            is_timeout=is_timeout(code),
            timeout_type=timeout_type(code),
            is_deadlock=is_deadlock(code),
            guidance=retry_guidance(code),
            severity_level=severity_level(record.severity_class),
            requires_immediate_attention=requires_immediate_attention(record.severity_class),
            deadlock_graph=graph,
        )
