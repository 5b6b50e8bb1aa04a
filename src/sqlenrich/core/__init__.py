"""Core classification engine, configuration, and logging."""

from sqlenrich.core.config import EnricherOptions, LogConfig
from sqlenrich.core.errors import (
    AttributeNamer,
    ClassificationResult,
    ErrorCategory,
    ErrorRecord,
    SeverityLevel,
    SqlErrorClassifier,
    TimeoutType,
)

__all__ = [
    "AttributeNamer",
    "ClassificationResult",
    "EnricherOptions",
    "ErrorCategory",
    "ErrorRecord",
    "LogConfig",
    "SeverityLevel",
    "SqlErrorClassifier",
    "TimeoutType",
]
