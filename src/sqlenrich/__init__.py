"""sqlenrich - SQL Server exception classification for structlog."""

from sqlenrich.core import (
    AttributeNamer,
    ClassificationResult,
    EnricherOptions,
    ErrorCategory,
    ErrorRecord,
    LogConfig,
    SeverityLevel,
    SqlErrorClassifier,
    TimeoutType,
)
from sqlenrich.enrichment import SqlExceptionEnricher, add_sql_exception_enricher

__version__ = "0.1.0"

__all__ = [
    "AttributeNamer",
    "ClassificationResult",
    "EnricherOptions",
    "ErrorCategory",
    "ErrorRecord",
    "LogConfig",
    "SeverityLevel",
    "SqlErrorClassifier",
    "SqlExceptionEnricher",
    "TimeoutType",
    "__version__",
    "add_sql_exception_enricher",
]
