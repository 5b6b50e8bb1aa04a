"""Configuration models for sqlenrich.

Pydantic models for the SQL exception enricher and for logging setup.
Validation happens once, when a model is constructed; the enricher never
re-validates per log event.

Example YAML:
    enricher:
      property_prefix: "Sql_"
      use_open_telemetry_semantics: false
      include_deadlock_graph: true
    logging:
      level: INFO
      format: json
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from sqlenrich.core.constants import DEFAULT_PROPERTY_PREFIX


class EnricherOptions(BaseModel):
    """Configuration for the SQL exception enricher.

    Every classification feature has its own switch; each one gates the
    event keys it produces.
    """

    model_config = ConfigDict(validate_assignment=True)

    include_all_errors: bool = Field(
        default=True,
        description="Add parallel lists of numbers/states/classes/messages "
        "when the exception carries more than one error",
    )
    include_connection_context: bool = Field(
        default=True,
        description="Add data source, database, connection timeout and client connection id",
    )
    detect_transient_failures: bool = Field(
        default=True,
        description="Add IsTransient, derived from the retry guidance table",
    )
    property_prefix: str = Field(
        default=DEFAULT_PROPERTY_PREFIX,
        description="Prefix for enriched keys when OpenTelemetry semantics are off",
    )
    detect_deadlocks: bool = Field(
        default=True,
        description="Add IsDeadlock (error 1205)",
    )
    include_deadlock_graph: bool = Field(
        default=True,
        description="Add DeadlockGraph when the message carries well-formed graph XML. "
        "Ignored unless detect_deadlocks is enabled",
    )
    classify_timeouts: bool = Field(
        default=True,
        description="Add IsTimeout and, for timeouts, TimeoutType",
    )
    categorize_errors: bool = Field(
        default=True,
        description="Add ErrorCategory, IsUserError and IsSystemError",
    )
    use_open_telemetry_semantics: bool = Field(
        default=False,
        description="Use OpenTelemetry-style attribute names (db.error.code, ...) "
        "instead of property_prefix",
    )
    provide_retry_guidance: bool = Field(
        default=True,
        description="Add ShouldRetry, RetryStrategy, SuggestedRetryDelay, MaxRetries, RetryReason",
    )
    include_severity_level: bool = Field(
        default=True,
        description="Add SeverityLevel and RequiresImmediateAttention",
    )
    enable_diagnostics: bool = Field(
        default=False,
        description="Report enricher activity to diagnostic_logger and debug logs",
    )
    diagnostic_logger: Callable[[str], None] | None = Field(
        default=None,
        exclude=True,
        description="Callback receiving diagnostic messages when enable_diagnostics is set",
    )

    @field_validator("property_prefix")
    @classmethod
    def _check_property_prefix(cls, v: str) -> str:
        """Reject empty or whitespace-only prefixes."""
        if not v.strip():
            raise ValueError(
                "property_prefix cannot be empty or whitespace. "
                "Provide a prefix such as 'SqlException_' or enable "
                "use_open_telemetry_semantics."
            )
        return v

    @property
    def emits_deadlock_graph(self) -> bool:
        return self.detect_deadlocks and self.include_deadlock_graph


class LogConfig(BaseModel):
    """Configuration for structured logging.

    Controls log level, output format, and file rotation settings.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum log level to capture",
    )
    format: Literal["json", "console"] = Field(
        default="console",
        description="Output format: json for structured, console for human-readable",
    )
    file_path: Path | None = Field(
        default=None,
        description="Path for rotating log file output (stderr when unset)",
    )
    max_file_size_mb: int = Field(
        default=50,
        gt=0,
        le=1000,
        description="Maximum log file size before rotation (MB)",
    )
    backup_count: int = Field(
        default=5,
        ge=0,
        le=100,
        description="Number of rotated log files to keep",
    )
    include_timestamps: bool = Field(
        default=True,
        description="Include ISO8601 UTC timestamps in log entries",
    )


class SqlEnrichConfig(BaseModel):
    """Top-level configuration file layout."""

    enricher: EnricherOptions = Field(default_factory=EnricherOptions)
    logging: LogConfig = Field(default_factory=LogConfig)


def _load_yaml(path: Path) -> dict[str, Any]:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top of {path}, got {type(data).__name__}")
    return data


def load_config(path: Path) -> SqlEnrichConfig:
    """Load the full configuration from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the content does not validate.
    """
    return SqlEnrichConfig.model_validate(_load_yaml(path))


def load_options(path: Path) -> EnricherOptions:
    """Load EnricherOptions from a YAML file.

    Accepts either a file with an ``enricher:`` section or a flat mapping
    of option names.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the options do not validate.
    """
    data = _load_yaml(path)
    if "enricher" in data:
        data = data["enricher"] or {}
    return EnricherOptions.model_validate(data)


__all__ = [
    "EnricherOptions",
    "LogConfig",
    "SqlEnrichConfig",
    "load_config",
    "load_options",
]
