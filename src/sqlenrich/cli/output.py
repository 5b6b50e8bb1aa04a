"""Rich output formatting for the sqlenrich CLI.

Centralizes colors and table builders so every command renders
classification data the same way.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table

from sqlenrich.core.errors import ErrorCategory, RetryStrategy, SeverityLevel

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

# =============================================================================
# Shared console instance
# =============================================================================

console = Console()


# =============================================================================
# Color schemes
# =============================================================================


class ClassificationColors:
    """Color mappings for classification values."""

    CATEGORY: dict[ErrorCategory, str] = {
        ErrorCategory.UNKNOWN: "dim",
        ErrorCategory.CONNECTIVITY: "yellow",
        ErrorCategory.SYNTAX: "magenta",
        ErrorCategory.PERMISSION: "red",
        ErrorCategory.CONSTRAINT: "magenta",
        ErrorCategory.RESOURCE: "yellow",
        ErrorCategory.CORRUPTION: "bold red",
        ErrorCategory.CONCURRENCY: "cyan",
    }

    SEVERITY: dict[SeverityLevel, str] = {
        SeverityLevel.INFORMATIONAL: "dim",
        SeverityLevel.WARNING: "yellow",
        SeverityLevel.ERROR: "red",
        SeverityLevel.SEVERE: "bold red",
        SeverityLevel.CRITICAL: "bold white on red",
        SeverityLevel.FATAL: "bold white on red",
    }

    STRATEGY: dict[RetryStrategy, str] = {
        RetryStrategy.NONE: "dim",
        RetryStrategy.LINEAR: "cyan",
        RetryStrategy.EXPONENTIAL: "green",
    }


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "[green]True[/green]" if value else "[dim]False[/dim]"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def create_properties_table(
    properties: Mapping[str, Any],
    title: str | None = None,
    severity_key: str | None = None,
) -> Table:
    """Build a two-column table of enriched property names and values.

    Args:
        properties: Enriched property names and values.
        title: Optional table title.
        severity_key: Property holding the SeverityLevel name; its value is
            colored by level.
    """
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value")
    for name, value in properties.items():
        if name == severity_key:
            table.add_row(name, format_severity(SeverityLevel(value)))
        else:
            table.add_row(name, _format_value(value))
    return table


def create_codes_table(rows: Iterable[dict[str, Any]]) -> Table:
    """Build the table of curated error numbers."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Number", justify="right", style="bold")
    table.add_column("Category")
    table.add_column("Timeout")
    table.add_column("Origin")
    table.add_column("Retry")
    table.add_column("Strategy")
    table.add_column("Delay", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Reason", overflow="fold")

    for row in rows:
        category: ErrorCategory = row["category"]
        strategy: RetryStrategy = row["strategy"]
        category_color = ClassificationColors.CATEGORY.get(category, "white")
        strategy_color = ClassificationColors.STRATEGY.get(strategy, "white")
        table.add_row(
            str(row["number"]),
            f"[{category_color}]{category.value}[/{category_color}]",
            row["timeout"],
            "user" if row["user_error"] else "system",
            _format_value(row["should_retry"]),
            f"[{strategy_color}]{strategy.value}[/{strategy_color}]",
            row["delay"],
            str(row["max_retries"]),
            row["reason"],
        )
    return table


def format_severity(level: SeverityLevel) -> str:
    """Format a severity level with its color."""
    color = ClassificationColors.SEVERITY.get(level, "white")
    return f"[{color}]{level.value}[/{color}]"
