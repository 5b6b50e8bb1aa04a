"""Codes command for the sqlenrich CLI.

Lists every curated error number with the classification it receives.
"""

from __future__ import annotations

from typing import Any

import typer

from sqlenrich.core.errors import (
    ErrorCategory,
    classify_category,
    is_user_error,
    known_error_numbers,
    retry_guidance,
    timeout_type,
)

from ..output import console, create_codes_table


def _code_rows(category: ErrorCategory | None) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for number in known_error_numbers():
        row_category = classify_category(number)
        if category is not None and row_category is not category:
            continue
        guidance = retry_guidance(number)
        rows.append({
            "number": number,
            "category": row_category,
            "timeout": timeout_type(number).value,
            "user_error": is_user_error(number),
            "should_retry": guidance.should_retry,
            "strategy": guidance.strategy,
            "delay": guidance.delay_text,
            "max_retries": guidance.max_retries,
            "reason": guidance.reason,
        })
    return rows


def codes(
    category: ErrorCategory | None = typer.Option(
        None,
        "--category",
        "-c",
        case_sensitive=False,
        help="Only show error numbers in this category",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output the table as JSON",
    ),
) -> None:
    """List the curated SQL Server error numbers and their classification."""
    rows = _code_rows(category)

    if json_output:
        payload = [
            {
                **row,
                "category": row["category"].value,
                "strategy": row["strategy"].value,
            }
            for row in rows
        ]
        console.print_json(data=payload)
        return

    if not rows:
        console.print("[dim]No curated error numbers in this category.[/dim]")
        return

    console.print(create_codes_table(rows))
    console.print(f"\n[dim]{len(rows)} error number(s)[/dim]")
