"""sqlenrich CLI.

Package structure:
    cli/
    ├── __init__.py           # App assembly and global options
    ├── output.py             # Rich formatting
    └── commands/
        ├── classify.py       # classify command
        └── codes.py          # codes command
"""

from __future__ import annotations

from typing import Annotated

import typer

from sqlenrich import __version__
from sqlenrich.core.logging import configure_logging

from .commands import classify, codes
from .output import console

# =============================================================================
# Typer app definition
# =============================================================================

app = typer.Typer(
    name="sqlenrich",
    help="Classify SQL Server errors the way the log enricher does",
    add_completion=False,
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


# =============================================================================
# Global option callbacks
# =============================================================================


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"sqlenrich v{__version__}")
        raise typer.Exit()


def log_level_callback(value: str | None) -> str | None:
    """Validate the log level from the CLI option."""
    if value is not None and value.upper() not in _LOG_LEVELS:
        raise typer.BadParameter(f"must be one of {', '.join(_LOG_LEVELS)}")
    return value.upper() if value is not None else None


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-L",
            callback=log_level_callback,
            help="Logging level (DEBUG, INFO, WARNING, ERROR)",
            envvar="SQLENRICH_LOG_LEVEL",
        ),
    ] = None,
) -> None:
    """sqlenrich - SQL Server error classification for structured logs."""
    configure_logging(level=log_level or "WARNING", format="console")


# =============================================================================
# Command registration
# =============================================================================

app.command()(classify)
app.command()(codes)


__all__ = ["app"]
