"""Classify command for the sqlenrich CLI.

Runs one error number (plus optional class, state and message) through the
same property builder the log enricher uses and prints the result.
"""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError

from sqlenrich.core.config import EnricherOptions, load_config
from sqlenrich.core.errors import ErrorRecord, SqlExceptionInfo
from sqlenrich.core.logging import configure_logging, get_logger
from sqlenrich.enrichment import SqlExceptionEnricher

from ..output import console, create_properties_table

_logger = get_logger("cli")


def _build_options(
    config_file: Path | None,
    otel: bool,
    prefix: str | None,
) -> EnricherOptions:
    """Resolve enricher options, applying the config file's logging section.

    The ``logging:`` section replaces the logging set up by the global
    options, so its level, format and file apply to this command.
    """
    if config_file is None:
        options = EnricherOptions()
    else:
        config = load_config(config_file)
        configure_logging(**config.logging.model_dump())
        options = config.enricher
    updates: dict[str, object] = {}
    if otel:
        updates["use_open_telemetry_semantics"] = True
    if prefix is not None:
        updates["property_prefix"] = prefix
    if updates:
        options = EnricherOptions.model_validate(
            {**options.model_dump(), **updates}
        )
    return options


def classify(
    number: int = typer.Argument(
        ...,
        help="SQL Server error number (pass negative driver errors after --, e.g. -- -2)",
    ),
    severity_class: int = typer.Option(
        16,
        "--class",
        "-c",
        min=0,
        max=255,
        help="Error class (severity) reported with the error",
    ),
    state: int = typer.Option(
        0,
        "--state",
        "-s",
        min=0,
        max=255,
        help="Error state",
    ),
    message: str = typer.Option(
        "",
        "--message",
        "-m",
        help="Error message text (may embed deadlock graph XML)",
    ),
    otel: bool = typer.Option(
        False,
        "--otel",
        help="Use OpenTelemetry-style attribute names",
    ),
    prefix: str | None = typer.Option(
        None,
        "--prefix",
        "-p",
        help="Property prefix (default: SqlException_)",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        exists=True,
        readable=True,
        dir_okay=False,
        help="YAML file with enricher and logging sections",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output properties as JSON",
    ),
) -> None:
    """Classify an error number and show the properties a log event would get.

    Exit codes:
      0: Classified
      1: Invalid options (e.g. blank prefix) or configuration file
    """
    try:
        options = _build_options(config_file, otel, prefix)
    except ValidationError as e:
        _logger.warning("invalid_enricher_options", error_count=e.error_count())
        console.print(f"[red]Invalid enricher options:[/red] {e}")
        raise typer.Exit(1) from None
    except ValueError as e:
        console.print(f"[red]Invalid configuration file:[/red] {e}")
        raise typer.Exit(1) from None

    record = ErrorRecord(
        code=number,
        severity_class=severity_class,
        state=state,
        message=message,
    )
    enricher = SqlExceptionEnricher(options)
    properties = enricher.build_properties(SqlExceptionInfo(errors=(record,)))
    _logger.debug("classified", number=number, property_count=len(properties))

    if json_output:
        console.print_json(data=properties)
        return

    console.print(create_properties_table(
        properties,
        title=f"SQL error {number}",
        severity_key=enricher.namer.name("SeverityLevel"),
    ))
