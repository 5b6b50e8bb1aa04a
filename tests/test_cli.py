"""Tests for the sqlenrich CLI."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from typer.testing import CliRunner

from sqlenrich.cli import app
from sqlenrich.cli.output import create_properties_table

runner = CliRunner()


class TestVersionCommand:
    """Tests for the --version flag."""

    def test_version_shows_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "sqlenrich v" in result.stdout


class TestClassifyCommand:
    """Tests for the classify command."""

    def test_deadlock_json(self) -> None:
        result = runner.invoke(app, ["classify", "1205", "--class", "13", "--json"])
        assert result.exit_code == 0

        props = json.loads(result.stdout)
        assert props["SqlException_Number"] == 1205
        assert props["SqlException_IsDeadlock"] is True
        assert props["SqlException_RetryStrategy"] == "Exponential"
        assert props["SqlException_SuggestedRetryDelay"] == "100ms"
        assert props["SqlException_MaxRetries"] == 3

    def test_negative_driver_code(self) -> None:
        result = runner.invoke(app, ["classify", "--class", "11", "--json", "--", "-2"])
        assert result.exit_code == 0

        props = json.loads(result.stdout)
        assert props["SqlException_IsTimeout"] is True
        assert props["SqlException_TimeoutType"] == "Command"
        assert props["SqlException_ErrorCategory"] == "Connectivity"
        assert props["SqlException_SeverityLevel"] == "Warning"
        assert props["SqlException_RetryStrategy"] == "Linear"
        assert props["SqlException_MaxRetries"] == 1

    def test_open_telemetry_names(self) -> None:
        result = runner.invoke(app, ["classify", "2627", "--otel", "--json"])
        assert result.exit_code == 0

        props = json.loads(result.stdout)
        assert props["db.error.code"] == 2627
        assert props["db.error.retry.recommended"] is False
        assert props["db.error.user_caused"] is True

    def test_custom_prefix(self) -> None:
        result = runner.invoke(app, ["classify", "823", "--prefix", "Sql_", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["Sql_ErrorCategory"] == "Corruption"

    def test_blank_prefix_exits_with_error(self) -> None:
        result = runner.invoke(app, ["classify", "1205", "--prefix", "   "])
        assert result.exit_code == 1
        assert "Invalid enricher options" in result.stdout

    def test_config_file(self, options_yaml: Path) -> None:
        result = runner.invoke(app, ["classify", "1205", "--config", str(options_yaml), "--json"])
        assert result.exit_code == 0

        props = json.loads(result.stdout)
        assert props["Sql_Number"] == 1205
        assert "Sql_ShouldRetry" not in props

    def test_config_file_applies_logging_section(self, options_yaml: Path) -> None:
        result = runner.invoke(app, ["classify", "1205", "--config", str(options_yaml), "--json"])
        assert result.exit_code == 0
        assert logging.getLogger().level == logging.DEBUG

        log_file = options_yaml.parent / "logs" / "sqlenrich.log"
        events = [json.loads(line) for line in log_file.read_text().splitlines()]
        classified = [e for e in events if e["event"] == "classified"]
        assert classified[0]["number"] == 1205
        assert classified[0]["component"] == "cli"

    def test_non_mapping_config_file(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- one\n")
        result = runner.invoke(app, ["classify", "1205", "--config", str(path)])
        assert result.exit_code == 1
        assert "Invalid configuration file" in result.stdout

    def test_table_output(self) -> None:
        result = runner.invoke(app, ["classify", "40501"])
        assert result.exit_code == 0
        assert "SQL error 40501" in result.stdout

    def test_table_shows_severity_level(self) -> None:
        result = runner.invoke(app, ["classify", "824", "--class", "24"])
        assert result.exit_code == 0
        assert "Critical" in result.stdout

    def test_table_shows_severity_level_with_otel_names(self) -> None:
        result = runner.invoke(app, ["classify", "1205", "--class", "13", "--otel"])
        assert result.exit_code == 0
        assert "Warning" in result.stdout


class TestCodesCommand:
    """Tests for the codes command."""

    def test_filtered_json(self) -> None:
        result = runner.invoke(app, ["codes", "--category", "Corruption", "--json"])
        assert result.exit_code == 0

        rows = json.loads(result.stdout)
        assert [row["number"] for row in rows] == [823, 824, 825]
        assert all(row["category"] == "Corruption" for row in rows)
        assert all(row["should_retry"] is False for row in rows)

    def test_unfiltered_json_includes_retry_only_codes(self) -> None:
        result = runner.invoke(app, ["codes", "--json"])
        assert result.exit_code == 0

        by_number = {row["number"]: row for row in json.loads(result.stdout)}
        assert by_number[1205]["strategy"] == "Exponential"
        assert by_number[49918]["category"] == "Unknown"
        assert by_number[-2]["timeout"] == "Command"

    def test_table_output(self) -> None:
        result = runner.invoke(app, ["codes"])
        assert result.exit_code == 0
        assert "error number(s)" in result.stdout


class TestPropertiesTable:
    """Tests for create_properties_table()."""

    def test_severity_value_is_colored(self) -> None:
        table = create_properties_table(
            {"X_Number": 824, "X_SeverityLevel": "Fatal"},
            severity_key="X_SeverityLevel",
        )
        assert list(table.columns[1].cells) == [
            "824",
            "[bold white on red]Fatal[/bold white on red]",
        ]

    def test_without_severity_key(self) -> None:
        table = create_properties_table({"X_SeverityLevel": "Fatal"})
        assert list(table.columns[1].cells) == ["Fatal"]
