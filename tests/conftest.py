"""Pytest fixtures for sqlenrich tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from sqlenrich.core.config import EnricherOptions
from tests.helpers import FakeSqlError, FakeSqlException


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """Reset structlog and root handlers before and after each test."""
    structlog.reset_defaults()

    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    for handler in original_handlers:
        root_logger.removeHandler(handler)

    yield

    structlog.reset_defaults()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


@pytest.fixture
def deadlock_exception() -> FakeSqlException:
    """A deadlock victim exception carrying a deadlock graph in its message."""
    return FakeSqlException(
        FakeSqlError(
            1205,
            state=51,
            class_=13,
            message=(
                "Transaction (Process ID 52) was deadlocked on lock resources. "
                '<deadlock-list><deadlock victim="process1"><process-list/>'
                "</deadlock></deadlock-list>"
            ),
        ),
        data_source="tcp:sql01,1433",
        database="orders",
        connection_timeout=15,
        client_connection_id="8f5a2c1e-0000-4000-8000-000000000001",
    )


@pytest.fixture
def default_options() -> EnricherOptions:
    return EnricherOptions()


@pytest.fixture
def options_yaml(tmp_path: Path) -> Path:
    """A YAML config file with an enricher section and a logging section.

    Logs go to ``logs/sqlenrich.log`` next to the file.
    """
    path = tmp_path / "sqlenrich.yaml"
    path.write_text(
        "enricher:\n"
        "  property_prefix: Sql_\n"
        "  include_deadlock_graph: false\n"
        "  provide_retry_guidance: false\n"
        "logging:\n"
        "  level: DEBUG\n"
        "  format: json\n"
        f"  file_path: {tmp_path / 'logs' / 'sqlenrich.log'}\n"
    )
    return path
