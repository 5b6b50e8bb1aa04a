"""Tests for deadlock graph extraction."""

import pytest
from structlog.testing import capture_logs

from sqlenrich.core.errors import try_extract_graph


class TestTryExtractGraph:
    """Tests for try_extract_graph()."""

    def test_extracts_graph_from_message(self) -> None:
        graph = "<deadlock-list><deadlock><process-list/></deadlock></deadlock-list>"
        message = f"Transaction was deadlocked on lock resources. {graph} Rerun the transaction."
        assert try_extract_graph(message) == graph

    def test_opening_tag_with_attributes(self) -> None:
        graph = (
            '<deadlock-list xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" id="7">'
            '<deadlock victim="process2"/></deadlock-list>'
        )
        assert try_extract_graph(f"prefix {graph}") == graph

    def test_multiline_graph(self) -> None:
        graph = "<deadlock-list>\n  <deadlock>\n    <resource-list/>\n  </deadlock>\n</deadlock-list>"
        assert try_extract_graph(f"Deadlock:\n{graph}\n") == graph

    def test_first_graph_wins(self) -> None:
        first = "<deadlock-list><deadlock id='1'/></deadlock-list>"
        second = "<deadlock-list><deadlock id='2'/></deadlock-list>"
        assert try_extract_graph(first + second) == first

    @pytest.mark.parametrize(
        "message",
        [
            None,
            "",
            "   ",
            "Transaction (Process ID 52) was deadlocked.",
            "<deadlock-list><deadlock>",
            "<deadlock-list><deadlock></deadlock-list>",
            "<deadlock-listing></deadlock-listing>",
            "<deadlock-list><deadlock>\udc80</deadlock></deadlock-list>",
            "<deadlock-list>\ud800</deadlock-list>",
        ],
        ids=[
            "none",
            "empty",
            "blank",
            "no-xml",
            "unterminated",
            "unbalanced-inner",
            "other-root",
            "lone-low-surrogate",
            "lone-high-surrogate",
        ],
    )
    def test_returns_none(self, message: str | None) -> None:
        assert try_extract_graph(message) is None

    def test_malformed_graph_logs_rejection(self) -> None:
        with capture_logs() as logs:
            assert try_extract_graph("<deadlock-list><a></b></deadlock-list>") is None

        assert any(entry["event"] == "deadlock_graph_rejected" for entry in logs)

    def test_quoted_gt_in_opening_tag(self) -> None:
        graph = '<deadlock-list note="a > b"><deadlock/></deadlock-list>'
        assert try_extract_graph(f"Deadlocked: {graph}") == graph
