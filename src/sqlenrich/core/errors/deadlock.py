"""Deadlock detection and deadlock graph extraction.

SQL Server reports a deadlock victim with error 1205. Some server and driver
combinations also embed the deadlock graph XML (``<deadlock-list>...``) in the
message text; others never do, so extraction is best-effort and fails soft.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

from sqlenrich.core.constants import DEADLOCK_GRAPH_ROOT
from sqlenrich.core.logging import get_logger

from .codes import DEADLOCK_VICTIM_NUMBER

_logger = get_logger("errors")

# Opening tag may carry attributes and namespace declarations; quoted
# attribute values may contain ">".
# Non-greedy so the match ends at the first closing tag.
_DEADLOCK_GRAPH_PATTERN = re.compile(
    rf"""<{DEADLOCK_GRAPH_ROOT}(?:\s(?:[^>"']|"[^"]*"|'[^']*')*)?>.*?</{DEADLOCK_GRAPH_ROOT}>""",
    re.DOTALL,
)


def is_deadlock(code: int) -> bool:
    """True only for the deadlock victim error number (1205)."""
    return code == DEADLOCK_VICTIM_NUMBER


def _is_well_formed(fragment: str) -> bool:
    """Stream the fragment through a pull parser and report whether it parsed."""
    parser = ET.XMLPullParser(events=("end",))
    try:
        parser.feed(fragment)
        # feed() queues syntax errors; they surface while draining events
        for _event in parser.read_events():
            pass
        parser.close()
    except (ET.ParseError, ValueError) as e:
        # UnicodeEncodeError: lone surrogates in driver text fail before parsing
        _logger.debug("deadlock_graph_rejected", reason=str(e))
        return False
    return True


def try_extract_graph(message: str | None) -> str | None:
    """Extract a well-formed deadlock graph from an error message.

    Args:
        message: The error message text, possibly None or blank.

    Returns:
        The first ``<deadlock-list>...</deadlock-list>`` substring if it is
        well-formed XML on its own, otherwise None. Never raises.
    """
    if not message or not message.strip():
        return None

    match = _DEADLOCK_GRAPH_PATTERN.search(message)
    if match is None:
        return None

    fragment = match.group(0)
    if not _is_well_formed(fragment):
        return None
    return fragment
