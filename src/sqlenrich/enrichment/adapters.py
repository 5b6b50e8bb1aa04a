"""Driver exception adapters.

Decodes SQL Server driver exceptions into ``SqlExceptionInfo`` without
importing any driver. Recognition is duck-typed:

- Error-collection drivers expose ``errors``, a sequence of objects with
  ``number``, ``state``, ``class_`` (or ``severity``), ``message``,
  ``procedure``, ``server`` and ``line_number`` (or ``line``).
- pymssql-style drivers expose the first error's fields directly on the
  exception: ``number``, ``severity``, ``state``, ``line``, ``text``,
  ``srvname`` and ``procname``.

Attributes that are missing or unreadable fall back to neutral defaults.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import Any

from sqlenrich.core.errors.models import ConnectionInfo, ErrorRecord, SqlExceptionInfo

Adapter = Callable[[BaseException], "SqlExceptionInfo | None"]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _as_int(value: Any, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _first_attr(obj: Any, *names: str) -> Any:
    """Value of the first attribute in ``names`` that exists and is not None."""
    for name in names:
        value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


def _connection_info(exc: BaseException) -> ConnectionInfo | None:
    timeout = _first_attr(exc, "connection_timeout")
    info = ConnectionInfo(
        data_source=_first_attr(exc, "data_source"),
        database=_first_attr(exc, "database"),
        connection_timeout=_as_int(timeout) if timeout is not None else None,
        client_connection_id=_first_attr(exc, "client_connection_id"),
    )
    return None if info.is_empty() else info


def _record_from_error(error: Any) -> ErrorRecord:
    return ErrorRecord(
        code=_as_int(_first_attr(error, "number")),
        severity_class=_as_int(_first_attr(error, "class_", "severity", "error_class")),
        state=_as_int(_first_attr(error, "state")),
        message=_as_text(_first_attr(error, "message", "text")),
        procedure=_as_text(_first_attr(error, "procedure", "procname")),
        server=_as_text(_first_attr(error, "server", "srvname")),
        line=_as_int(_first_attr(error, "line_number", "line")),
    )


def from_error_collection(exc: BaseException) -> SqlExceptionInfo | None:
    """Adapter for drivers that attach a collection of error objects."""
    errors = getattr(exc, "errors", None)
    if errors is None or isinstance(errors, (str, bytes)) or not isinstance(errors, Sequence):
        return None
    # An empty collection says nothing about the driver; other client
    # libraries carry empty `errors` lists too.
    if not errors or not all(hasattr(error, "number") for error in errors):
        return None
    return SqlExceptionInfo(
        errors=tuple(_record_from_error(error) for error in errors),
        original=exc,
        connection=_connection_info(exc),
    )


def from_pymssql(exc: BaseException) -> SqlExceptionInfo | None:
    """Adapter for pymssql-style exceptions carrying a single error inline.

    A bare ``number`` is not enough: ``severity`` or ``state`` must be
    present as well.
    """
    if getattr(exc, "number", None) is None:
        return None
    if _first_attr(exc, "severity", "state") is None:
        return None
    record = ErrorRecord(
        code=_as_int(exc.number),  # type: ignore[attr-defined]
        severity_class=_as_int(_first_attr(exc, "severity")),
        state=_as_int(_first_attr(exc, "state")),
        message=_as_text(_first_attr(exc, "text", "message")),
        procedure=_as_text(_first_attr(exc, "procname")),
        server=_as_text(_first_attr(exc, "srvname")),
        line=_as_int(_first_attr(exc, "line")),
    )
    return SqlExceptionInfo(errors=(record,), original=exc, connection=_connection_info(exc))


DEFAULT_ADAPTERS: tuple[Adapter, ...] = (from_error_collection, from_pymssql)


def iter_exception_chain(exc: BaseException | None) -> Iterator[BaseException]:
    """Yield ``exc`` and its causes, preferring ``__cause__`` over ``__context__``.

    Each exception is yielded at most once, so cyclic chains terminate.
    """
    seen: set[int] = set()
    current = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def find_sql_exception(
    exc: BaseException | None,
    adapters: Sequence[Adapter] = DEFAULT_ADAPTERS,
) -> SqlExceptionInfo | None:
    """Find the first SQL driver exception in an exception chain.

    Args:
        exc: The outermost exception, or None.
        adapters: Adapters tried in order on each exception in the chain.

    Returns:
        The decoded exception, or None when nothing in the chain is recognised.
    """
    for candidate in iter_exception_chain(exc):
        for adapter in adapters:
            info = adapter(candidate)
            if info is not None:
                return info
    return None
