"""Tests for driver exception adapters."""

import pytest

from sqlenrich.core.errors import ConnectionInfo, ErrorRecord
from sqlenrich.enrichment import (
    find_sql_exception,
    from_error_collection,
    from_pymssql,
    iter_exception_chain,
)
from tests.helpers import FakePymssqlError, FakeSqlError, FakeSqlException


class TestErrorCollectionAdapter:
    """Tests for from_error_collection()."""

    def test_decodes_all_errors_in_order(self) -> None:
        exc = FakeSqlException(
            FakeSqlError(547, state=0, class_=16, message="FK conflict", procedure="usp_Save", line_number=12),
            FakeSqlError(3621, state=0, class_=0, message="The statement has been terminated."),
        )
        info = from_error_collection(exc)

        assert info is not None
        assert info.error_count == 2
        assert info.original is exc
        assert info.primary == ErrorRecord(
            code=547,
            severity_class=16,
            state=0,
            message="FK conflict",
            procedure="usp_Save",
            server="sql01",
            line=12,
        )
        assert [e.code for e in info.errors] == [547, 3621]

    def test_connection_context(self, deadlock_exception: FakeSqlException) -> None:
        info = from_error_collection(deadlock_exception)
        assert info is not None
        assert info.connection == ConnectionInfo(
            data_source="tcp:sql01,1433",
            database="orders",
            connection_timeout=15,
            client_connection_id="8f5a2c1e-0000-4000-8000-000000000001",
        )

    def test_no_connection_context(self) -> None:
        info = from_error_collection(FakeSqlException(FakeSqlError(208)))
        assert info is not None
        assert info.connection is None

    @pytest.mark.parametrize(
        "errors",
        [None, "errors", b"errors", ["not an error"], 42],
        ids=["none", "str", "bytes", "items-without-number", "not-a-sequence"],
    )
    def test_rejects_other_shapes(self, errors: object) -> None:
        exc = RuntimeError("boom")
        exc.errors = errors  # type: ignore[attr-defined]
        assert from_error_collection(exc) is None

    def test_empty_collection_is_not_recognised(self) -> None:
        assert from_error_collection(FakeSqlException()) is None

    def test_unrelated_exception_with_empty_errors(self) -> None:
        exc = RuntimeError("api call failed")
        exc.errors = []  # type: ignore[attr-defined]
        assert find_sql_exception(exc) is None

    def test_unreadable_values_fall_back(self) -> None:
        error = FakeSqlError(1205)
        error.class_ = "high"  # type: ignore[assignment]
        error.line_number = None  # type: ignore[assignment]
        info = from_error_collection(FakeSqlException(error))
        assert info is not None
        assert info.primary is not None
        assert info.primary.severity_class == 0
        assert info.primary.line == 0


class TestPymssqlAdapter:
    """Tests for from_pymssql()."""

    def test_decodes_bytes_fields(self) -> None:
        exc = FakePymssqlError(
            2627,
            severity=14,
            state=1,
            text=b"Violation of PRIMARY KEY constraint 'PK_Orders'.",
            srvname=b"sql01",
            procname=b"usp_Insert",
            line=3,
        )
        info = from_pymssql(exc)

        assert info is not None
        assert info.primary == ErrorRecord(
            code=2627,
            severity_class=14,
            state=1,
            message="Violation of PRIMARY KEY constraint 'PK_Orders'.",
            procedure="usp_Insert",
            server="sql01",
            line=3,
        )

    def test_invalid_utf8_is_replaced(self) -> None:
        info = from_pymssql(FakePymssqlError(50000, text=b"bad \xff byte"))
        assert info is not None
        assert info.primary is not None
        assert info.primary.message == "bad � byte"

    def test_requires_number(self) -> None:
        assert from_pymssql(ValueError("no number")) is None

    def test_bare_number_is_not_enough(self) -> None:
        exc = ValueError("http error")
        exc.number = 404  # type: ignore[attr-defined]
        assert from_pymssql(exc) is None

    def test_number_with_state_is_recognised(self) -> None:
        exc = ValueError("driver error")
        exc.number = 18456  # type: ignore[attr-defined]
        exc.state = 1  # type: ignore[attr-defined]
        info = from_pymssql(exc)
        assert info is not None
        assert info.primary is not None
        assert info.primary.code == 18456


class TestExceptionChain:
    """Tests for iter_exception_chain() / find_sql_exception()."""

    def test_finds_cause(self) -> None:
        inner = FakeSqlException(FakeSqlError(1205))
        try:
            try:
                raise inner
            except FakeSqlException as e:
                raise RuntimeError("repository failed") from e
        except RuntimeError as outer:
            info = find_sql_exception(outer)

        assert info is not None
        assert info.original is inner

    def test_finds_context(self) -> None:
        try:
            try:
                raise FakePymssqlError(-2)
            except FakePymssqlError:
                raise KeyError("while handling")
        except KeyError as outer:
            info = find_sql_exception(outer)

        assert info is not None
        assert info.primary is not None
        assert info.primary.code == -2

    def test_outermost_sql_exception_wins(self) -> None:
        inner = FakeSqlException(FakeSqlError(1205))
        outer = FakeSqlException(FakeSqlError(-2))
        outer.__cause__ = inner
        info = find_sql_exception(outer)
        assert info is not None
        assert info.original is outer

    def test_cyclic_chain_terminates(self) -> None:
        a = RuntimeError("a")
        b = RuntimeError("b")
        a.__cause__ = b
        b.__cause__ = a
        assert list(iter_exception_chain(a)) == [a, b]
        assert find_sql_exception(a) is None

    def test_none_and_plain_exceptions(self) -> None:
        assert find_sql_exception(None) is None
        assert find_sql_exception(ValueError("plain")) is None

    def test_custom_adapters(self) -> None:
        exc = ValueError("custom")
        info = find_sql_exception(exc, adapters=[])
        assert info is None
