"""Shared test helpers: fake driver exceptions shaped like real SQL Server drivers."""

from __future__ import annotations


class FakeSqlError:
    """One entry of an error-collection driver exception."""

    def __init__(
        self,
        number: int,
        state: int = 1,
        class_: int = 16,
        message: str = "",
        procedure: str = "",
        server: str = "sql01",
        line_number: int = 1,
    ) -> None:
        self.number = number
        self.state = state
        self.class_ = class_
        self.message = message
        self.procedure = procedure
        self.server = server
        self.line_number = line_number


class FakeSqlException(Exception):
    """Shaped like a SqlClient exception: an ``errors`` collection plus connection context."""

    def __init__(
        self,
        *errors: FakeSqlError,
        data_source: str | None = None,
        database: str | None = None,
        connection_timeout: int | None = None,
        client_connection_id: str | None = None,
    ) -> None:
        super().__init__(errors[0].message if errors else "sql error")
        self.errors = list(errors)
        self.data_source = data_source
        self.database = database
        self.connection_timeout = connection_timeout
        self.client_connection_id = client_connection_id


class FakePymssqlError(Exception):
    """Shaped like a pymssql DatabaseError with the first error inline."""

    def __init__(
        self,
        number: int,
        severity: int = 16,
        state: int = 1,
        text: bytes | str = b"",
        srvname: bytes | str = b"sql01",
        procname: bytes | str = b"",
        line: int = 1,
    ) -> None:
        super().__init__(number, text)
        self.number = number
        self.severity = severity
        self.state = state
        self.text = text
        self.srvname = srvname
        self.procname = procname
        self.line = line
