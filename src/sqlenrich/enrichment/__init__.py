"""Log event enrichment for SQL Server driver exceptions."""

from sqlenrich.enrichment.adapters import (
    DEFAULT_ADAPTERS,
    find_sql_exception,
    from_error_collection,
    from_pymssql,
    iter_exception_chain,
)
from sqlenrich.enrichment.processor import SqlExceptionEnricher, add_sql_exception_enricher

__all__ = [
    "DEFAULT_ADAPTERS",
    "SqlExceptionEnricher",
    "add_sql_exception_enricher",
    "find_sql_exception",
    "from_error_collection",
    "from_pymssql",
    "iter_exception_chain",
]
