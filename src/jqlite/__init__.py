"""jqlite - a jq-style query engine for JSON values."""

from jqlite.query_language import (
    QueryLanguageError,
    QueryParseError,
    QueryRuntimeError,
    execute,
    format_query,
)
from jqlite.query_language import parse_query as parse


__version__ = "0.1.0"

__all__ = [
    "QueryLanguageError",
    "QueryParseError",
    "QueryRuntimeError",
    "__version__",
    "execute",
    "format_query",
    "parse",
]
