"""Public API for query language parser/compiler/runtime."""

from jqlite.query_language.compiler import CompiledQuery, compile_expr, compile_query_text
from jqlite.query_language.errors import (
    QueryIndexError,
    QueryIterateError,
    QueryLanguageError,
    QueryNumericalError,
    QueryObjectKeyError,
    QueryOperationError,
    QueryParseError,
    QueryRuntimeError,
)
from jqlite.query_language.parser import parse_query
from jqlite.query_language.printer import format_query
from jqlite.query_language.runtime import Stream, evaluate_expr, execute


__all__ = [
    "CompiledQuery",
    "QueryIndexError",
    "QueryIterateError",
    "QueryLanguageError",
    "QueryNumericalError",
    "QueryObjectKeyError",
    "QueryOperationError",
    "QueryParseError",
    "QueryRuntimeError",
    "Stream",
    "compile_expr",
    "compile_query_text",
    "evaluate_expr",
    "execute",
    "format_query",
    "parse_query",
]
