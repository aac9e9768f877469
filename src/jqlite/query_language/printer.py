"""Canonical text rendering of query ASTs."""

from __future__ import annotations

import json
import re

from jqlite.query_language.ast import (
    ArrayConstruction,
    BinaryOp,
    DynamicIndex,
    Expr,
    Field,
    Identity,
    Iterate,
    Literal,
    ObjectConstruction,
    ObjectEntry,
    Optional,
    Pipe,
    RecursiveDescent,
    Slice,
    Split,
)
from jqlite.query_language.errors import QueryLanguageError
from jqlite.query_language.lexemes import IDENTIFIER_PATTERN


SPLIT_PRECEDENCE = 1
PIPE_PRECEDENCE = 2
ADDITIVE_PRECEDENCE = 3
MULTIPLICATIVE_PRECEDENCE = 4
TERM_PRECEDENCE = 5

_IDENTIFIER = re.compile(IDENTIFIER_PATTERN)


def format_query(expr: Expr) -> str:
    """Render an expression as query text that parses back to the same AST."""
    return _format(expr, SPLIT_PRECEDENCE)


def _precedence(expr: Expr) -> int:
    if isinstance(expr, Split):
        return SPLIT_PRECEDENCE
    if isinstance(expr, Pipe):
        return PIPE_PRECEDENCE
    if isinstance(expr, BinaryOp):
        if expr.operator in {"+", "-"}:
            return ADDITIVE_PRECEDENCE
        return MULTIPLICATIVE_PRECEDENCE
    return TERM_PRECEDENCE


def _format(expr: Expr, min_precedence: int) -> str:
    text = _format_node(expr)
    if _precedence(expr) < min_precedence:
        return f"({text})"
    return text


def _format_node(expr: Expr) -> str:  # noqa: PLR0911
    if isinstance(expr, Identity):
        return "."
    if isinstance(expr, RecursiveDescent):
        return ".."
    if isinstance(expr, Field):
        return f".{_format_field_name(expr.name)}"
    if isinstance(expr, DynamicIndex):
        return f".[{_format(expr.key, SPLIT_PRECEDENCE)}]"
    if isinstance(expr, Slice):
        start = "" if expr.start is None else _format(expr.start, SPLIT_PRECEDENCE)
        end = "" if expr.end is None else _format(expr.end, SPLIT_PRECEDENCE)
        return f".[{start}:{end}]"
    if isinstance(expr, Iterate):
        return ".[]"
    if isinstance(expr, Optional):
        return f"{_format_optional_operand(expr.expr)}?"
    if isinstance(expr, Pipe):
        left = _format(expr.left, PIPE_PRECEDENCE)
        return f"{left} | {_format(expr.right, PIPE_PRECEDENCE + 1)}"
    if isinstance(expr, Split):
        left = _format(expr.left, SPLIT_PRECEDENCE)
        return f"{left}, {_format(expr.right, SPLIT_PRECEDENCE + 1)}"
    if isinstance(expr, BinaryOp):
        precedence = _precedence(expr)
        left = _format(expr.left, precedence)
        return f"{left} {expr.operator} {_format(expr.right, precedence + 1)}"
    if isinstance(expr, ArrayConstruction):
        if expr.expr is None:
            return "[]"
        return f"[{_format(expr.expr, SPLIT_PRECEDENCE)}]"
    if isinstance(expr, ObjectConstruction):
        return "{" + ", ".join(_format_entry(entry) for entry in expr.entries) + "}"
    if isinstance(expr, Literal):
        return json.dumps(expr.value)
    raise QueryLanguageError(f"Cannot format expression type: {type(expr).__name__}")


def _format_field_name(name: str) -> str:
    if _IDENTIFIER.fullmatch(name):
        return name
    return json.dumps(name)


def _format_optional_operand(expr: Expr) -> str:
    # `x??` parses as a single Optional, so nested markers need a group.
    if isinstance(expr, Optional):
        return f"({_format_node(expr)})"
    return _format(expr, TERM_PRECEDENCE)


def _format_entry(entry: ObjectEntry) -> str:
    value = _format(entry.value, PIPE_PRECEDENCE)
    if isinstance(entry.key, Literal) and isinstance(entry.key.value, str):
        return f"{json.dumps(entry.key.value)}: {value}"
    return f"({_format(entry.key, SPLIT_PRECEDENCE)}): {value}"
