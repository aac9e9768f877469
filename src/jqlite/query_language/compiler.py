"""Compiler entrypoints for query language."""

from __future__ import annotations

from typing import TypeAlias

import logging
from collections.abc import Callable

from jqlite.query_language.ast import Expr
from jqlite.query_language.parser import parse_query
from jqlite.query_language.runtime import Stream, evaluate_expr


CompiledQuery: TypeAlias = Callable[[object], Stream]


logger = logging.getLogger("jqlite")


def compile_expr(expr: Expr) -> CompiledQuery:
    """Compile expression into executable query callable."""

    def _compiled(value: object) -> Stream:
        return evaluate_expr(expr, value)

    return _compiled


def compile_query_text(query: str) -> CompiledQuery:
    """Parse and compile query text."""
    expr = parse_query(query)
    logger.debug("Compiled query %r to %r", query, expr)
    return compile_expr(expr)
