"""Runtime evaluation for query language expressions."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from itertools import product

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
    Optional,
    Pipe,
    RecursiveDescent,
    Slice,
    Split,
)
from jqlite.query_language.construction import EntryStreams, construct_array, construct_objects
from jqlite.query_language.errors import QueryRuntimeError
from jqlite.query_language.indexing import (
    index_field,
    index_value,
    iterate_value,
    recursive_descent,
    slice_value,
)
from jqlite.query_language.operators import apply_operator


class Stream(list[object]):
    """Typed stream container for query evaluation values."""


logger = logging.getLogger("jqlite")


def _stream(values: Iterable[object] = ()) -> Stream:
    """Build a stream from iterable values."""
    return Stream(values)


def evaluate_expr(expr: Expr, value: object) -> Stream:
    """Evaluate an expression against one input value."""
    atomic_result = _evaluate_atomic(expr, value)
    if atomic_result is not None:
        return atomic_result

    if isinstance(expr, Pipe):
        return _evaluate_pipe(expr, value)
    if isinstance(expr, Split):
        return _stream([*evaluate_expr(expr.left, value), *evaluate_expr(expr.right, value)])
    if isinstance(expr, Optional):
        return _evaluate_optional(expr, value)
    return _evaluate_operator_expr(expr, value)


def execute(expr: Expr, value: object) -> list[object]:
    """Run a parsed query against one input value."""
    return list(evaluate_expr(expr, value))


def _evaluate_atomic(expr: Expr, value: object) -> Stream | None:
    """Evaluate expressions that do not recurse into subqueries."""
    result: Stream | None = None
    if isinstance(expr, Identity):
        result = _stream([value])
    elif isinstance(expr, RecursiveDescent):
        result = _stream(recursive_descent(value))
    elif isinstance(expr, Field):
        result = _stream([index_field(value, expr.name)])
    elif isinstance(expr, Iterate):
        result = _stream(iterate_value(value))
    elif isinstance(expr, Literal):
        result = _stream([expr.value])
    return result


def _evaluate_operator_expr(expr: Expr, value: object) -> Stream:
    """Evaluate expressions combining subquery streams."""
    result: Stream | None = None
    if isinstance(expr, DynamicIndex):
        keys = evaluate_expr(expr.key, value)
        result = _stream([index_value(value, key) for key in keys])
    elif isinstance(expr, Slice):
        result = _evaluate_slice(expr, value)
    elif isinstance(expr, ArrayConstruction):
        result = _evaluate_array_construction(expr, value)
    elif isinstance(expr, ObjectConstruction):
        result = _evaluate_object_construction(expr, value)
    elif isinstance(expr, BinaryOp):
        result = _evaluate_binary_op(expr, value)
    if result is not None:
        return result
    raise QueryRuntimeError(f"Unsupported expression type: {type(expr).__name__}")


def _evaluate_pipe(expr: Pipe, value: object) -> Stream:
    """Feed every left output into the right expression, in order."""
    output = _stream()
    for item in evaluate_expr(expr.left, value):
        output.extend(evaluate_expr(expr.right, item))
    return output


def _evaluate_optional(expr: Optional, value: object) -> Stream:
    """Evaluate wrapped expression, turning a runtime error into no output."""
    try:
        return evaluate_expr(expr.expr, value)
    except QueryRuntimeError as exc:
        logger.debug("Suppressed error in optional expression: %s", exc)
        return _stream()


def _evaluate_bound(bound: Expr | None, value: object) -> Stream:
    """Evaluate an optional slice bound, open bounds yield one null."""
    if bound is None:
        return _stream([None])
    return evaluate_expr(bound, value)


def _evaluate_slice(expr: Slice, value: object) -> Stream:
    """Evaluate slice access for every combination of bounds."""
    starts = _evaluate_bound(expr.start, value)
    ends = _evaluate_bound(expr.end, value)
    return _stream([slice_value(value, start, end) for start, end in product(starts, ends)])


def _evaluate_array_construction(expr: ArrayConstruction, value: object) -> Stream:
    """Collect subquery stream into exactly one array."""
    if expr.expr is None:
        return _stream([construct_array(())])
    return _stream([construct_array(evaluate_expr(expr.expr, value))])


def _evaluate_object_construction(expr: ObjectConstruction, value: object) -> Stream:
    """Build objects from the cartesian product of entry streams."""
    entries: list[EntryStreams] = [
        (evaluate_expr(entry.key, value), evaluate_expr(entry.value, value))
        for entry in expr.entries
    ]
    return _stream(construct_objects(entries))


def _evaluate_binary_op(expr: BinaryOp, value: object) -> Stream:
    """Combine every left output with every right output, left varying slower."""
    left_values = evaluate_expr(expr.left, value)
    right_values = evaluate_expr(expr.right, value)
    return _stream(
        [
            apply_operator(expr.operator, left, right)
            for left, right in product(left_values, right_values)
        ]
    )
