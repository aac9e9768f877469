"""Type-dispatched binary operators."""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import TypeAlias, cast

from jqlite.query_language.errors import (
    QueryNumericalError,
    QueryOperationError,
    QueryRuntimeError,
)
from jqlite.query_language.values import is_number, type_name, values_equal


Number: TypeAlias = int | float
OperatorFunction: TypeAlias = Callable[[object, object], object]


def _checked_number(compute: Callable[[], Number]) -> Number:
    """Run an arithmetic computation, rejecting non-representable results."""
    try:
        result = compute()
    except (OverflowError, ZeroDivisionError) as exc:
        raise QueryNumericalError() from exc
    if isinstance(result, float) and not math.isfinite(result):
        raise QueryNumericalError()
    return result


def _both_numbers(left: object, right: object) -> bool:
    return is_number(left) and is_number(right)


def add(left: object, right: object) -> object:
    """Apply `+`: sum, concatenation, shallow merge, null as identity."""
    if left is None:
        return right
    if right is None:
        return left
    if _both_numbers(left, right):
        return _checked_number(lambda: cast(Number, left) + cast(Number, right))
    if isinstance(left, str) and isinstance(right, str):
        return left + right
    if isinstance(left, list) and isinstance(right, list):
        return [*left, *right]
    if isinstance(left, dict) and isinstance(right, dict):
        return {**left, **right}
    raise QueryOperationError("add", type_name(left), type_name(right))


def subtract(left: object, right: object) -> object:
    """Apply `-`: difference, or array element removal."""
    if _both_numbers(left, right):
        return _checked_number(lambda: cast(Number, left) - cast(Number, right))
    if isinstance(left, list) and isinstance(right, list):
        return [
            item for item in left if not any(values_equal(item, removed) for removed in right)
        ]
    raise QueryOperationError("subtract", type_name(left), type_name(right))


def deep_merge(left: dict[str, object], right: dict[str, object]) -> dict[str, object]:
    """Merge objects recursively, right-hand values winning on conflicts."""
    merged = dict(left)
    for key, value in right.items():
        existing = merged.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            merged[key] = deep_merge(existing, value)
        else:
            merged[key] = value
    return merged


def multiply(left: object, right: object) -> object:
    """Apply `*`: product, or deep object merge."""
    if _both_numbers(left, right):
        return _checked_number(lambda: cast(Number, left) * cast(Number, right))
    if isinstance(left, dict) and isinstance(right, dict):
        return deep_merge(left, right)
    raise QueryOperationError("multiply", type_name(left), type_name(right))


def _divide_numbers(left: Number, right: Number) -> Number:
    """Divide, keeping exact integer quotients as integers."""
    if right == 0:
        raise QueryNumericalError()
    if isinstance(left, int) and isinstance(right, int) and left % right == 0:
        return left // right
    return _checked_number(lambda: left / right)


def divide(left: object, right: object) -> object:
    """Apply `/`: quotient, or string split by separator."""
    if _both_numbers(left, right):
        return _divide_numbers(cast(Number, left), cast(Number, right))
    if isinstance(left, str) and isinstance(right, str):
        if right == "":
            raise QueryOperationError("divide", "string", "string")
        if left == "":
            return []
        return left.split(right)
    raise QueryOperationError("divide", type_name(left), type_name(right))


OPERATORS: dict[str, OperatorFunction] = {
    "+": add,
    "-": subtract,
    "*": multiply,
    "/": divide,
}


def apply_operator(operator: str, left: object, right: object) -> object:
    """Apply one binary operator to two values."""
    function = OPERATORS.get(operator)
    if function is None:
        raise QueryRuntimeError(f"Unsupported operator: {operator}")
    return function(left, right)
