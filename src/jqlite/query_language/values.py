"""JSON value helpers shared by the query runtime."""

from __future__ import annotations

from typing import TypeAlias


JsonValue: TypeAlias = "None | bool | int | float | str | list[JsonValue] | dict[str, JsonValue]"


def type_name(value: object) -> str:
    """Return the JSON type name of a value as used in error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list | tuple):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def is_number(value: object) -> bool:
    """Return whether value is a JSON number (booleans excluded)."""
    return isinstance(value, int | float) and not isinstance(value, bool)


def values_equal(left: object, right: object) -> bool:
    """Compare two values with JSON semantics.

    Unlike Python equality, booleans never equal numbers, so `true` and `1`
    are distinct values. Containers are compared element-wise.
    """
    left_type = type_name(left)
    if left_type != type_name(right):
        return False
    if isinstance(left, list | tuple) and isinstance(right, list | tuple):
        if len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right, strict=True))
    if isinstance(left, dict) and isinstance(right, dict):
        if left.keys() != right.keys():
            return False
        return all(values_equal(item, right[key]) for key, item in left.items())
    return left == right
