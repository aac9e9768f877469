"""Index, slice and iteration semantics for JSON values."""

from __future__ import annotations

import math
from collections.abc import Iterator
from typing import cast

from jqlite.query_language.errors import (
    QueryIndexError,
    QueryIterateError,
    QueryObjectKeyError,
)
from jqlite.query_language.values import is_number, type_name


def index_field(value: object, name: str) -> object:
    """Resolve `.name` with null fallback for missing keys and null input."""
    if value is None:
        return None
    if isinstance(value, dict):
        return value.get(name)
    raise QueryIndexError(type_name(value), "string")


def index_position(value: object, position: int | float) -> object:
    """Resolve `.[n]`, counting negative positions from the end."""
    if value is None:
        return None
    if not isinstance(value, list):
        raise QueryIndexError(type_name(value), "number")
    if not math.isfinite(position):
        return None
    index = math.floor(position)
    if index < 0:
        index += len(value)
    if 0 <= index < len(value):
        return value[index]
    return None


def index_value(value: object, key: object) -> object:
    """Resolve `.[key]` for a computed key."""
    if isinstance(key, str):
        return index_field(value, key)
    if is_number(key):
        if isinstance(value, dict):
            raise QueryObjectKeyError(type_name(key))
        return index_position(value, cast(int | float, key))
    if isinstance(value, dict):
        raise QueryObjectKeyError(type_name(key))
    raise QueryIndexError(type_name(value), type_name(key))


def _resolve_bound(bound: int | float, length: int, *, upper: bool) -> int:
    """Resolve one slice bound to a position clamped into `[0, length]`."""
    if math.isnan(bound):
        return 0
    if math.isinf(bound):
        return length if bound > 0 else 0
    position = math.ceil(bound) if upper else math.floor(bound)
    if position < 0:
        position += length
    return min(max(position, 0), length)


def slice_value(value: object, start: object, end: object) -> object:
    """Resolve `.[start:end]` over arrays and strings."""
    if not isinstance(value, list | str):
        raise QueryIndexError(type_name(value), "range")
    for bound in (start, end):
        if bound is not None and not is_number(bound):
            raise QueryIndexError(type_name(value), type_name(bound))

    length = len(value)
    first = 0 if start is None else _resolve_bound(cast(int | float, start), length, upper=False)
    last = length if end is None else _resolve_bound(cast(int | float, end), length, upper=True)
    if first >= last:
        return value[:0]
    return value[first:last]


def iterate_value(value: object) -> list[object]:
    """Explode arrays into elements and objects into values."""
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return list(value.values())
    raise QueryIterateError(type_name(value))


def recursive_descent(value: object) -> Iterator[object]:
    """Yield value and all of its descendants in depth-first pre-order."""
    pending: list[object] = [value]
    while pending:
        current = pending.pop()
        yield current
        if isinstance(current, list):
            pending.extend(reversed(current))
        elif isinstance(current, dict):
            pending.extend(reversed(current.values()))
