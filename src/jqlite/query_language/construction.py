"""Array and object construction over value streams."""

from __future__ import annotations

from typing import TypeAlias

from collections.abc import Sequence
from itertools import product

from jqlite.query_language.errors import QueryObjectKeyError
from jqlite.query_language.values import type_name


EntryStreams: TypeAlias = tuple[Sequence[object], Sequence[object]]


def construct_array(values: Sequence[object]) -> list[object]:
    """Collect a whole stream into one array."""
    return list(values)


def _build_object(pairs: Sequence[tuple[object, object]]) -> dict[str, object]:
    """Build one object from key/value pairs, rejecting non-string keys."""
    built: dict[str, object] = {}
    for key, value in pairs:
        if not isinstance(key, str):
            raise QueryObjectKeyError(type_name(key))
        built[key] = value
    return built


def construct_objects(entries: Sequence[EntryStreams]) -> list[dict[str, object]]:
    """Build one object per combination of entry outputs.

    The first entry varies slowest and the last entry fastest; within an
    entry the key varies slower than the value. A non-string key in any
    combination aborts the whole construction, while an empty key or value
    stream means there are no combinations and no objects.
    """
    entry_pairs = [list(product(keys, values)) for keys, values in entries]
    return [_build_object(combination) for combination in product(*entry_pairs)]
