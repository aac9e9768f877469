"""AST nodes for query language."""

from __future__ import annotations

from dataclasses import dataclass

from jqlite.query_language.values import JsonValue


@dataclass(frozen=True, slots=True)
class Expr:
    """Base AST expression type."""


@dataclass(frozen=True, slots=True)
class Identity(Expr):
    """Identity expression returning its input unchanged."""


@dataclass(frozen=True, slots=True)
class RecursiveDescent(Expr):
    """Recursive descent `..` yielding the input and all of its descendants."""


@dataclass(frozen=True, slots=True)
class Field(Expr):
    """Object member access by literal name."""

    name: str


@dataclass(frozen=True, slots=True)
class DynamicIndex(Expr):
    """Index access with a computed key or array position."""

    key: Expr


@dataclass(frozen=True, slots=True)
class Slice(Expr):
    """Range access over arrays and strings, bounds may be open-ended."""

    start: Expr | None
    end: Expr | None


@dataclass(frozen=True, slots=True)
class Iterate(Expr):
    """Collection iteration expression."""


@dataclass(frozen=True, slots=True)
class Optional(Expr):
    """Suppress runtime errors of the wrapped expression."""

    expr: Expr


@dataclass(frozen=True, slots=True)
class Pipe(Expr):
    """Pipe expression sending left output into right input."""

    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class Split(Expr):
    """Concatenate streams of two expressions run over the same input."""

    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class ArrayConstruction(Expr):
    """Collect a subquery stream into one array, `None` for `[]`."""

    expr: Expr | None


@dataclass(frozen=True, slots=True)
class ObjectEntry:
    """One `key: value` entry of an object construction."""

    key: Expr
    value: Expr


@dataclass(frozen=True, slots=True)
class ObjectConstruction(Expr):
    """Object construction expression `{key: value, ...}`."""

    entries: tuple[ObjectEntry, ...]


@dataclass(frozen=True, slots=True)
class Literal(Expr):
    """Constant JSON value."""

    value: JsonValue


@dataclass(frozen=True, slots=True)
class BinaryOp(Expr):
    """Binary operation expression."""

    operator: str
    left: Expr
    right: Expr
