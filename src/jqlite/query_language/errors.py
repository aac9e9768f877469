"""Errors for query language parsing and execution."""

from __future__ import annotations


class QueryLanguageError(Exception):
    """Base exception for query language failures."""


class QueryParseError(QueryLanguageError):
    """Raised when query text cannot be parsed."""


class QueryRuntimeError(QueryLanguageError):
    """Raised when query execution fails at runtime."""


class QueryIndexError(QueryRuntimeError):
    """Raised when a value cannot be indexed with the given kind of key."""

    def __init__(self, value_type: str, key_kind: str) -> None:
        super().__init__(f"Cannot index {value_type} with {key_kind}")
        self.value_type = value_type
        self.key_kind = key_kind


class QueryIterateError(QueryRuntimeError):
    """Raised when `.[]` is applied to a scalar."""

    def __init__(self, value_type: str) -> None:
        super().__init__(f"Cannot iterate over {value_type}")
        self.value_type = value_type


class QueryObjectKeyError(QueryRuntimeError):
    """Raised when a non-string value is used as an object key."""

    def __init__(self, key_type: str) -> None:
        super().__init__(f"Cannot use {key_type} as object key")
        self.key_type = key_type


class QueryNumericalError(QueryRuntimeError):
    """Raised when arithmetic cannot produce a representable number."""

    def __init__(self) -> None:
        super().__init__("Numerical operation was not possible")


class QueryOperationError(QueryRuntimeError):
    """Raised when a binary operator is undefined for an operand type pair."""

    def __init__(self, operation: str, left_type: str, right_type: str) -> None:
        super().__init__(f"Cannot {operation} {left_type} and {right_type}")
        self.operation = operation
        self.left_type = left_type
        self.right_type = right_type
