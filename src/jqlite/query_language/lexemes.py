"""Token-level parsers shared by the query grammar."""

from __future__ import annotations

import math

from parsy import Parser, fail, regex, string, success


IDENTIFIER_PATTERN = r"[A-Za-z_][A-Za-z0-9_]*"
NUMBER_PATTERN = r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?"

_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

whitespace = regex(r"\s*")


def lexeme(parser: Parser) -> Parser:
    """Consume optional whitespace after parser."""
    return parser << whitespace


def symbol(value: str) -> Parser:
    """Build a punctuation token parser."""
    return lexeme(string(value))


def keyword(name: str) -> Parser:
    """Build a keyword parser with identifier boundary."""
    return lexeme(regex(rf"{name}(?![A-Za-z0-9_])").desc(name))


def _to_number(token: str) -> int | float:
    """Convert a numeric token, keeping integers exact."""
    if any(marker in token for marker in ".eE"):
        return float(token)
    try:
        return int(token)
    except ValueError:
        # Past the interpreter's int digit limit.
        return float(token)


def _number_literal(token: str) -> Parser:
    """Accept a numeric token only when it is a finite number."""
    value = _to_number(token)
    if isinstance(value, float) and not math.isfinite(value):
        return fail("finite number")
    return success(value)


def _join_string_parts(parts: list[str]) -> str:
    """Join decoded string fragments, merging UTF-16 surrogate pairs."""
    text = "".join(parts)
    return text.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


def _build_string_body() -> Parser:
    """Build parser for the contents of a double-quoted string."""
    plain = regex(r'[^"\\]+')
    simple_escape = regex(r'["\\/bfnrt]').map(_SIMPLE_ESCAPES.__getitem__)
    unicode_escape = regex(r"u[0-9a-fA-F]{4}").map(lambda token: chr(int(token[1:], 16)))
    escape = string("\\") >> (simple_escape | unicode_escape).desc("escape sequence")
    return (plain | escape).many().map(_join_string_parts)


identifier = lexeme(regex(IDENTIFIER_PATTERN).desc("identifier"))
number = lexeme(regex(NUMBER_PATTERN).desc("number").bind(_number_literal))
quoted_string = lexeme(
    string('"') >> _build_string_body() << string('"').desc("closing quote")
)
