"""Parser for query language expressions."""

from __future__ import annotations

import sys
from collections.abc import Callable, Generator
from typing import cast

from parsy import ParseError, Parser, eof, forward_declaration, generate, seq, string

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
from jqlite.query_language.errors import QueryParseError
from jqlite.query_language.lexemes import (
    identifier,
    keyword,
    lexeme,
    number,
    quoted_string,
    symbol,
    whitespace,
)


def _parse_line_and_column(line_info: str) -> tuple[int, int]:
    """Parse line and column from parsy line info string."""
    line_text, sep, column_text = line_info.partition(":")
    if sep == "":
        return (0, 0)
    if not line_text.isdigit() or not column_text.isdigit():
        return (0, 0)
    return (int(line_text), int(column_text))


def _format_parse_error(query: str, exc: ParseError) -> str:
    """Build rich parse error message with query pointer."""
    line_number, column_number = _parse_line_and_column(exc.line_info())
    query_lines = query.splitlines()
    if not query_lines:
        query_lines = [query]

    error_line = query_lines[line_number] if 0 <= line_number < len(query_lines) else query
    pointer = " " * max(column_number, 0) + "^"
    return f"Invalid query syntax: {exc}\n\n{error_line}\n{pointer}"


def _build_literal_parser() -> Parser:
    """Build parser for constant values."""
    null_literal = keyword("null").result(Literal(None))
    true_literal = keyword("true").result(Literal(True))
    false_literal = keyword("false").result(Literal(False))
    number_literal = number.map(Literal)
    string_literal = quoted_string.map(Literal)
    return null_literal | true_literal | false_literal | number_literal | string_literal


def _build_bracket_parser(query: Parser) -> Parser:
    """Build parser for `[...]` index, slice and iteration suffixes."""

    @generate
    def bracket() -> Generator[Parser, object, Expr]:
        yield symbol("[")
        empty = yield symbol("]").optional()
        if empty is not None:
            return Iterate()

        start = cast(Expr | None, (yield query.optional()))
        colon = yield symbol(":").optional()
        if colon is not None:
            end = cast(Expr | None, (yield query.optional()))
            yield symbol("]")
            return Slice(start, end)

        yield symbol("]")
        return DynamicIndex(cast(Expr, start))

    return bracket


def _build_suffix_parser(bracket: Parser) -> Parser:
    """Build parser for one suffix with its optional `?` marker."""
    field_name = identifier | quoted_string
    dot_suffix = string(".") >> (field_name.map(Field) | bracket)
    return seq(dot_suffix | bracket, symbol("?").many()).combine(_apply_optional_markers)


def _apply_optional_markers(expr: Expr, markers: list[str]) -> Expr:
    """Wrap an expression in `Optional` when followed by `?`."""
    if markers:
        return Optional(expr)
    return expr


def _build_dot_term_parser(bracket: Parser) -> Parser:
    """Build parser for dot-rooted terms: `..`, `.`, `.name`, `."name"`, `.[...]`."""
    field_name = identifier | quoted_string
    recursive = lexeme(string("..")).result(RecursiveDescent())

    @generate
    def dot_term() -> Generator[Parser, object, Expr]:
        yield string(".")
        target = yield (field_name.map(Field) | bracket).optional()
        if target is None:
            yield whitespace
            return Identity()
        return cast(Expr, target)

    return recursive | dot_term


def _build_array_parser(query: Parser) -> Parser:
    """Build parser for array construction `[subquery]`."""

    @generate
    def array() -> Generator[Parser, object, ArrayConstruction]:
        yield symbol("[")
        close = yield symbol("]").optional()
        if close is not None:
            return ArrayConstruction(None)
        inner = yield query
        yield symbol("]")
        return ArrayConstruction(cast(Expr, inner))

    return array


def _build_object_parser(query: Parser, value: Parser) -> Parser:
    """Build parser for object construction `{key: value, ...}`."""
    dynamic_entry = seq(
        symbol("(") >> query << symbol(")"),
        symbol(":") >> value,
    ).combine(ObjectEntry)

    @generate
    def named_entry() -> Generator[Parser, object, ObjectEntry]:
        name = cast(str, (yield identifier | quoted_string))
        entry_value = yield (symbol(":") >> value).optional()
        if entry_value is None:
            return ObjectEntry(Literal(name), Field(name))
        return ObjectEntry(Literal(name), cast(Expr, entry_value))

    entries = (dynamic_entry | named_entry).sep_by(symbol(","))
    return (symbol("{") >> entries << symbol("}")).map(
        lambda items: ObjectConstruction(tuple(items))
    )


def _build_postfix_chain_parser(primary: Parser, suffix: Parser) -> Parser:
    """Build parser applying suffixes to any primary term."""

    @generate
    def with_suffixes() -> Generator[Parser, object, Expr]:
        current = cast(Expr, (yield primary))
        markers = yield symbol("?").many()
        current = _apply_optional_markers(current, cast(list[str], markers))

        rest = yield suffix.many()
        for node in cast(list[Expr], rest):
            current = Pipe(current, node)
        return current

    return with_suffixes


def _binary_builder(operator: str, left: Expr, right: Expr) -> Expr:
    """Construct binary operation expression."""
    return BinaryOp(operator, left, right)


def _pipe_builder(_operator: str, left: Expr, right: Expr) -> Expr:
    """Construct pipe expression."""
    return Pipe(left, right)


def _split_builder(_operator: str, left: Expr, right: Expr) -> Expr:
    """Construct split expression."""
    return Split(left, right)


def _chain_left(
    term: Parser,
    op: Parser,
    builder: Callable[[str, Expr, Expr], Expr],
) -> Parser:
    """Build a left-associative parser from term and operator parsers."""

    @generate
    def parser() -> Generator[Parser, object, Expr]:
        current = cast(Expr, (yield term))
        rest_result = yield seq(op, term).many()
        for operator, right in cast(list[tuple[str, Expr]], rest_result):
            current = builder(operator, current, right)
        return current

    return parser


def _make_parser() -> Parser:
    """Create the full query parser."""
    query = forward_declaration()
    pipe_level = forward_declaration()

    bracket = _build_bracket_parser(query)
    suffix = _build_suffix_parser(bracket)
    grouped = symbol("(") >> query << symbol(")")

    primary = (
        _build_dot_term_parser(bracket)
        | _build_array_parser(query)
        | _build_object_parser(query, pipe_level)
        | grouped
        | _build_literal_parser()
    )
    term = _build_postfix_chain_parser(primary, suffix)

    multiplicative = _chain_left(term, symbol("*") | symbol("/"), _binary_builder)
    additive = _chain_left(multiplicative, symbol("+") | symbol("-"), _binary_builder)
    pipe = _chain_left(additive, symbol("|"), _pipe_builder)
    pipe_level.become(pipe)
    split = _chain_left(pipe, symbol(","), _split_builder)

    query.become(split)
    return whitespace >> query << eof


QUERY_PARSER = _make_parser()

# Each nesting level of the grammar costs dozens of interpreter frames.
PARSE_RECURSION_LIMIT = 20_000


def parse_query(query: str) -> Expr:
    """Parse query text into an AST expression."""
    recursion_limit = sys.getrecursionlimit()
    sys.setrecursionlimit(max(recursion_limit, PARSE_RECURSION_LIMIT))
    try:
        result = QUERY_PARSER.parse(query)
    except ParseError as exc:
        raise QueryParseError(_format_parse_error(query, exc)) from exc
    except RecursionError as exc:
        raise QueryParseError("Invalid query syntax: expression is nested too deeply") from exc
    except ValueError as exc:
        raise QueryParseError(f"Invalid query syntax: {exc}") from exc
    finally:
        sys.setrecursionlimit(recursion_limit)
    if isinstance(result, Expr):
        return result
    raise QueryParseError("Parser did not produce an expression")
