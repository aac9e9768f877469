"""JSON rendering of query results."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from rich.console import Console
from rich.syntax import Syntax


logger = logging.getLogger("jqlite")

DEFAULT_OUTPUT_THEME = "github-dark"
DEFAULT_INDENT = 2


class OutputFormatError(Exception):
    """Raised when a value cannot be rendered as JSON."""


@dataclass(frozen=True)
class JsonFormatOptions:
    """Options controlling JSON text rendering."""

    indent: int = DEFAULT_INDENT
    compact: bool = False
    raw_output: bool = False
    sort_keys: bool = False


@dataclass(frozen=True)
class OutputOperation:
    """One prepared output operation."""

    kind: str
    text: str | None = None
    renderable: object | None = None


@dataclass(frozen=True)
class PreparedOutput:
    """Prepared output operations ready for console rendering."""

    operations: tuple[OutputOperation, ...]


def format_json_value(value: object, options: JsonFormatOptions) -> str:
    """Render one value as JSON text."""
    if options.raw_output and isinstance(value, str):
        return value
    try:
        if options.compact:
            return json.dumps(
                value,
                ensure_ascii=False,
                allow_nan=False,
                separators=(",", ":"),
                sort_keys=options.sort_keys,
            )
        return json.dumps(
            value,
            ensure_ascii=False,
            allow_nan=False,
            indent=options.indent,
            sort_keys=options.sort_keys,
        )
    except (TypeError, ValueError, RecursionError) as exc:
        raise OutputFormatError(f"Cannot render value as JSON: {exc}") from exc


def load_json_values(text: str) -> list[object]:
    """Decode a sequence of whitespace-separated JSON documents."""
    decoder = json.JSONDecoder()
    values: list[object] = []
    position = 0
    length = len(text)
    while True:
        while position < length and text[position].isspace():
            position += 1
        if position >= length:
            return values
        value, position = decoder.raw_decode(text, position)
        values.append(value)


def _normalize_syntax_theme(out_theme: str) -> str:
    """Return a valid theme name for syntax rendering."""
    normalized_theme = out_theme.strip()
    if normalized_theme:
        return normalized_theme
    return DEFAULT_OUTPUT_THEME


def prepare_output(
    values: list[object],
    options: JsonFormatOptions,
    color_enabled: bool,
    out_theme: str,
) -> PreparedOutput:
    """Prepare query results, one rendered document per value."""
    operations: list[OutputOperation] = []
    for value in values:
        text = format_json_value(value, options)
        if color_enabled and not (options.raw_output and isinstance(value, str)):
            operations.append(
                OutputOperation(
                    kind="console_print",
                    renderable=Syntax(
                        text,
                        "json",
                        theme=_normalize_syntax_theme(out_theme),
                        line_numbers=False,
                        word_wrap=True,
                    ),
                )
            )
            continue
        operations.append(OutputOperation(kind="plain_write", text=text))
    logger.info("Prepared %d result value(s)", len(operations))
    return PreparedOutput(operations=tuple(operations))


def _write_plain_output(console: Console, text: str) -> None:
    """Write plain output directly to console stream."""
    console.file.write(f"{text}\n")
    console.file.flush()


def print_prepared_output(console: Console, prepared_output: PreparedOutput) -> None:
    """Print already prepared output operations."""
    for operation in prepared_output.operations:
        if operation.kind == "plain_write":
            if operation.text is not None:
                _write_plain_output(console, operation.text)
            continue
        if operation.renderable is not None:
            console.print(operation.renderable)
            continue
        console.print(operation.text if operation.text is not None else "", markup=False)


def build_console(color_enabled: bool) -> Console:
    """Build the console used for result output."""
    return Console(
        force_terminal=color_enabled,
        no_color=not color_enabled,
        highlight=False,
        soft_wrap=True,
    )
