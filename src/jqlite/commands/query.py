"""Query command running jq-style filters over JSON input."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass

import click
import typer

from jqlite import config as config_module
from jqlite.color import colorize, should_use_color
from jqlite.output_format import (
    DEFAULT_INDENT,
    DEFAULT_OUTPUT_THEME,
    JsonFormatOptions,
    OutputFormatError,
    build_console,
    load_json_values,
    prepare_output,
    print_prepared_output,
)
from jqlite.query_language import (
    QueryParseError,
    QueryRuntimeError,
    compile_query_text,
    format_query,
    parse_query,
)


@dataclass
class QueryArgs:
    """Arguments for the query command."""

    query: str
    file: str | None
    indent: int
    compact: bool
    raw_output: bool
    sort_keys: bool
    color_flag: bool | None
    out_theme: str


def read_input_text(file: str | None) -> str:
    """Read JSON input text from a file or stdin (`-` or no file)."""
    if file is None or file == "-":
        return sys.stdin.read()
    try:
        with open(file, encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError as err:
        raise typer.BadParameter(f"Input file '{file}' not found") from err
    except PermissionError as err:
        raise typer.BadParameter(f"Permission denied for '{file}'") from err
    except IsADirectoryError as err:
        raise typer.BadParameter(f"Input path '{file}' is a directory") from err


def _describe_source(file: str | None) -> str:
    return "stdin" if file is None or file == "-" else f"'{file}'"


def load_input_values(file: str | None) -> list[object]:
    """Load every JSON document from the input source."""
    text = read_input_text(file)
    try:
        return load_json_values(text)
    except json.JSONDecodeError as err:
        raise typer.BadParameter(f"Invalid JSON in {_describe_source(file)}: {err}") from err
    except RecursionError as err:
        raise typer.BadParameter(
            f"JSON in {_describe_source(file)} is nested too deeply"
        ) from err


def run_query(args: QueryArgs) -> None:
    """Run the query command."""
    color_enabled = should_use_color(args.color_flag)
    console = build_console(color_enabled)
    if args.indent < 0:
        raise typer.BadParameter("--indent must be non-negative")

    try:
        compiled_query = compile_query_text(args.query)
    except QueryParseError as exc:
        raise click.UsageError(str(exc)) from exc

    results: list[object] = []
    for value in load_input_values(args.file):
        try:
            results.extend(compiled_query(value))
        except QueryRuntimeError as exc:
            raise click.UsageError(str(exc)) from exc
        except RecursionError as exc:
            raise click.UsageError("Value is nested too deeply to evaluate") from exc

    options = JsonFormatOptions(
        indent=args.indent,
        compact=args.compact,
        raw_output=args.raw_output,
        sort_keys=args.sort_keys,
    )
    try:
        prepared_output = prepare_output(results, options, color_enabled, args.out_theme)
    except OutputFormatError as exc:
        raise click.UsageError(str(exc)) from exc

    print_prepared_output(console, prepared_output)


def run_parse(query: str, color_flag: bool | None) -> None:
    """Print the canonical form of a query."""
    color_enabled = should_use_color(color_flag)
    try:
        expr = parse_query(query)
    except QueryParseError as exc:
        raise click.UsageError(str(exc)) from exc
    console = build_console(color_enabled)
    console.print(
        colorize(format_query(expr), "bold cyan", color_enabled),
        markup=color_enabled,
        highlight=False,
    )


def register(app: typer.Typer) -> None:
    """Register the query and parse commands."""

    @app.command("query")
    def query_command(  # noqa: PLR0913
        query: str = typer.Argument(..., metavar="QUERY", help="jq-style query expression"),
        file: str | None = typer.Argument(
            None, metavar="FILE", help="JSON input file, stdin when omitted or '-'"
        ),
        config: str = typer.Option(
            config_module.DEFAULT_CONFIG_NAME,
            "--config",
            metavar="FILE",
            help="Config file name to load from current directory",
        ),
        indent: int = typer.Option(
            DEFAULT_INDENT,
            "--indent",
            metavar="N",
            help="Number of spaces used to indent output",
        ),
        compact: bool = typer.Option(
            False,
            "--compact",
            "-c",
            help="Print each result on a single line",
        ),
        raw_output: bool = typer.Option(
            False,
            "--raw-output",
            "-r",
            help="Print string results without JSON quoting",
        ),
        sort_keys: bool = typer.Option(
            False,
            "--sort-keys",
            "-S",
            help="Sort object keys in output",
        ),
        color_flag: bool | None = typer.Option(
            None,
            "--color/--no-color",
            help="Force colored output",
        ),
        out_theme: str = typer.Option(
            DEFAULT_OUTPUT_THEME,
            "--out-theme",
            help="Syntax theme for highlighted output",
        ),
    ) -> None:
        """Run a jq-style query against JSON input."""
        del config
        args = QueryArgs(
            query=query,
            file=file,
            indent=indent,
            compact=compact,
            raw_output=raw_output,
            sort_keys=sort_keys,
            color_flag=color_flag,
            out_theme=out_theme,
        )
        config_module.log_applied_config_defaults("query")
        config_module.log_command_arguments(args, "query")
        run_query(args)

    @app.command("parse")
    def parse_command(
        query: str = typer.Argument(..., metavar="QUERY", help="jq-style query expression"),
        color_flag: bool | None = typer.Option(
            None,
            "--color/--no-color",
            help="Force colored output",
        ),
    ) -> None:
        """Print the canonical form of a parsed query."""
        run_parse(query, color_flag)
