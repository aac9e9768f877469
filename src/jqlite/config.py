"""Configuration file support for the jqlite CLI.

The config file is a JSON object with one ``defaults`` section keyed by long
option names of the ``query`` command::

    {"defaults": {"--indent": 4, "--sort-keys": true, "--no-color": true}}
"""

from __future__ import annotations

from typing import TypeAlias

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import typer


DEFAULT_CONFIG_NAME = ".jqlite.json"
COLOR_OPTIONS = ("--color", "--no-color")

CONFIG_DEFAULTS: dict[str, object] = {}

logger = logging.getLogger("jqlite")

OptionValidator: TypeAlias = Callable[[object], object | None]


@dataclass
class LoadedCliConfig:
    """Defaults loaded from the config file, keyed by parameter name."""

    defaults: dict[str, object]


def validate_int_option(value: object, min_value: int | None) -> int | None:
    """Return value when it is an integer no lower than min_value."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if min_value is not None and value < min_value:
        return None
    return value


def validate_bool_option(value: object) -> bool | None:
    return value if isinstance(value, bool) else None


def validate_str_option(value: object) -> str | None:
    """Return value when it is a non-blank string."""
    if isinstance(value, str) and value.strip():
        return value
    return None


OPTION_VALIDATORS: dict[str, tuple[str, OptionValidator]] = {
    "--indent": ("indent", lambda value: validate_int_option(value, 0)),
    "--compact": ("compact", validate_bool_option),
    "--raw-output": ("raw_output", validate_bool_option),
    "--sort-keys": ("sort_keys", validate_bool_option),
    "--out-theme": ("out_theme", validate_str_option),
    "--verbose": ("verbose", validate_bool_option),
}

OPTION_NAMES: dict[str, str] = {
    "color_flag": "--color/--no-color",
    **{dest: option for option, (dest, _validate) in OPTION_VALIDATORS.items()},
}


def load_config(filepath: str) -> tuple[dict[str, object], bool]:
    """Load config from a JSON file.

    Returns:
        Tuple of (config dict, malformed flag). A missing file is not malformed.
    """
    path = Path(filepath)
    if not path.exists():
        return ({}, False)
    try:
        config = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return ({}, True)
    if not isinstance(config, dict):
        return ({}, True)
    return (config, False)


def parse_color_defaults(config: dict[str, object]) -> tuple[dict[str, object], bool]:
    """Fold `--color` and `--no-color` entries into one `color_flag` default."""
    flags = {key: config[key] for key in COLOR_OPTIONS if key in config}
    if any(not isinstance(flag, bool) for flag in flags.values()):
        return ({}, False)
    if flags.get("--color") and flags.get("--no-color"):
        return ({}, False)
    if flags.get("--color"):
        return ({"color_flag": True}, True)
    if flags.get("--no-color"):
        return ({"color_flag": False}, True)
    return ({}, True)


def parse_config_sections(raw_config: dict[str, object]) -> dict[str, object] | None:
    """Return the `defaults` section, or None when the layout is invalid."""
    if set(raw_config) - {"defaults"}:
        return None
    section = raw_config.get("defaults", {})
    if not isinstance(section, dict):
        return None
    return section


def build_config_defaults(config: dict[str, object]) -> dict[str, object] | None:
    """Validate a `defaults` section.

    Returns:
        Defaults keyed by command parameter name, or None if any entry is invalid
    """
    defaults, valid = parse_color_defaults(config)
    if not valid:
        return None

    for key, value in config.items():
        if key in COLOR_OPTIONS:
            continue
        option = OPTION_VALIDATORS.get(key)
        if option is None:
            return None
        dest, validate = option
        checked = validate(value)
        if checked is None:
            return None
        defaults[dest] = checked
    return defaults


def parse_config_argument(argv: list[str]) -> str:
    """Find the --config value in argv before Click parses it."""
    args = argv[1:]
    for idx, arg in enumerate(args):
        if arg.startswith("--config="):
            return arg.partition("=")[2]
        if arg == "--config" and idx + 1 < len(args):
            return args[idx + 1]
    return DEFAULT_CONFIG_NAME


def load_cli_config(argv: list[str]) -> LoadedCliConfig:
    """Load config defaults from the configured file path."""
    config_path = Path(parse_config_argument(argv))
    if not config_path.is_absolute():
        config_path = Path.cwd() / config_path

    raw_config, malformed = load_config(str(config_path))
    section = None if malformed else parse_config_sections(raw_config)
    defaults = None if section is None else build_config_defaults(section)
    if defaults is None:
        raise typer.BadParameter("Malformed config")
    return LoadedCliConfig(defaults=defaults)


def build_default_map(defaults: dict[str, object]) -> dict[str, dict[str, object]]:
    """Build Click default_map for the query command."""
    return {"query": {key: value for key, value in defaults.items() if key != "verbose"}}


def log_applied_config_defaults(command_name: str) -> None:
    """Log config defaults loaded from config file."""
    if not CONFIG_DEFAULTS or not logger.isEnabledFor(logging.INFO):
        return
    entries = ", ".join(
        f"{OPTION_NAMES.get(dest, dest)}={value!r}"
        for dest, value in sorted(CONFIG_DEFAULTS.items())
    )
    logger.info("Config defaults applied (%s): %s", command_name, entries)


def log_command_arguments(args: object, command_name: str) -> None:
    """Log all final argument values used to run a command."""
    if not logger.isEnabledFor(logging.INFO):
        return
    entries = ", ".join(f"{name}={value!r}" for name, value in sorted(vars(args).items()))
    logger.info("Command arguments (%s): %s", command_name, entries)
