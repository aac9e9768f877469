"""Color support for CLI output using Rich markup."""

import sys

from rich.markup import escape


def should_use_color(color_flag: bool | None) -> bool:
    """Determine if color should be used based on flag and TTY detection.

    Args:
        color_flag: Explicit color preference (True/False) or None for auto-detect

    Returns:
        True if colors should be used, False otherwise
    """
    if color_flag is None:
        return sys.stdout.isatty()
    return color_flag


def colorize(text: str, style: str, enabled: bool) -> str:
    """Apply Rich markup style to text if enabled."""
    if not enabled:
        return text
    return f"[{style}]{escape(text)}[/]"
