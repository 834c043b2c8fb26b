"""Rich Console factory and theme for envbind output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

ENVBIND_THEME = Theme(
    {
        "envbind.ok": "bold green",
        "envbind.error": "bold red",
        "envbind.op": "bold cyan",
        "envbind.key": "dim",
        "envbind.field": "bold",
        "envbind.envkey": "bold blue",
        "envbind.source.env": "green",
        "envbind.source.default": "yellow",
        "envbind.source.zero": "dim",
    }
)

_SOURCE_STYLES: dict[str, str] = {
    "env": "envbind.source.env",
    "default": "envbind.source.default",
    "zero": "envbind.source.zero",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=ENVBIND_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_source(source: str) -> str:
    """Return the Rich style name for a value source."""
    return _SOURCE_STYLES.get(source, "")
