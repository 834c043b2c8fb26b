"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from envbind.output.console import create_console, get_output, style_for_source

if TYPE_CHECKING:
    from rich.console import Console

    from envbind.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Successful ``bind`` prints ``KEY=value`` lines, ``describe`` prints
    the lookup keys, ``defaults`` prints ``KEY=value`` lines.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "bind":
        return "\n".join(f"{f['key']}={_plain(f['value'])}" for f in result.data["fields"])
    if result.op == "describe":
        return "\n".join(f["key"] for f in result.data["fields"] if f["key"])
    if result.op == "defaults":
        return "\n".join(f"{k}={_plain(v)}" for k, v in result.data["defaults"].items())
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _plain(value: Any) -> str:
    """Render a value the way it would be written in the environment."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return ",".join(str(v) for v in value)
    return str(value)


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="envbind.ok")
    op = Text(f"  {result.op}", style="envbind.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="envbind.key")
    console.print(k, Text(str(value)), end="")
    console.print()


def _mapping_table(values: dict[str, Any], *, title: str) -> Table:
    table = Table(title=title, show_header=True, pad_edge=False, expand=False)
    table.add_column("Key", style="envbind.envkey", no_wrap=True)
    table.add_column("Value")
    for key, value in values.items():
        table.add_row(key, _plain(value))
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="envbind.error")
    op = Text(f"  {result.op}", style="envbind.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_bind(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render bound fields with the source of each value."""
    _status_line(console, result)
    _field(console, "target", result.data["target"])

    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Field", style="envbind.field", no_wrap=True)
    table.add_column("Key", style="envbind.envkey", no_wrap=True)
    table.add_column("Source")
    table.add_column("Value")
    for f in result.data["fields"]:
        source = Text(f["source"], style=style_for_source(f["source"]))
        table.add_row(f["field"], f["key"], source, _plain(f["value"]))
    console.print(table)

    if verbose:
        if result.data.get("env_vars"):
            console.print(_mapping_table(result.data["env_vars"], title="Environment"))
        if result.data.get("values"):
            console.print(_mapping_table(result.data["values"], title="All values"))


def _render_describe(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the field layout of a record type."""
    _status_line(console, result)
    _field(console, "target", result.data["target"])

    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Field", style="envbind.field", no_wrap=True)
    table.add_column("Key", style="envbind.envkey", no_wrap=True)
    table.add_column("Type")
    table.add_column("Status")
    for f in result.data["fields"]:
        if f["status"] == "skipped" and not verbose:
            continue
        status_style = "envbind.error" if f["status"] == "unsupported" else ""
        table.add_row(
            f["field"], f["key"] or "-", f["type"], Text(f["status"], style=status_style)
        )
    console.print(table)


def _render_defaults(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the store's defaults."""
    _status_line(console, result)
    _field(console, "count", result.data["count"])
    if result.data["defaults"]:
        console.print(_mapping_table(result.data["defaults"], title="Defaults"))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "bind": _render_bind,
    "describe": _render_describe,
    "defaults": _render_defaults,
}
