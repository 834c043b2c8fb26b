"""Command: show the defaults loaded from envbind.toml."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from envbind.commands._base import EnvbindCommand

if TYPE_CHECKING:
    from envbind.commands._context import AppContext


@click.command(
    cls=EnvbindCommand,
    examples="""\
  envbind defaults
  envbind -c staging.toml defaults
  envbind --json defaults""",
)
@click.pass_obj
def defaults(app: AppContext) -> None:
    """Show the defaults from the [defaults] table of envbind.toml."""
    app.emit(app.inspector.defaults())
