"""Command: list the bindable fields of a record type."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from envbind.commands._base import EnvbindCommand

if TYPE_CHECKING:
    from envbind.commands._context import AppContext


@click.command(
    cls=EnvbindCommand,
    examples="""\
  envbind describe myapp.config:AppConfig
  envbind -v describe myapp.config:AppConfig
  envbind -q describe myapp.config:AppConfig""",
)
@click.argument("target")
@click.pass_obj
def describe(app: AppContext, target: str) -> None:
    """Show lookup keys and types for TARGET (module:Class).

    Untagged fields are listed only with --verbose.
    """
    app.emit(app.inspector.describe(target))
