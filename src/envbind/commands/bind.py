"""Command: bind the environment and defaults onto a record type."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from envbind.commands._base import EnvbindCommand

if TYPE_CHECKING:
    from envbind.commands._context import AppContext


@click.command(
    cls=EnvbindCommand,
    examples="""\
  envbind bind myapp.config:AppConfig
  PORT=9000 envbind bind myapp.config:AppConfig
  envbind --json bind myapp.config:AppConfig
  envbind -q bind myapp.config:AppConfig > resolved.env
  envbind -c staging.toml bind myapp.config:AppConfig""",
)
@click.argument("target")
@click.pass_obj
def bind(app: AppContext, target: str) -> None:
    """Bind TARGET (module:Class) and show where each value came from.

    TARGET must be constructible without arguments.  With --verbose the
    referenced environment and the merged value table are shown too.
    """
    app.emit(app.inspector.bind(target))
