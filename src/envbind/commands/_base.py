"""Click command class for envbind subcommands.

Each subcommand carries a few ready-to-paste invocations.  ``--examples``
prints them and exits before TARGET is required, keeping ``--help`` short.
"""

from __future__ import annotations

from typing import Any

import click


class EnvbindCommand(click.Command):
    """Command with an eager ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str = "", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    is_eager=True,
                    expose_value=False,
                    callback=self._print_examples,
                    help="Print example invocations and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
            ctx.exit(0)
