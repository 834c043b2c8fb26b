"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Owns the CLI's value store (seeded from the
``[defaults]`` table of ``envbind.toml``) and centralizes result
emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click

from envbind.infrastructure.store import ValueStore
from envbind.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from envbind.config.settings import EnvbindSettings
    from envbind.services.inspect import InspectService
    from envbind.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: EnvbindSettings) -> None:
        self.settings = settings

        from envbind.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        self.store = ValueStore()
        self.store.set_defaults(settings.defaults)
        if settings.config_path:
            logger.debug(
                "defaults loaded",
                extra={"config": str(settings.config_path), "count": len(settings.defaults)},
            )

    @property
    def inspector(self) -> InspectService:
        """An InspectService over the CLI store and the live environment."""
        from envbind.services.inspect import InspectService

        return InspectService(self.store, search_path=Path.cwd())

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
