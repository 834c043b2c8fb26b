"""Log routing for the envbind CLI.

envbind's library modules log through stdlib ``logging`` and pass their
context in ``extra``: the binder emits one ``"field bound"`` record per
field with ``field``, ``key`` and ``source``, never the value.  Here a
structlog :class:`~structlog.stdlib.ProcessorFormatter` lifts those
extras into event keys and renders them to stderr, either as console
lines (``field bound  field=port key=PORT source=env``) or as JSON lines
with ``--log-json``.
"""

from __future__ import annotations

import logging
import sys

import structlog

LOGGER_NAME = "envbind"


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def build_formatter(*, log_json: bool) -> structlog.stdlib.ProcessorFormatter:
    """Formatter rendering envbind records with their structured extras."""
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_pre_chain(),
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route log records to stderr for one CLI invocation.

    Args:
        verbose: Show the binder's per-field DEBUG records.  Otherwise
            only warnings and errors are shown.
        log_json: Render JSON lines instead of console lines.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(build_formatter(log_json=log_json))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)
