"""CLI settings: flags, ``ENVBIND_*`` variables and ``envbind.toml``.

Precedence, highest first: flags given on the command line, environment
variables, top-level keys of ``envbind.toml``, field defaults.  The
``[defaults]`` table rides along as the ``defaults`` setting and is
seeded into the CLI's :class:`~envbind.infrastructure.store.ValueStore`.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from envbind.config.discovery import ConfigError, find_config, load_config

# Parsed envbind.toml for the settings object under construction.
_toml_data: ContextVar[dict[str, Any] | None] = ContextVar("envbind_toml_data", default=None)


class TomlTableSource(PydanticBaseSettingsSource):
    """Settings source over the already-parsed ``envbind.toml``."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        data = _toml_data.get() or {}
        return data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(_toml_data.get() or {})


def read_config(path: Path) -> dict[str, Any]:
    """Load *path*, turning parse and shape errors into CLI errors."""
    try:
        return load_config(path)
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc
    except ConfigError as exc:
        raise click.ClickException(f"Invalid config: {exc}") from exc


class EnvbindSettings(BaseSettings):
    """Settings for one envbind CLI invocation.

    Attributes:
        config_path: The ``envbind.toml`` in effect, or None.
        defaults: The ``[defaults]`` table, key to TOML value.
    """

    model_config = SettingsConfigDict(frozen=True, env_prefix="ENVBIND_", extra="ignore")

    config_path: Path | None = None
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    defaults: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, TomlTableSource(settings_cls)

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> EnvbindSettings:
        """Build settings for a CLI invocation.

        *config_path* (``-c``) must name an existing file; without it the
        file is discovered from *start* (default: cwd).
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                raise click.ClickException(f"Config file not found: {config_path}")
        else:
            toml_path = find_config(start)

        token = _toml_data.set(read_config(toml_path) if toml_path else {})
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _toml_data.reset(token)
