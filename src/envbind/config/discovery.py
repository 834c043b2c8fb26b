"""Locating and reading ``envbind.toml``.

The file has two parts: top-level keys override CLI settings, and the
``[defaults]`` table is seeded into the CLI's value store::

    verbose = true

    [defaults]
    PORT = 8080
    ALLOWED_HOSTS = ["localhost", "127.0.0.1"]

``ENVBIND_CONFIG`` names the file explicitly; otherwise the nearest
``envbind.toml`` in the working directory or one of its parents is used.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "envbind.toml"
CONFIG_ENV_VAR = "ENVBIND_CONFIG"
DEFAULTS_TABLE = "defaults"


class ConfigError(ValueError):
    """``envbind.toml`` parsed, but its ``[defaults]`` table is malformed."""


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect, or None.

    An ``ENVBIND_CONFIG`` pointing at a missing file yields None rather
    than falling back to discovery.
    """
    if override := os.environ.get(CONFIG_ENV_VAR):
        path = Path(override)
        return path if path.is_file() else None

    origin = (start or Path.cwd()).resolve()
    candidates = (directory / CONFIG_FILENAME for directory in (origin, *origin.parents))
    return next((candidate for candidate in candidates if candidate.is_file()), None)


def load_config(path: Path) -> dict[str, Any]:
    """Parse *path* and check its ``[defaults]`` table.

    Defaults must be a flat table: every value is a scalar or an array,
    because each one is looked up by a single key.

    Raises:
        tomllib.TOMLDecodeError: If the file is not valid TOML.
        ConfigError: If ``[defaults]`` is not a flat table.
    """
    data = tomllib.loads(path.read_text(encoding="utf-8"))
    defaults = data.get(DEFAULTS_TABLE, {})
    if not isinstance(defaults, dict):
        raise ConfigError(f"{path}: '{DEFAULTS_TABLE}' must be a table")
    nested = sorted(key for key, value in defaults.items() if isinstance(value, dict))
    if nested:
        raise ConfigError(
            f"{path}: [{DEFAULTS_TABLE}] values cannot be tables ({', '.join(nested)})"
        )
    return data
