"""envbind — bind environment variables and defaults onto typed records.

Usage::

    from dataclasses import dataclass
    from typing import Annotated

    import envbind
    from envbind import Env

    @dataclass
    class AppConfig:
        port: Annotated[int, Env("PORT")] = 0

    envbind.set_default("PORT", 8080)
    cfg = AppConfig()
    envbind.parse(cfg)

The module-level functions operate on :data:`default_store`.  Construct a
:class:`ValueStore` and :class:`Binder` directly to avoid shared state.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from envbind.domain.durations import format_duration, parse_duration
from envbind.domain.fields import Env, env_field
from envbind.domain.kinds import (
    Int8,
    Int16,
    Int32,
    Int64,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from envbind.errors import (
    BindError,
    DefaultTypeMismatchError,
    DestinationNotRecordError,
    FieldAssignmentError,
    TargetNotReferenceError,
    UnsupportedFieldTypeError,
    ValueParseError,
)
from envbind.infrastructure.store import ValueStore
from envbind.services.binder import Binder, Resolution, Source

__version__ = "0.1.0"

__all__ = [
    "BindError",
    "Binder",
    "DefaultTypeMismatchError",
    "DestinationNotRecordError",
    "FieldAssignmentError",
    "Env",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Resolution",
    "Source",
    "TargetNotReferenceError",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UnsupportedFieldTypeError",
    "ValueParseError",
    "ValueStore",
    "default_store",
    "env_field",
    "format_duration",
    "get_all_values",
    "get_defaults",
    "get_env_vars",
    "parse",
    "parse_duration",
    "reset",
    "set_default",
    "set_defaults",
]

default_store = ValueStore()


def set_default(key: str, value: Any) -> None:
    """Store a process-wide default for *key*."""
    default_store.set_default(key, value)


def set_defaults(defaults: Mapping[str, Any]) -> None:
    """Store several process-wide defaults."""
    default_store.set_defaults(defaults)


def get_defaults() -> dict[str, Any]:
    """Snapshot of the process-wide defaults."""
    return default_store.get_defaults()


def get_env_vars() -> dict[str, str]:
    """Snapshot of the environment variables referenced by the latest bind."""
    return default_store.get_env_vars()


def get_all_values() -> dict[str, Any]:
    """Defaults merged with the latest environment snapshot."""
    return default_store.get_all_values()


def reset() -> None:
    """Clear the process-wide store (test isolation)."""
    default_store.reset()


def parse(destination: Any) -> list[Resolution]:
    """Bind the live environment and process-wide defaults onto *destination*."""
    return Binder(default_store).parse(destination)
