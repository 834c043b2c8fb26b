"""ValueStore — thread-safe table of default values.

Lifecycle: create one at process start, hand it to every
:class:`~envbind.services.binder.Binder`, and call :meth:`ValueStore.reset`
only from test harnesses.  The module-level functions in :mod:`envbind`
share a process-wide instance.

INVARIANT: every public method is one critical section under the same
lock, so readers see either the old or the new value of an entry.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from typing import Any


def _detach(value: Any) -> Any:
    """Copy list values so callers never share the store's lists."""
    if isinstance(value, list):
        return list(value)
    return value


class ValueStore:
    """Named default values plus the environment seen by the latest bind."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._defaults: dict[str, Any] = {}
        self._env_vars: dict[str, str] = {}

    def set_default(self, key: str, value: Any) -> None:
        """Store or overwrite the default for *key*.

        The value's type is not checked here; the binder checks it
        against whichever field claims *key*.
        """
        with self._lock:
            self._defaults[key] = _detach(value)

    def set_defaults(self, defaults: Mapping[str, Any]) -> None:
        """Apply :meth:`set_default` for every entry."""
        with self._lock:
            for key, value in defaults.items():
                self._defaults[key] = _detach(value)

    def get_defaults(self) -> dict[str, Any]:
        """Snapshot of all stored defaults."""
        with self._lock:
            return {key: _detach(value) for key, value in self._defaults.items()}

    def get_env_vars(self) -> dict[str, str]:
        """Snapshot of the environment variables referenced by the latest bind."""
        with self._lock:
            return dict(self._env_vars)

    def get_all_values(self) -> dict[str, Any]:
        """Defaults overridden by the latest environment snapshot.

        For introspection and logging only; binding never reads it.
        """
        with self._lock:
            merged = {key: _detach(value) for key, value in self._defaults.items()}
            merged.update(self._env_vars)
            return merged

    def lookup(self, keys: Iterable[str]) -> dict[str, Any]:
        """Consistent snapshot of the defaults stored for *keys*."""
        with self._lock:
            return {key: _detach(self._defaults[key]) for key in keys if key in self._defaults}

    def record_env_vars(self, env_vars: Mapping[str, str]) -> None:
        """Replace the environment snapshot reported by :meth:`get_env_vars`."""
        with self._lock:
            self._env_vars = dict(env_vars)

    def reset(self) -> None:
        """Drop all defaults and the environment snapshot."""
        with self._lock:
            self._defaults.clear()
            self._env_vars.clear()

    def __repr__(self) -> str:
        with self._lock:
            return f"ValueStore(defaults={len(self._defaults)}, env_vars={len(self._env_vars)})"
