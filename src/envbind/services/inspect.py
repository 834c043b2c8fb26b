"""InspectService — describe and trial-bind record types for the CLI.

Targets are ``"package.module:ClassName"`` strings naming a dataclass or
pydantic model.  Every outcome, including import and binding failures,
comes back as a :class:`ServiceResult`.
"""

from __future__ import annotations

import importlib
import logging
import sys
from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any

from envbind.domain.durations import format_duration
from envbind.domain.fields import FieldDescriptor, describe_fields
from envbind.errors import BindError, describe_annotation
from envbind.services.binder import Binder
from envbind.services.result import ServiceResult

if TYPE_CHECKING:
    from envbind.infrastructure.store import ValueStore

logger = logging.getLogger(__name__)


class TargetError(Exception):
    """A target string could not be resolved to a class."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


def load_target(target: str, search_path: Path | None = None) -> type:
    """Import the class named by ``"module:Class"``.

    *search_path* is put at the front of ``sys.path`` for the duration of
    the import so modules in the working directory can be found from an
    installed console script; ``sys.path`` is restored afterwards.
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise TargetError("INVALID_TARGET", f"Expected 'module:Class', got {target!r}")

    added = search_path is not None and str(search_path) not in sys.path
    if added:
        sys.path.insert(0, str(search_path))
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise TargetError("TARGET_NOT_FOUND", f"Cannot import {module_name!r}: {exc}") from exc
    except Exception as exc:
        raise TargetError(
            "TARGET_IMPORT_FAILED", f"Importing {module_name!r} failed: {exc!r}"
        ) from exc
    finally:
        if added and str(search_path) in sys.path:
            sys.path.remove(str(search_path))

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise TargetError(
                "TARGET_NOT_FOUND", f"{module_name!r} has no attribute {attr_path!r}"
            ) from exc

    if not isinstance(obj, type):
        raise TargetError("TARGET_NOT_CLASS", f"{target!r} is not a class")
    return obj


def display_value(value: Any) -> Any:
    """JSON-friendly rendering of a bound or stored value."""
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, list):
        return [display_value(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return repr(value)


def _status(descriptor: FieldDescriptor) -> str:
    if not descriptor.tagged:
        return "skipped"
    return "bound" if descriptor.supported else "unsupported"


def _display_mapping(values: Mapping[str, Any]) -> dict[str, Any]:
    return {key: display_value(value) for key, value in sorted(values.items())}


class InspectService:
    """CLI-facing operations over a store and an environment."""

    def __init__(
        self,
        store: ValueStore,
        environ: Mapping[str, str] | None = None,
        search_path: Path | None = None,
    ) -> None:
        self._store = store
        self._environ = environ
        self._search_path = search_path

    def describe(self, target: str) -> ServiceResult:
        """List the fields of *target* with their keys and kinds."""
        op = "describe"
        try:
            record_type = load_target(target, self._search_path)
            descriptors = describe_fields(record_type)
        except TargetError as exc:
            return ServiceResult.failure(op, exc.code, str(exc), target=target)
        except BindError as exc:
            return ServiceResult.failure(op, exc.code, str(exc), **exc.detail())

        warnings: list[str] = []
        fields: list[dict[str, Any]] = []
        for d in descriptors:
            ft = d.field_type
            fields.append(
                {
                    "field": d.name,
                    "key": d.key,
                    "kind": str(ft.kind) if ft else None,
                    "type": ft.type_name if ft else describe_annotation(d.annotation),
                    "status": _status(d),
                }
            )
            if d.tagged and not d.supported:
                warnings.append(
                    f"Field {d.name!r} (key {d.key!r}) has unsupported type "
                    f"{describe_annotation(d.annotation)}"
                )
        return ServiceResult(
            ok=True,
            op=op,
            data={"target": target, "count": len(fields), "fields": fields},
            warnings=warnings,
        )

    def bind(self, target: str) -> ServiceResult:
        """Instantiate *target* with no arguments and bind it."""
        op = "bind"
        try:
            record_type = load_target(target, self._search_path)
        except TargetError as exc:
            return ServiceResult.failure(op, exc.code, str(exc), target=target)

        try:
            record = record_type()
        except Exception as exc:
            return ServiceResult.failure(
                op,
                "CONSTRUCT_FAILED",
                f"Cannot construct {target!r} without arguments: {exc}",
                target=target,
            )

        try:
            resolutions = Binder(self._store, self._environ).parse(record)
        except BindError as exc:
            logger.debug("bind failed", extra={"target": target, "code": exc.code})
            return ServiceResult.failure(op, exc.code, str(exc), **exc.detail())

        fields = [
            {
                "field": r.field,
                "key": r.key,
                "source": str(r.source),
                "value": display_value(getattr(record, r.field)),
            }
            for r in resolutions
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "target": target,
                "count": len(fields),
                "fields": fields,
                "env_vars": _display_mapping(self._store.get_env_vars()),
                "values": _display_mapping(self._store.get_all_values()),
            },
        )

    def defaults(self) -> ServiceResult:
        """Show the defaults currently held by the store."""
        defaults = self._store.get_defaults()
        return ServiceResult(
            ok=True,
            op="defaults",
            data={"count": len(defaults), "defaults": _display_mapping(defaults)},
        )
