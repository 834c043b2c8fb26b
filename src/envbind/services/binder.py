"""Binder — resolve, coerce, and write configuration into a record.

One linear pass per call::

    validate shape -> for each tagged field (declaration order):
        resolve (env > default > zero) -> coerce -> write

The first failure aborts the pass.  Fields written before the failure
stay written, so callers must not trust a record after any error.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from envbind.domain.coercion import accepts_default, parse_env_value
from envbind.domain.fields import FieldDescriptor, resolve_fields
from envbind.domain.kinds import zero_value
from envbind.errors import DefaultTypeMismatchError, FieldAssignmentError, ValueParseError

if TYPE_CHECKING:
    from envbind.infrastructure.store import ValueStore

logger = logging.getLogger(__name__)


class Source(StrEnum):
    """Where a bound field's value came from."""

    ENV = "env"
    DEFAULT = "default"
    ZERO = "zero"


@dataclass(frozen=True)
class Resolution:
    """Outcome for one bound field."""

    field: str
    key: str
    source: Source


class Binder:
    """Binds a :class:`ValueStore` plus an environment onto records.

    Args:
        store: Defaults to consult.  Only read, except for the
            environment snapshot exposed by ``store.get_env_vars()``.
        environ: Environment mapping.  Defaults to ``os.environ``, which
            is read afresh on every :meth:`parse`.
    """

    def __init__(self, store: ValueStore, environ: Mapping[str, str] | None = None) -> None:
        self._store = store
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def parse(self, destination: Any) -> list[Resolution]:
        """Populate every tagged field of *destination* in place.

        Returns:
            One :class:`Resolution` per tagged field, in declaration order.

        Raises:
            TargetNotReferenceError: *destination* cannot be written in place.
            DestinationNotRecordError: *destination* is not a record.
            UnsupportedFieldTypeError: A tagged field has an unsupported type.
            DefaultTypeMismatchError: A stored default has the wrong type.
            ValueParseError: An environment value could not be coerced.
            FieldAssignmentError: A pydantic record rejected a resolved value.
        """
        descriptors = resolve_fields(destination)
        keys = [d.key for d in descriptors]

        environ = self.environ
        env_values = {key: environ[key] for key in keys if key in environ}
        self._store.record_env_vars(env_values)
        defaults = self._store.lookup(keys)

        resolutions: list[Resolution] = []
        for descriptor in descriptors:
            value, source = self._resolve(descriptor, env_values, defaults)
            try:
                setattr(destination, descriptor.name, value)
            except ValidationError as exc:
                reason = "; ".join(error["msg"] for error in exc.errors())
                raise FieldAssignmentError(
                    descriptor.name, descriptor.key, str(source), reason
                ) from exc
            logger.debug(
                "field bound",
                extra={"field": descriptor.name, "key": descriptor.key, "source": str(source)},
            )
            resolutions.append(Resolution(descriptor.name, descriptor.key, source))
        return resolutions

    def _resolve(
        self,
        descriptor: FieldDescriptor,
        env_values: Mapping[str, str],
        defaults: Mapping[str, Any],
    ) -> tuple[Any, Source]:
        key = descriptor.key
        field_type = descriptor.field_type
        assert key is not None and field_type is not None

        if key in env_values:
            raw = env_values[key]
            try:
                return parse_env_value(raw, field_type), Source.ENV
            except ValueError as exc:
                raise ValueParseError(descriptor.name, key, raw, field_type.label) from exc

        if key in defaults:
            value = defaults[key]
            if not accepts_default(value, field_type):
                raise DefaultTypeMismatchError(descriptor.name, key, field_type.type_name, value)
            return value, Source.DEFAULT

        return zero_value(field_type), Source.ZERO
