"""Lookup-key declaration and field descriptors for destination records.

A record is a dataclass or a pydantic model.  Fields opt into binding by
carrying a lookup key, either as an :class:`Env` marker::

    @dataclass
    class AppConfig:
        port: Annotated[int, Env("PORT")] = 0
        hosts: Annotated[list[str], Env("ALLOWED_HOSTS")] = field(default_factory=list)

or, for dataclasses, as field metadata::

    timeout: timedelta = env_field("TIMEOUT", default=timedelta(0))

Fields without a key are never inspected.
"""

from __future__ import annotations

import dataclasses
import re
import sys
from dataclasses import dataclass
from typing import Annotated, Any, ForwardRef

from pydantic import BaseModel

from envbind.domain.kinds import FieldType, classify, split_annotated
from envbind.errors import (
    DestinationNotRecordError,
    TargetNotReferenceError,
    UnsupportedFieldTypeError,
)

METADATA_KEY = "env"

_IMMUTABLE_VALUES = (str, bytes, int, float, complex, tuple, frozenset, type(None))

# Env("KEY") / Env(key="KEY") / Env(NAME) inside an annotation string.
_ENV_MARKER = re.compile(
    r"""\bEnv\(\s*(?:key\s*=\s*)?(?:(["'])(?P<literal>.*?)\1|(?P<expr>[^)]*))"""
)


@dataclass(frozen=True)
class Env:
    """``Annotated`` marker binding a field to a lookup key."""

    key: str


def env_field(key: str, **kwargs: Any) -> Any:
    """``dataclasses.field`` carrying *key* in its metadata.

    Extra keyword arguments (``default``, ``default_factory``, ...) are
    passed through unchanged.
    """
    metadata = {**kwargs.pop("metadata", {}), METADATA_KEY: key}
    return dataclasses.field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class FieldDescriptor:
    """One declared field of a record type, in declaration order."""

    name: str
    key: str | None
    annotation: Any
    field_type: FieldType | None

    @property
    def tagged(self) -> bool:
        return self.key is not None

    @property
    def supported(self) -> bool:
        return self.field_type is not None


def describe_fields(record_type: type) -> list[FieldDescriptor]:
    """List the fields of *record_type* without validating them.

    Raises:
        DestinationNotRecordError: If *record_type* is not a dataclass
            or pydantic model class.
    """
    declared: list[tuple[str, Any, str | None]]
    if dataclasses.is_dataclass(record_type):
        declared = [
            (f.name, _dataclass_annotation(record_type, f), f.metadata.get(METADATA_KEY))
            for f in dataclasses.fields(record_type)
        ]
    elif isinstance(record_type, type) and issubclass(record_type, BaseModel):
        # pydantic moves Annotated metadata onto FieldInfo; put it back.
        declared = [
            (name, _rebuild_annotation(info.annotation, info.metadata), None)
            for name, info in record_type.model_fields.items()
        ]
    else:
        raise DestinationNotRecordError(record_type)

    descriptors: list[FieldDescriptor] = []
    for name, annotation, metadata_key in declared:
        if isinstance(annotation, UnresolvedAnnotation):
            key = annotation.marker_key() or metadata_key
        else:
            _, metadata = split_annotated(annotation)
            marker = next((m for m in metadata if isinstance(m, Env)), None)
            key = marker.key if marker is not None else metadata_key
        descriptors.append(
            FieldDescriptor(
                name=name,
                key=key,
                annotation=annotation,
                field_type=classify(annotation) if key is not None else None,
            )
        )
    return descriptors


@dataclass(frozen=True)
class UnresolvedAnnotation:
    """A postponed annotation whose names are not importable at bind time.

    Typical causes are ``TYPE_CHECKING``-only imports and classes local to
    a function.  Untagged fields carrying one are skipped; tagged ones are
    reported as unsupported.
    """

    text: str

    def marker_key(self) -> str | None:
        """Best-effort lookup key from an ``Env(...)`` marker in the text."""
        match = _ENV_MARKER.search(self.text)
        if match is None:
            return None
        if match.group("literal") is not None:
            return match.group("literal")
        return match.group("expr").strip() or None

    def __repr__(self) -> str:
        return self.text


def _dataclass_annotation(record_type: type, field_: dataclasses.Field[Any]) -> Any:
    """Evaluate one field's annotation in the namespace that declared it."""
    annotation = field_.type
    if isinstance(annotation, ForwardRef):
        annotation = annotation.__forward_arg__
    if not isinstance(annotation, str):
        return annotation

    # The most-base class holding this Field object declared it.
    owner = next(
        (
            klass
            for klass in reversed(record_type.__mro__)
            if vars(klass).get("__dataclass_fields__", {}).get(field_.name) is field_
        ),
        record_type,
    )
    module = sys.modules.get(owner.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    try:
        return eval(annotation, globalns, dict(vars(owner)))
    except (NameError, AttributeError, SyntaxError, TypeError):
        return UnresolvedAnnotation(annotation)


def _rebuild_annotation(annotation: Any, metadata: list[Any]) -> Any:
    if not metadata:
        return annotation
    return Annotated[(annotation, *metadata)]


def resolve_fields(destination: Any) -> list[FieldDescriptor]:
    """Validate *destination* and return its tagged field descriptors.

    Checks run in order: the destination must be a mutable instance,
    it must be a record, and every tagged field must have a supported
    type.  Nothing is written here.

    Raises:
        TargetNotReferenceError: Classes, immutable values, frozen records.
        DestinationNotRecordError: Any other non-record instance.
        UnsupportedFieldTypeError: First tagged field with an unsupported type.
    """
    if isinstance(destination, type) or isinstance(destination, _IMMUTABLE_VALUES):
        raise TargetNotReferenceError(destination)

    if dataclasses.is_dataclass(destination):
        if type(destination).__dataclass_params__.frozen:
            raise TargetNotReferenceError(destination)
    elif isinstance(destination, BaseModel):
        if destination.model_config.get("frozen"):
            raise TargetNotReferenceError(destination)
    else:
        raise DestinationNotRecordError(destination)

    tagged = [d for d in describe_fields(type(destination)) if d.tagged]
    for descriptor in tagged:
        if not descriptor.supported:
            raise UnsupportedFieldTypeError(descriptor.name, descriptor.key, descriptor.annotation)
    return tagged
