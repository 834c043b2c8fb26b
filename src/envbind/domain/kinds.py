"""Supported field kinds and annotation classification.

The set of bindable types is closed. :func:`classify` maps an annotation
to a :class:`FieldType` or returns None, and every coercion table in
:mod:`envbind.domain.coercion` is keyed by :class:`FieldKind`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum
from typing import Annotated, Any, get_args, get_origin


class FieldKind(StrEnum):
    """Closed set of field kinds the binder can populate."""

    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    BOOL = "bool"
    STR = "str"
    DURATION = "duration"
    STR_LIST = "str_list"


KIND_LABELS: dict[FieldKind, str] = {
    FieldKind.INT: "integer",
    FieldKind.UINT: "unsigned integer",
    FieldKind.FLOAT: "float",
    FieldKind.BOOL: "boolean",
    FieldKind.STR: "string",
    FieldKind.DURATION: "duration",
    FieldKind.STR_LIST: "string list",
}


@dataclass(frozen=True)
class IntBounds:
    """Fixed-width integer range, attached to ``int`` through ``Annotated``."""

    bits: int
    signed: bool = True

    @property
    def minimum(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def maximum(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    @property
    def name(self) -> str:
        return f"{'' if self.signed else 'u'}int{self.bits}"

    def contains(self, value: int) -> bool:
        return self.minimum <= value <= self.maximum


Int8 = Annotated[int, IntBounds(8)]
Int16 = Annotated[int, IntBounds(16)]
Int32 = Annotated[int, IntBounds(32)]
Int64 = Annotated[int, IntBounds(64)]
UInt8 = Annotated[int, IntBounds(8, signed=False)]
UInt16 = Annotated[int, IntBounds(16, signed=False)]
UInt32 = Annotated[int, IntBounds(32, signed=False)]
UInt64 = Annotated[int, IntBounds(64, signed=False)]
UInt = UInt64


@dataclass(frozen=True)
class FieldType:
    """A classified field annotation."""

    kind: FieldKind
    bounds: IntBounds | None = None

    @property
    def label(self) -> str:
        """Human label used in parse-failure messages."""
        if self.bounds is not None:
            return f"{KIND_LABELS[self.kind]} ({self.bounds.name})"
        return KIND_LABELS[self.kind]

    @property
    def type_name(self) -> str:
        """Python-facing type name used in type-mismatch messages."""
        if self.bounds is not None:
            return self.bounds.name
        return _TYPE_NAMES[self.kind]


_TYPE_NAMES: dict[FieldKind, str] = {
    FieldKind.INT: "int",
    FieldKind.UINT: "uint",
    FieldKind.FLOAT: "float",
    FieldKind.BOOL: "bool",
    FieldKind.STR: "str",
    FieldKind.DURATION: "timedelta",
    FieldKind.STR_LIST: "list[str]",
}

_SCALARS: dict[type, FieldKind] = {
    bool: FieldKind.BOOL,
    float: FieldKind.FLOAT,
    str: FieldKind.STR,
    timedelta: FieldKind.DURATION,
}


def split_annotated(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Return ``(base, metadata)`` for an ``Annotated`` hint, else ``(hint, ())``."""
    if get_origin(annotation) is Annotated:
        base, *metadata = get_args(annotation)
        return base, tuple(metadata)
    return annotation, ()


def classify(annotation: Any) -> FieldType | None:
    """Classify *annotation* into a supported field type.

    Returns None for anything outside the supported set, including
    optional types, nested records, time instants, and collections
    other than ``list[str]``.  Types are matched by identity, so
    ``bool`` is never mistaken for ``int`` and enum subclasses are
    rejected.
    """
    base, metadata = split_annotated(annotation)

    if base is int:
        bounds = next((m for m in metadata if isinstance(m, IntBounds)), None)
        if bounds is not None and not bounds.signed:
            return FieldType(FieldKind.UINT, bounds)
        return FieldType(FieldKind.INT, bounds)

    if isinstance(base, type) and base in _SCALARS:
        return FieldType(_SCALARS[base])

    if get_origin(base) is list and get_args(base) == (str,):
        return FieldType(FieldKind.STR_LIST)

    return None


def zero_value(field_type: FieldType) -> Any:
    """Return a fresh zero value for *field_type*."""
    kind = field_type.kind
    if kind in (FieldKind.INT, FieldKind.UINT):
        return 0
    if kind is FieldKind.FLOAT:
        return 0.0
    if kind is FieldKind.BOOL:
        return False
    if kind is FieldKind.STR:
        return ""
    if kind is FieldKind.DURATION:
        return timedelta(0)
    return []
