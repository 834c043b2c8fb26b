"""Per-kind coercion of raw values.

Two tables, both keyed by :class:`FieldKind`:

- ``ENV_PARSERS`` turn an environment string into the field's value and
  raise ``ValueError`` when the text is malformed.
- ``DEFAULT_CHECKS`` accept a stored default only when its concrete type
  already matches the field; defaults are never converted.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from envbind.domain.durations import parse_duration
from envbind.domain.kinds import FieldKind, FieldType

_SIGNED_INT = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT = re.compile(r"[0-9]+")

TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

LIST_SEPARATOR = ","


def _parse_int(raw: str, field_type: FieldType) -> int:
    pattern = _UNSIGNED_INT if field_type.kind is FieldKind.UINT else _SIGNED_INT
    if pattern.fullmatch(raw) is None:
        raise ValueError(f"invalid syntax {raw!r}")
    value = int(raw)
    bounds = field_type.bounds
    if bounds is not None and not bounds.contains(value):
        raise ValueError(f"{raw!r} out of range for {bounds.name}")
    return value


def _parse_float(raw: str, field_type: FieldType) -> float:
    if not raw.isascii() or raw != raw.strip() or "_" in raw:
        raise ValueError(f"invalid syntax {raw!r}")
    value = float(raw)
    if math.isinf(value) and "inf" not in raw.lower():
        raise ValueError(f"{raw!r} out of range for float")
    return value


def _parse_bool(raw: str, field_type: FieldType) -> bool:
    if raw in TRUE_STRINGS:
        return True
    if raw in FALSE_STRINGS:
        return False
    raise ValueError(f"invalid syntax {raw!r}")


def _parse_str(raw: str, field_type: FieldType) -> str:
    return raw


def _parse_duration(raw: str, field_type: FieldType) -> timedelta:
    return parse_duration(raw)


def _parse_str_list(raw: str, field_type: FieldType) -> list[str]:
    if raw == "":
        return []
    return [item.strip() for item in raw.split(LIST_SEPARATOR)]


ENV_PARSERS: dict[FieldKind, Callable[[str, FieldType], Any]] = {
    FieldKind.INT: _parse_int,
    FieldKind.UINT: _parse_int,
    FieldKind.FLOAT: _parse_float,
    FieldKind.BOOL: _parse_bool,
    FieldKind.STR: _parse_str,
    FieldKind.DURATION: _parse_duration,
    FieldKind.STR_LIST: _parse_str_list,
}


def _accepts_int(value: Any, field_type: FieldType) -> bool:
    if type(value) is not int:
        return False
    if field_type.kind is FieldKind.UINT and value < 0:
        return False
    return field_type.bounds is None or field_type.bounds.contains(value)


def _accepts_exact(expected: type) -> Callable[[Any, FieldType], bool]:
    def check(value: Any, field_type: FieldType) -> bool:
        return type(value) is expected

    return check


def _accepts_duration(value: Any, field_type: FieldType) -> bool:
    return isinstance(value, timedelta)


def _accepts_str_list(value: Any, field_type: FieldType) -> bool:
    return type(value) is list and all(type(item) is str for item in value)


DEFAULT_CHECKS: dict[FieldKind, Callable[[Any, FieldType], bool]] = {
    FieldKind.INT: _accepts_int,
    FieldKind.UINT: _accepts_int,
    FieldKind.FLOAT: _accepts_exact(float),
    FieldKind.BOOL: _accepts_exact(bool),
    FieldKind.STR: _accepts_exact(str),
    FieldKind.DURATION: _accepts_duration,
    FieldKind.STR_LIST: _accepts_str_list,
}


def parse_env_value(raw: str, field_type: FieldType) -> Any:
    """Coerce an environment string into a value of *field_type*.

    Raises:
        ValueError: If *raw* is not valid text for the field's kind.
    """
    return ENV_PARSERS[field_type.kind](raw, field_type)


def accepts_default(value: Any, field_type: FieldType) -> bool:
    """Whether a stored default already has the field's concrete type."""
    return DEFAULT_CHECKS[field_type.kind](value, field_type)
