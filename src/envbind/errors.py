"""Binding errors raised by :meth:`envbind.services.binder.Binder.parse`.

Every failure aborts the current bind and surfaces as one exception.
All of them are caller-recoverable: fix the record type, the environment,
or the defaults, then parse again.
"""

from __future__ import annotations

from typing import Any


class BindError(Exception):
    """Base class for all binding failures.

    Attributes:
        code: Stable machine-readable identifier (used in CLI JSON output).
    """

    code = "BIND_ERROR"

    def detail(self) -> dict[str, Any]:
        """Structured context for the failure."""
        return {}


class TargetNotReferenceError(BindError):
    """The destination cannot be written in place."""

    code = "TARGET_NOT_REFERENCE"

    def __init__(self, target: Any) -> None:
        self.target_type = target.__name__ if isinstance(target, type) else type(target).__name__
        if isinstance(target, type):
            reason = f"got the class {self.target_type!r}, pass an instance"
        else:
            reason = f"{self.target_type!r} values cannot be written in place"
        super().__init__(f"destination is not a mutable reference: {reason}")

    def detail(self) -> dict[str, Any]:
        return {"type": self.target_type}


class DestinationNotRecordError(BindError):
    """The destination is mutable but is not a dataclass or pydantic model."""

    code = "DESTINATION_NOT_RECORD"

    def __init__(self, target: Any) -> None:
        self.target_type = target.__name__ if isinstance(target, type) else type(target).__name__
        super().__init__(
            f"destination is not a record: expected a dataclass or pydantic model, "
            f"got {self.target_type!r}"
        )

    def detail(self) -> dict[str, Any]:
        return {"type": self.target_type}


class UnsupportedFieldTypeError(BindError):
    """A tagged field is declared with a type outside the supported set."""

    code = "UNSUPPORTED_FIELD_TYPE"

    def __init__(self, field: str, key: str, annotation: Any) -> None:
        self.field = field
        self.key = key
        self.annotation = describe_annotation(annotation)
        super().__init__(
            f"unsupported type {self.annotation} for field {field!r} (key {key!r})"
        )

    def detail(self) -> dict[str, Any]:
        return {"field": self.field, "key": self.key, "annotation": self.annotation}


class DefaultTypeMismatchError(BindError):
    """A stored default does not have the claiming field's declared type."""

    code = "DEFAULT_TYPE_MISMATCH"

    def __init__(self, field: str, key: str, expected: str, value: Any) -> None:
        self.field = field
        self.key = key
        self.expected = expected
        self.actual = type(value).__name__
        super().__init__(
            f"Default value type mismatch for key {key!r} (field {field!r}): "
            f"expected {expected}, got {self.actual}"
        )

    def detail(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "key": self.key,
            "expected": self.expected,
            "actual": self.actual,
        }


class ValueParseError(BindError):
    """An environment string could not be coerced into the field's type."""

    code = "VALUE_PARSE_FAILURE"

    def __init__(self, field: str, key: str, raw: str, kind: str) -> None:
        self.field = field
        self.key = key
        self.raw = raw
        self.kind = kind
        super().__init__(
            f"failed to parse {raw!r} from {key!r} for field {field!r} as {kind}"
        )

    def detail(self) -> dict[str, Any]:
        return {"field": self.field, "key": self.key, "raw": self.raw, "kind": self.kind}


class FieldAssignmentError(BindError):
    """The record refused a resolved value (pydantic ``validate_assignment``)."""

    code = "FIELD_ASSIGNMENT_REJECTED"

    def __init__(self, field: str, key: str, source: str, reason: str) -> None:
        self.field = field
        self.key = key
        self.source = source
        self.reason = reason
        super().__init__(
            f"record rejected the {source} value from {key!r} for field {field!r}: {reason}"
        )

    def detail(self) -> dict[str, Any]:
        return {"field": self.field, "key": self.key, "source": self.source, "reason": self.reason}


def describe_annotation(annotation: Any) -> str:
    """Readable name for a type annotation, used in error messages."""
    if isinstance(annotation, type):
        return annotation.__qualname__
    return repr(annotation).replace("typing.", "")
