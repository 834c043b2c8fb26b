"""Unit-suffixed duration strings.

Accepted syntax: an optional sign followed by one or more
``<number><unit>`` components, e.g. ``"45s"``, ``"2m30s"``, ``"1.5h"``,
``"-300ms"``.  Units: ``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m``,
``h``.  A bare ``"0"`` is the only unitless value allowed.

Values are :class:`datetime.timedelta`, so sub-microsecond components
are rounded to the nearest microsecond.
"""

from __future__ import annotations

import re
from datetime import timedelta
from fractions import Fraction

_NANOS_PER_UNIT: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_COMPONENT = re.compile(r"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)")

_MICROS_PER_SECOND = 1_000_000
_MICROS_PER_MINUTE = 60 * _MICROS_PER_SECOND
_MICROS_PER_HOUR = 60 * _MICROS_PER_MINUTE


def parse_duration(text: str) -> timedelta:
    """Parse a duration string such as ``"1h30m"`` into a timedelta.

    Raises:
        ValueError: If *text* is not a valid duration.
    """
    body = text
    negative = False
    if body[:1] in ("+", "-"):
        negative = body[0] == "-"
        body = body[1:]

    if body == "0":
        return timedelta(0)
    if not body:
        raise ValueError(f"invalid duration {text!r}")

    nanos = Fraction(0)
    pos = 0
    while pos < len(body):
        match = _COMPONENT.match(body, pos)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        number, unit = match.groups()
        nanos += Fraction(number) * _NANOS_PER_UNIT[unit]
        pos = match.end()

    micros = round(nanos / 1000)
    try:
        return timedelta(microseconds=-micros if negative else micros)
    except OverflowError as exc:
        raise ValueError(f"duration {text!r} out of range") from exc


def format_duration(value: timedelta) -> str:
    """Render a timedelta in the same unit-suffixed syntax.

    ``timedelta(minutes=90)`` becomes ``"1h30m0s"``; sub-second values use
    the largest fitting unit (``"500ms"``, ``"20µs"``).  The output always
    parses back to the same value.
    """
    micros = (value.days * 86400 + value.seconds) * _MICROS_PER_SECOND + value.microseconds
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1000:
        return f"{sign}{micros}µs"
    if micros < _MICROS_PER_SECOND:
        return f"{sign}{_decimal(micros, 1000)}ms"

    hours, rest = divmod(micros, _MICROS_PER_HOUR)
    minutes, rest = divmod(rest, _MICROS_PER_MINUTE)
    parts = [sign]
    if hours:
        parts.append(f"{hours}h")
    if hours or minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{_decimal(rest, _MICROS_PER_SECOND)}s")
    return "".join(parts)


def _decimal(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    width = len(str(unit)) - 1
    return f"{whole}.{frac:0{width}d}".rstrip("0")
