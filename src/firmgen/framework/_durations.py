"""Duration strings (``update_interval: 60s``, ``delayed_on: 100ms``)."""

from __future__ import annotations

import re

from firmgen.errors import InvalidPropertyValueError

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|min|h)?\s*$")

_UNIT_MS: dict[str, int] = {
    "ms": 1,
    "s": 1000,
    "min": 60_000,
    "h": 3_600_000,
}


def parse_duration_ms(value: str | int, *, component: str, property: str) -> int:
    """Parse *value* into whole milliseconds.

    A bare number is taken as milliseconds.  *component* and *property*
    only label the error.
    """
    if isinstance(value, bool):
        raise InvalidPropertyValueError(component, property, value, "expected a duration")
    if isinstance(value, int):
        if value < 0:
            raise InvalidPropertyValueError(component, property, value, "must not be negative")
        return value
    m = _DURATION_RE.match(value)
    if m is None:
        raise InvalidPropertyValueError(
            component, property, value,
            "expected a number followed by ms, s, min or h",
        )
    amount = float(m.group(1))
    unit = m.group(2) or "ms"
    return int(round(amount * _UNIT_MS[unit]))
