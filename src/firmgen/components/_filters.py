"""Sensor value filters rendered as C++ statements.

Each filter rewrites a ``float`` variable in place.  Stateful filters
(moving averages) also need a few globals, returned as declarations.
"""

from __future__ import annotations

from firmgen.errors import InvalidPropertyValueError
from firmgen.model import FilterConfig, FilterType


def _number(platform: str, f: FilterConfig) -> float:
    if isinstance(f.value, (int, float)) and not isinstance(f.value, bool):
        return float(f.value)
    raise InvalidPropertyValueError(platform, f"filters.{f.type.value}", f.value, "expected a number")


def _window(platform: str, f: FilterConfig) -> int:
    size = _number(platform, f)
    if size < 1 or size != int(size):
        raise InvalidPropertyValueError(
            platform, f"filters.{f.type.value}", f.value, "window size must be a positive integer"
        )
    return int(size)


def check_filters(platform: str, filters: list[FilterConfig]) -> None:
    """Raise on the first filter whose value does not fit its type."""
    render_filters(platform, "_", "value", filters)


def render_filters(
    platform: str,
    ident: str,
    var: str,
    filters: list[FilterConfig],
) -> tuple[list[str], list[str]]:
    """Return ``(declarations, statements)`` applying *filters* to *var*."""
    declarations: list[str] = []
    statements: list[str] = []
    for i, f in enumerate(filters):
        state = f"{ident}_filter{i}"
        if f.type is FilterType.OFFSET:
            statements.append(f"{var} = {var} + {_number(platform, f)!r}f;")
        elif f.type is FilterType.MULTIPLY:
            statements.append(f"{var} = {var} * {_number(platform, f)!r}f;")
        elif f.type is FilterType.CALIBRATE_LINEAR:
            if not (isinstance(f.value, list) and len(f.value) == 2):
                raise InvalidPropertyValueError(
                    platform, "filters.calibrate_linear", f.value,
                    "expected [slope, intercept]",
                )
            slope, intercept = f.value
            statements.append(f"{var} = {var} * {float(slope)!r}f + {float(intercept)!r}f;")
        elif f.type is FilterType.LAMBDA:
            if not (isinstance(f.value, str) and f.value.strip()):
                raise InvalidPropertyValueError(
                    platform, "filters.lambda", f.value, "expected a C++ expression in x"
                )
            statements.append(f"{{ float x = {var}; {var} = ({f.value.strip()}); }}")
        elif f.type is FilterType.SLIDING_WINDOW_MOVING_AVERAGE:
            size = _window(platform, f)
            declarations += [
                f"float {state}_buf[{size}] = {{0}};",
                f"int {state}_pos = 0;",
                f"int {state}_count = 0;",
            ]
            statements += [
                f"{state}_buf[{state}_pos] = {var};",
                f"{state}_pos = ({state}_pos + 1) % {size};",
                f"if ({state}_count < {size}) {state}_count++;",
                f"{{ float sum = 0; for (int i = 0; i < {state}_count; i++) "
                f"sum += {state}_buf[i]; {var} = sum / {state}_count; }}",
            ]
        elif f.type is FilterType.EXPONENTIAL_MOVING_AVERAGE:
            alpha = _number(platform, f)
            if not 0.0 < alpha <= 1.0:
                raise InvalidPropertyValueError(
                    platform, "filters.exponential_moving_average", f.value,
                    "alpha must be in (0, 1]",
                )
            declarations += [
                f"float {state}_avg = 0.0f;",
                f"bool {state}_primed = false;",
            ]
            statements += [
                f"if (!{state}_primed) {{ {state}_avg = {var}; {state}_primed = true; }}",
                f"{state}_avg = {alpha!r}f * {var} + (1.0f - {alpha!r}f) * {state}_avg;",
                f"{var} = {state}_avg;",
            ]
    return declarations, statements
