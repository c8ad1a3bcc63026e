"""Helpers for putting configuration text into C++ source."""

from __future__ import annotations

import re

_NON_IDENT = re.compile(r"[^A-Za-z0-9_]")

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def c_identifier(name: str) -> str:
    """Turn *name* into a valid C identifier.

    Dashes and spaces become underscores, anything else outside
    ``[A-Za-z0-9_]`` is dropped, and a leading digit gets an ``_`` prefix.
    """
    ident = _NON_IDENT.sub("", name.replace("-", "_").replace(" ", "_"))
    if not ident:
        return "_unnamed"
    if ident[0].isdigit():
        ident = "_" + ident
    return ident


def c_string(text: str) -> str:
    """Return *text* as a double-quoted C string literal."""
    return '"' + "".join(_ESCAPES.get(ch, ch) for ch in text) + '"'
