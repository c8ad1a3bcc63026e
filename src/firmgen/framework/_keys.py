"""Stable entity keys.

Remote clients address entities by a 32-bit key that must not change
between rebuilds of the same configuration, so the hash below is fixed:
a base-31 polynomial over the UTF-8 bytes of ``"<name>_<role>"``, starting
from zero, wrapping at 2**32.  Different entities may collide.
"""

from __future__ import annotations

_MASK = 0xFFFFFFFF


def component_key(name: str, role: str) -> int:
    """Return the entity key for *name* in *role* (e.g. ``"sensor"``)."""
    h = 0
    for b in f"{name}_{role}".encode("utf-8"):
        h = (h * 31 + b) & _MASK
    return h
