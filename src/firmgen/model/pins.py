"""Pin specifications.

A pin is written either as a bare number (``4``) or as a symbolic token
(``"GPIO4"``).  The symbolic form is normalized once, by
:func:`normalize_pin_number`, and nowhere else.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from firmgen.errors import InvalidPinFormatError


class PinMode(str, Enum):
    INPUT = "input"
    OUTPUT = "output"
    INPUT_PULLUP = "input_pullup"
    INPUT_PULLDOWN = "input_pulldown"
    OUTPUT_OPEN_DRAIN = "output_open_drain"


class PinRequirement(str, Enum):
    """The role a pin has to support for a given use."""

    INPUT = "input"
    OUTPUT = "output"
    PWM = "pwm"
    ADC = "adc"

    @property
    def exclusive(self) -> bool:
        """Exclusive claims may not share a pin with any other claim."""
        return self is not PinRequirement.INPUT


_GPIO_RE = re.compile(r"^GPIO(\d+)$")


def normalize_pin_number(raw: int | str) -> int:
    """Return the canonical numeric pin for *raw*.

    Integers pass through unchanged (range checks belong to the board).
    Strings must look like ``GPIO<n>``; case and surrounding whitespace
    are ignored.
    """
    # bool is an int subclass; True is not a pin
    if isinstance(raw, bool):
        raise InvalidPinFormatError(raw)
    if isinstance(raw, int):
        return raw
    m = _GPIO_RE.match(raw.strip().upper())
    if m is None:
        raise InvalidPinFormatError(raw)
    return int(m.group(1))


class PinSpec(BaseModel):
    """A pin as written in the configuration."""

    model_config = ConfigDict(frozen=True)

    number: int | str
    mode: PinMode | None = None
    inverted: bool | None = None

    @model_validator(mode="before")
    @classmethod
    def _scalar_shorthand(cls, data):
        # ``pin: GPIO4`` is shorthand for ``pin: {number: GPIO4}``
        if isinstance(data, (int, str)) and not isinstance(data, bool):
            return {"number": data}
        return data

    @field_validator("mode", mode="before")
    @classmethod
    def _lower_mode(cls, v):
        return v.lower() if isinstance(v, str) else v

    def canonical(self) -> int:
        return normalize_pin_number(self.number)

    def __str__(self) -> str:
        if isinstance(self.number, int):
            return f"GPIO{self.number}"
        return self.number


class ResolvedPin(BaseModel):
    """A pin that passed board validation for one requirement."""

    model_config = ConfigDict(frozen=True)

    number: int
    requirement: PinRequirement
    adc_channel: int | None = None
    reserved: bool = False
    mode: PinMode | None = None
    inverted: bool = False

    @property
    def gpio(self) -> str:
        """ESP-IDF pin constant, e.g. ``GPIO_NUM_4``."""
        return f"GPIO_NUM_{self.number}"
