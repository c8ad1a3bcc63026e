"""Pin resolution against a board definition.

:class:`PinValidator` turns a :class:`PinSpec` into a :class:`ResolvedPin`
for one requirement, or raises a :class:`PinError`.  :class:`PinLedger`
tracks which component claimed which pin during a single build.

Exclusivity policy: ``input`` claims may share a pin with other ``input``
claims; ``output``, ``pwm`` and ``adc`` claims may not share a pin with
anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from firmgen.errors import PinConflictError, PinOutOfRangeError, PinRoleMismatchError
from firmgen.model.board import BoardDefinition
from firmgen.model.pins import (
    PinRequirement,
    PinSpec,
    ResolvedPin,
    normalize_pin_number,
)

logger = logging.getLogger(__name__)


class PinValidator:
    """Resolves pins for one board."""

    def __init__(self, board: BoardDefinition) -> None:
        self.board = board

    def resolve(self, pin: PinSpec | int | str, requirement: PinRequirement) -> ResolvedPin:
        if isinstance(pin, PinSpec):
            spec = pin
        else:
            spec = PinSpec(number=pin)
        number = normalize_pin_number(spec.number)

        board = self.board
        if not 0 <= number <= board.max_pin:
            raise PinOutOfRangeError(number, board.max_pin)

        adc_channel = None
        if requirement is PinRequirement.ADC:
            adc_channel = board.adc_channel(number)
            if adc_channel is None:
                raise PinRoleMismatchError(
                    number, requirement,
                    f"{board.chip_family.value} ADC pins are "
                    f"{_pin_list(self.available_pins(requirement))}",
                )
        elif requirement in (PinRequirement.OUTPUT, PinRequirement.PWM):
            if number in board.input_only_pins:
                raise PinRoleMismatchError(number, requirement, "pin is input-only")

        reserved = number in board.reserved_pins
        if reserved:
            logger.debug(
                "GPIO%d is a strapping/flash pin on %s",
                number, board.identifier,
            )

        return ResolvedPin(
            number=number,
            requirement=requirement,
            adc_channel=adc_channel,
            reserved=reserved,
            mode=spec.mode,
            inverted=bool(spec.inverted),
        )

    def available_pins(self, requirement: PinRequirement) -> list[int]:
        """Pins on this board that satisfy *requirement*, ascending."""
        board = self.board
        if requirement is PinRequirement.ADC:
            return sorted(board.adc_channels)
        pins = range(board.max_pin + 1)
        if requirement in (PinRequirement.OUTPUT, PinRequirement.PWM):
            return [p for p in pins if p not in board.input_only_pins]
        return list(pins)


def _pin_list(pins: list[int]) -> str:
    return ", ".join(f"GPIO{p}" for p in pins) or "none"


@dataclass
class _Claim:
    owner: str
    requirement: PinRequirement


@dataclass
class PinLedger:
    """Pin claims made so far in one build."""

    claims: dict[int, list[_Claim]] = field(default_factory=dict)

    def claim(self, pin: ResolvedPin, owner: str) -> None:
        existing = self.claims.setdefault(pin.number, [])
        for prior in existing:
            if prior.owner == owner:
                # one component using a pin twice (e.g. two colour channels)
                raise PinConflictError(pin.number, prior.owner, owner)
            if prior.requirement.exclusive or pin.requirement.exclusive:
                raise PinConflictError(pin.number, prior.owner, owner)
        existing.append(_Claim(owner, pin.requirement))

    def owners(self, pin: int) -> list[str]:
        return [c.owner for c in self.claims.get(pin, [])]
