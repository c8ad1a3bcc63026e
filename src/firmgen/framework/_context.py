"""Per-build contexts.

:class:`GenerationContext` is what the caller passes in.
:class:`EmitContext` is what factories receive: the caller's context plus
the resolved board and the mutable per-build state they may touch (the
pin validator and the PWM channel allocator).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from firmgen.errors import IncompatibleConfigurationError
from firmgen.model.board import BoardDefinition
from firmgen.model.configuration import Configuration, FrameworkType
from firmgen.model.pins import PinRequirement, PinSpec, ResolvedPin

from ._pins import PinValidator


@dataclass(frozen=True)
class GenerationContext:
    """Caller options for one build."""

    target_board: str | None = None
    """Overrides ``esp32.board`` when set."""

    framework: FrameworkType = FrameworkType.ESP_IDF
    output_directory: str | None = None
    parameters: dict[str, Any] = field(default_factory=dict)


@dataclass
class EmitContext:
    """State shared by the factories of one build."""

    board: BoardDefinition
    configuration: Configuration
    context: GenerationContext = field(default_factory=GenerationContext)
    validator: PinValidator = field(init=False)
    _pwm_owners: list[str] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.validator = PinValidator(self.board)

    @property
    def api_enabled(self) -> bool:
        return self.configuration.api is not None

    def resolve(self, pin: PinSpec | int | str, requirement: PinRequirement) -> ResolvedPin:
        return self.validator.resolve(pin, requirement)

    def allocate_pwm_channel(self, owner: str) -> int:
        """Hand out the next free LEDC channel, in declaration order."""
        channel = len(self._pwm_owners)
        if channel >= self.board.ledc_channels:
            raise IncompatibleConfigurationError(
                owner,
                f"{self.board.identifier} has only {self.board.ledc_channels} "
                f"PWM channels, all in use",
            )
        self._pwm_owners.append(owner)
        return channel
