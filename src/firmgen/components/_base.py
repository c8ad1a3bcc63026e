"""Shared plumbing for the built-in factories.

Factories do not need to inherit from anything (the registry only checks
the :class:`~firmgen.framework.ComponentFactory` protocol); the built-in
ones share this base for property checks, id synthesis and the GPIO
configuration block every pin-driving component emits.
"""

from __future__ import annotations

from typing import Any

from firmgen.errors import IncompatibleConfigurationError, MissingRequiredPropertyError
from firmgen.framework import component_key
from firmgen.model import (
    BoardDefinition,
    ComponentConfig,
    ComponentKind,
    Entity,
    ResolvedPin,
    normalize_pin_number,
)


class BaseFactory:
    kind: ComponentKind
    platform: str
    required_properties: tuple[str, ...] = ()
    optional_properties: tuple[str, ...] = ()

    id_prefix: str = ""
    """Synthesized ids are ``<id_prefix>_<pin>``."""

    id_pin_property: str = "pin"
    """Which pin field the synthesized id is built from."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value}/{self.platform})"

    # -- Protocol --------------------------------------------------------------

    def validate(self, entry: ComponentConfig, board: BoardDefinition) -> list[ResolvedPin]:
        raise NotImplementedError

    def component_id(self, entry: ComponentConfig) -> str:
        if entry.id:
            return entry.id
        pin = self.require(entry, self.id_pin_property)
        return f"{self.id_prefix}_{normalize_pin_number(pin.number)}"

    def entity_ids(self, entry: ComponentConfig) -> list[str]:
        return [self.component_id(entry)]

    # -- Helpers ---------------------------------------------------------------

    def require(self, entry: ComponentConfig, prop: str) -> Any:
        """Return ``entry.<prop>``; raise if it is unset."""
        value = getattr(entry, prop, None)
        if value is None:
            raise MissingRequiredPropertyError(self.platform, prop)
        return value

    def check_properties(self, entry: ComponentConfig) -> None:
        """Reject properties that are set but mean nothing to this platform."""
        known = {"platform", *self.required_properties, *self.optional_properties}
        unused = sorted(entry.model_fields_set - known)
        if unused:
            raise IncompatibleConfigurationError(
                self.platform,
                f"property '{unused[0]}' is not used by the {self.kind.value} "
                f"{self.platform} platform",
            )

    def entity(self, entity_id: str) -> Entity:
        role = self.kind.value
        return Entity(id=entity_id, role=role, key=component_key(entity_id, role))

    @staticmethod
    def display_name(entry: ComponentConfig, component_id: str) -> str:
        return entry.name or component_id


def gpio_config_block(
    ident: str,
    pin: ResolvedPin,
    *,
    output: bool,
    pull_up: bool = False,
    pull_down: bool = False,
) -> list[str]:
    """``gpio_config_t`` setup statements for one pin."""
    return [
        f"gpio_config_t {ident}_config = {{}};",
        f"{ident}_config.pin_bit_mask = (1ULL << {pin.number});",
        f"{ident}_config.mode = {'GPIO_MODE_OUTPUT' if output else 'GPIO_MODE_INPUT'};",
        f"{ident}_config.pull_up_en = "
        f"{'GPIO_PULLUP_ENABLE' if pull_up else 'GPIO_PULLUP_DISABLE'};",
        f"{ident}_config.pull_down_en = "
        f"{'GPIO_PULLDOWN_ENABLE' if pull_down else 'GPIO_PULLDOWN_DISABLE'};",
        f"{ident}_config.intr_type = GPIO_INTR_DISABLE;",
        f"gpio_config(&{ident}_config);",
    ]

