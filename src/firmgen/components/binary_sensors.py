"""Binary sensor platform ``gpio``: a debounced digital input.

The pin defaults to the internal pull-up unless its ``mode`` says
otherwise.  ``delayed_on``/``delayed_off`` filters set how long a new level
must be held before it is accepted; without them a 50 ms debounce applies
in both directions.
"""

from __future__ import annotations

from firmgen.errors import InvalidPropertyValueError
from firmgen.framework import EmitContext, PinValidator, c_identifier, c_string, parse_duration_ms
from firmgen.model import (
    BinarySensorConfig,
    BinarySensorFilterType,
    BoardDefinition,
    ComponentCode,
    ComponentKind,
    PinMode,
    PinRequirement,
    ResolvedPin,
)

from ._base import BaseFactory, gpio_config_block

DEBOUNCE_MS = 50


class GPIOBinarySensorFactory(BaseFactory):
    kind = ComponentKind.BINARY_SENSOR
    platform = "gpio"
    required_properties = ("pin",)
    optional_properties = ("id", "name", "device_class", "inverted", "filters")
    id_prefix = "binary_sensor"

    def validate(self, entry: BinarySensorConfig, board: BoardDefinition) -> list[ResolvedPin]:
        self.check_properties(entry)
        pin = self.require(entry, "pin")
        resolved = PinValidator(board).resolve(pin, PinRequirement.INPUT)
        self._timing(entry)
        return [resolved]

    def _timing(self, entry: BinarySensorConfig) -> tuple[bool, int, int]:
        """``(invert, on_delay_ms, off_delay_ms)`` after applying filters."""
        invert = False
        on_ms = off_ms = DEBOUNCE_MS
        for f in entry.filters:
            if f.type is BinarySensorFilterType.INVERT:
                invert = not invert
                continue
            if f.duration is None:
                raise InvalidPropertyValueError(
                    self.platform, f"filters.{f.type.value}", None, "a duration is required"
                )
            ms = parse_duration_ms(
                f.duration, component=self.platform, property=f"filters.{f.type.value}"
            )
            if f.type in (BinarySensorFilterType.DELAYED_ON, BinarySensorFilterType.DELAYED_ON_OFF):
                on_ms = ms
            if f.type in (BinarySensorFilterType.DELAYED_OFF, BinarySensorFilterType.DELAYED_ON_OFF):
                off_ms = ms
        return invert, on_ms, off_ms

    def generate_code(self, entry: BinarySensorConfig, ctx: EmitContext) -> ComponentCode:
        pin = ctx.resolve(entry.pin, PinRequirement.INPUT)
        cid = self.component_id(entry)
        ident = c_identifier(cid)
        name = self.display_name(entry, cid)
        invert_filter, on_ms, off_ms = self._timing(entry)
        inverted = (entry.inverted if entry.inverted is not None else pin.inverted) != invert_filter
        active = 0 if inverted else 1
        entity = self.entity(cid)

        mode = pin.mode or PinMode.INPUT_PULLUP
        pull_up = mode is PinMode.INPUT_PULLUP
        pull_down = mode is PinMode.INPUT_PULLDOWN

        declarations = [
            f"bool {ident}_last_state = false;",
            f"unsigned long {ident}_last_change = 0;",
        ]
        registrations = []
        report = ""
        if ctx.api_enabled:
            declarations.append(f"static uint32_t {ident}_key = {entity.key};")
            registrations.append(
                f"api_register_binary_sensor({ident}_key, {c_string(name)}, {c_string(cid)}, "
                f"{c_string(entry.device_class.value if entry.device_class else '')});"
            )
            report = f"        api_send_binary_sensor_state({ident}_key, {ident}_current, false);\n"

        loop = (
            f"bool {ident}_current = gpio_get_level({pin.gpio}) == {active};\n"
            f"if ({ident}_current != {ident}_last_state) {{\n"
            f"    unsigned long now = millis();\n"
            f"    unsigned long hold = {ident}_current ? {on_ms} : {off_ms};\n"
            f"    if (now - {ident}_last_change > hold) {{\n"
            f"        {ident}_last_state = {ident}_current;\n"
            f"        {ident}_last_change = now;\n"
            f'        printf("%s: %s\\n", {c_string(name)}, {ident}_current ? "ON" : "OFF");\n'
            f"{report}"
            f"    }}\n"
            f"}} else {{\n"
            f"    {ident}_last_change = millis();\n"
            f"}}"
        )

        return ComponentCode(
            includes=['#include "driver/gpio.h"'],
            declarations=declarations,
            setup=[
                *gpio_config_block(ident, pin, output=False, pull_up=pull_up, pull_down=pull_down),
                f"{ident}_last_state = gpio_get_level({pin.gpio}) == {active};",
            ],
            loop=[loop],
            api_registrations=registrations,
            entities=[entity],
        )
