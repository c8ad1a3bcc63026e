"""Switch platform ``gpio``: one output pin driven high/low."""

from __future__ import annotations

from firmgen.framework import EmitContext, PinValidator, c_identifier, c_string
from firmgen.model import (
    BoardDefinition,
    ComponentCode,
    ComponentKind,
    PinRequirement,
    ResolvedPin,
    RestoreMode,
    SwitchConfig,
)

from ._base import BaseFactory, gpio_config_block


class GPIOSwitchFactory(BaseFactory):
    kind = ComponentKind.SWITCH
    platform = "gpio"
    required_properties = ("pin",)
    optional_properties = ("id", "name", "inverted", "restore_mode", "icon")
    id_prefix = "gpio_switch"

    def validate(self, entry: SwitchConfig, board: BoardDefinition) -> list[ResolvedPin]:
        self.check_properties(entry)
        pin = self.require(entry, "pin")
        return [PinValidator(board).resolve(pin, PinRequirement.OUTPUT)]

    def generate_code(self, entry: SwitchConfig, ctx: EmitContext) -> ComponentCode:
        pin = ctx.resolve(entry.pin, PinRequirement.OUTPUT)
        cid = self.component_id(entry)
        ident = c_identifier(cid)
        name = self.display_name(entry, cid)
        inverted = entry.inverted if entry.inverted is not None else pin.inverted
        restore_mode = entry.restore_mode or RestoreMode.RESTORE_DEFAULT_OFF
        on_level, off_level = (0, 1) if inverted else (1, 0)
        entity = self.entity(cid)

        report = f"    api_send_switch_state({ident}_key, {ident}_state);\n" if ctx.api_enabled else ""
        definitions = [
            f"void {ident}_turn_on() {{\n"
            f"    {ident}_state = true;\n"
            f"    gpio_set_level({pin.gpio}, {on_level});\n"
            f'    printf("%s: ON\\n", {c_string(name)});\n'
            f"{report}"
            f"}}\n"
            f"\n"
            f"void {ident}_turn_off() {{\n"
            f"    {ident}_state = false;\n"
            f"    gpio_set_level({pin.gpio}, {off_level});\n"
            f'    printf("%s: OFF\\n", {c_string(name)});\n'
            f"{report}"
            f"}}\n"
            f"\n"
            f"void {ident}_toggle() {{\n"
            f"    if ({ident}_state) {{\n"
            f"        {ident}_turn_off();\n"
            f"    }} else {{\n"
            f"        {ident}_turn_on();\n"
            f"    }}\n"
            f"}}\n"
            f"\n"
            f"bool {ident}_get_state() {{\n"
            f"    return {ident}_state;\n"
            f"}}"
        ]

        declarations = [f"bool {ident}_state = {'true' if restore_mode.initial_state else 'false'};"]
        registrations = []
        if ctx.api_enabled:
            declarations.append(f"static uint32_t {ident}_key = {entity.key};")
            registrations.append(
                f"api_register_switch({ident}_key, {c_string(name)}, {c_string(cid)}, "
                f"{c_string(entry.icon or '')});"
            )

        return ComponentCode(
            includes=['#include "driver/gpio.h"'],
            declarations=declarations,
            setup=[
                *gpio_config_block(ident, pin, output=True),
                f"gpio_set_level({pin.gpio}, {ident}_state ? {on_level} : {off_level});",
            ],
            definitions=definitions,
            api_registrations=registrations,
            entities=[entity],
        )
