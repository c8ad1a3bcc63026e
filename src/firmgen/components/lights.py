"""Light platforms: ``binary`` (one output pin) and ``rgb`` (LEDC PWM)."""

from __future__ import annotations

from firmgen.framework import EmitContext, PinValidator, c_identifier, c_string
from firmgen.model import (
    BoardDefinition,
    ComponentCode,
    ComponentKind,
    LightConfig,
    PinRequirement,
    ResolvedPin,
)

from ._base import BaseFactory, gpio_config_block


class BinaryLightFactory(BaseFactory):
    kind = ComponentKind.LIGHT
    platform = "binary"
    required_properties = ("pin",)
    optional_properties = ("id", "name")
    id_prefix = "binary_light"

    def validate(self, entry: LightConfig, board: BoardDefinition) -> list[ResolvedPin]:
        self.check_properties(entry)
        pin = self.require(entry, "pin")
        return [PinValidator(board).resolve(pin, PinRequirement.OUTPUT)]

    def generate_code(self, entry: LightConfig, ctx: EmitContext) -> ComponentCode:
        pin = ctx.resolve(entry.pin, PinRequirement.OUTPUT)
        cid = self.component_id(entry)
        ident = c_identifier(cid)
        name = self.display_name(entry, cid)
        on_level, off_level = (0, 1) if pin.inverted else (1, 0)
        entity = self.entity(cid)

        declarations = [f"bool {ident}_state = false;"]
        registrations = []
        report = ""
        if ctx.api_enabled:
            declarations.append(f"static uint32_t {ident}_key = {entity.key};")
            registrations.append(
                f"api_register_light({ident}_key, {c_string(name)}, {c_string(cid)}, false, false);"
            )
            report = (
                f"    api_send_light_state({ident}_key, {ident}_state, -1.0f, -1.0f, -1.0f, -1.0f);\n"
            )

        definitions = [
            f"void {ident}_set_state(bool on) {{\n"
            f"    {ident}_state = on;\n"
            f"    gpio_set_level({pin.gpio}, on ? {on_level} : {off_level});\n"
            f'    printf("%s: %s\\n", {c_string(name)}, on ? "ON" : "OFF");\n'
            f"{report}"
            f"}}\n"
            f"\n"
            f"void {ident}_turn_on() {{ {ident}_set_state(true); }}\n"
            f"void {ident}_turn_off() {{ {ident}_set_state(false); }}\n"
            f"void {ident}_toggle() {{ {ident}_set_state(!{ident}_state); }}\n"
            f"bool {ident}_get_state() {{ return {ident}_state; }}"
        ]

        return ComponentCode(
            includes=['#include "driver/gpio.h"'],
            declarations=declarations,
            setup=[
                *gpio_config_block(ident, pin, output=True),
                f"gpio_set_level({pin.gpio}, {off_level});",
            ],
            definitions=definitions,
            api_registrations=registrations,
            entities=[entity],
        )


class RGBLightFactory(BaseFactory):
    """Three (or four, with white) LEDC channels sharing one 8-bit timer."""

    kind = ComponentKind.LIGHT
    platform = "rgb"
    required_properties = ("red_pin", "green_pin", "blue_pin")
    optional_properties = ("id", "name", "white_pin", "effects")
    id_prefix = "rgb_light"
    id_pin_property = "red_pin"

    _COLOURS = ("red", "green", "blue", "white")

    def _pins(self, entry: LightConfig) -> list[tuple[str, object]]:
        pins = [(c, self.require(entry, f"{c}_pin")) for c in self._COLOURS[:3]]
        if entry.white_pin is not None:
            pins.append(("white", entry.white_pin))
        return pins

    def validate(self, entry: LightConfig, board: BoardDefinition) -> list[ResolvedPin]:
        self.check_properties(entry)
        validator = PinValidator(board)
        return [validator.resolve(pin, PinRequirement.PWM) for _, pin in self._pins(entry)]

    def generate_code(self, entry: LightConfig, ctx: EmitContext) -> ComponentCode:
        cid = self.component_id(entry)
        ident = c_identifier(cid)
        name = self.display_name(entry, cid)
        entity = self.entity(cid)

        channels: list[tuple[str, ResolvedPin, int]] = []
        for colour, spec in self._pins(entry):
            pin = ctx.resolve(spec, PinRequirement.PWM)
            channels.append((colour, pin, ctx.allocate_pwm_channel(cid)))
        has_white = len(channels) == 4

        declarations = [f"uint8_t {ident}_{colour} = 0;" for colour, _, _ in channels]
        declarations.append(f"bool {ident}_state = false;")
        if entry.effects:
            names = ", ".join(c_string(e.name) for e in entry.effects)
            declarations.append(f"const char *{ident}_effects[] = {{{names}}};")

        setup = [
            f"ledc_timer_config_t {ident}_timer = {{",
            "    .speed_mode = LEDC_LOW_SPEED_MODE,",
            "    .duty_resolution = LEDC_TIMER_8_BIT,",
            "    .timer_num = LEDC_TIMER_0,",
            "    .freq_hz = 1000,",
            "    .clk_cfg = LEDC_AUTO_CLK",
            "};",
            f"ledc_timer_config(&{ident}_timer);",
        ]
        for colour, pin, channel in channels:
            setup += [
                f"ledc_channel_config_t {ident}_{colour}_channel = {{",
                f"    .gpio_num = {pin.number},",
                "    .speed_mode = LEDC_LOW_SPEED_MODE,",
                f"    .channel = LEDC_CHANNEL_{channel},",
                "    .intr_type = LEDC_INTR_DISABLE,",
                "    .timer_sel = LEDC_TIMER_0,",
                "    .duty = 0,",
                "    .hpoint = 0",
                "};",
                f"ledc_channel_config(&{ident}_{colour}_channel);",
            ]

        params = ", ".join(f"uint8_t {colour}" for colour, _, _ in channels)
        lit = " || ".join(f"{colour} > 0" for colour, _, _ in channels)
        body = []
        for colour, _, channel in channels:
            body += [
                f"    {ident}_{colour} = {colour};",
                f"    ledc_set_duty(LEDC_LOW_SPEED_MODE, LEDC_CHANNEL_{channel}, {colour});",
                f"    ledc_update_duty(LEDC_LOW_SPEED_MODE, LEDC_CHANNEL_{channel});",
            ]
        body.append(f"    {ident}_state = ({lit});")
        fmt = ", ".join("%d" for _ in channels)
        args = ", ".join(colour for colour, _, _ in channels)
        body.append(f'    printf("%s: RGB{"W" if has_white else ""}({fmt})\\n", {c_string(name)}, {args});')

        registrations = []
        if ctx.api_enabled:
            declarations.append(f"static uint32_t {ident}_key = {entity.key};")
            registrations.append(
                f"api_register_light({ident}_key, {c_string(name)}, {c_string(cid)}, true, true);"
            )
            body.append(
                f"    api_send_light_state({ident}_key, {ident}_state, -1.0f, "
                f"red / 255.0f, green / 255.0f, blue / 255.0f);"
            )

        full = ", ".join("255" for _ in channels)
        off = ", ".join("0" for _ in channels)
        definitions = [
            f"void {ident}_set_rgb({params}) {{\n"
            + "\n".join(body)
            + "\n}\n"
            f"\n"
            f"void {ident}_turn_on() {{\n"
            f"    {ident}_set_rgb({full});\n"
            f"}}\n"
            f"\n"
            f"void {ident}_turn_off() {{\n"
            f"    {ident}_set_rgb({off});\n"
            f"}}"
        ]

        return ComponentCode(
            includes=['#include "driver/ledc.h"'],
            declarations=declarations,
            setup=setup,
            definitions=definitions,
            api_registrations=registrations,
            entities=[entity],
        )
