"""Sensor platforms: ``dht`` and ``adc``."""

from __future__ import annotations

from firmgen.errors import IncompatibleConfigurationError
from firmgen.framework import (
    EmitContext,
    PinValidator,
    c_identifier,
    c_string,
    parse_duration_ms,
)
from firmgen.model import (
    BoardDefinition,
    ComponentCode,
    ComponentKind,
    DHTModel,
    PinRequirement,
    ResolvedPin,
    SensorConfig,
    SensorSubConfig,
)

from ._base import BaseFactory
from ._filters import check_filters, render_filters

DEFAULT_UPDATE_INTERVAL = "60s"

_DHT_TYPE = {
    DHTModel.DHT11: "DHT11",
    DHTModel.DHT22: "DHT22",
    DHTModel.AM2302: "DHT22",
}


def _update_interval_ms(platform: str, entry: SensorConfig) -> int:
    return parse_duration_ms(
        entry.update_interval or DEFAULT_UPDATE_INTERVAL,
        component=platform,
        property="update_interval",
    )


class DHTSensorFactory(BaseFactory):
    """Temperature/humidity sensor on one data pin."""

    kind = ComponentKind.SENSOR
    platform = "dht"
    required_properties = ("pin", "model")
    optional_properties = ("id", "name", "update_interval", "temperature", "humidity")
    id_prefix = "dht"

    # reading -> (DHT method, device class, unit)
    _READINGS = {
        "temperature": ("readTemperature", "temperature", "°C"),
        "humidity": ("readHumidity", "humidity", "%"),
    }

    def validate(self, entry: SensorConfig, board: BoardDefinition) -> list[ResolvedPin]:
        self.check_properties(entry)
        pin = self.require(entry, "pin")
        self.require(entry, "model")
        resolved = PinValidator(board).resolve(pin, PinRequirement.INPUT)
        _update_interval_ms(self.platform, entry)
        readings = self._sub_readings(entry)
        if not readings:
            raise IncompatibleConfigurationError(
                self.platform, "at least one of 'temperature' or 'humidity' must be configured"
            )
        for _, sub in readings:
            check_filters(self.platform, sub.filters)
        return [resolved]

    def _sub_readings(self, entry: SensorConfig) -> list[tuple[str, SensorSubConfig]]:
        return [
            (reading, sub)
            for reading, sub in (("temperature", entry.temperature), ("humidity", entry.humidity))
            if sub is not None
        ]

    def _reading_id(self, entry: SensorConfig, reading: str, sub: SensorSubConfig) -> str:
        return sub.id or f"{self.component_id(entry)}_{reading}"

    def entity_ids(self, entry: SensorConfig) -> list[str]:
        ids = [self.component_id(entry)]
        ids.extend(self._reading_id(entry, r, s) for r, s in self._sub_readings(entry))
        return ids

    def generate_code(self, entry: SensorConfig, ctx: EmitContext) -> ComponentCode:
        pin = ctx.resolve(entry.pin, PinRequirement.INPUT)
        cid = self.component_id(entry)
        ident = c_identifier(cid)
        interval = _update_interval_ms(self.platform, entry)

        code = ComponentCode(
            includes=['#include "DHT.h"'],
            declarations=[
                f"DHT {ident}({pin.number}, {_DHT_TYPE[entry.model]});",
                f"unsigned long {ident}_last_update = 0;",
                f"const unsigned long {ident}_update_interval = {interval};",
            ],
            setup=[f"{ident}.begin();"],
        )

        body: list[str] = []
        for reading, sub in self._sub_readings(entry):
            sid = self._reading_id(entry, reading, sub)
            sident = c_identifier(sid)
            method, device_class, unit = self._READINGS[reading]
            device_class = sub.device_class or device_class
            unit = sub.unit_of_measurement or unit
            decimals = sub.accuracy_decimals if sub.accuracy_decimals is not None else 2
            entity = self.entity(sid)
            code.entities.append(entity)

            decls, filters = render_filters(self.platform, sident, f"{sident}_value", sub.filters)
            code.declarations.extend(decls)

            body.append(f"float {sident}_value = {ident}.{method}();")
            body.append(f"if (!isnan({sident}_value)) {{")
            body.extend(f"    {s}" for s in filters)
            if ctx.api_enabled:
                body.append(f"    {sident}_report_state({sident}_value);")
            fmt = _printf_format(f"{sub.name or sid}: ", f"%.{decimals}f", f"{unit}\n")
            body.append(f"    printf({fmt}, {sident}_value);")
            if ctx.api_enabled:
                body += [
                    "} else {",
                    f"    api_send_sensor_state({sident}_key, 0.0f, true);",
                ]
            body.append("}")

            if ctx.api_enabled:
                code.definitions.append(_sensor_api_block(sident, entity.key))
                code.api_registrations.append(
                    f"api_register_sensor({sident}_key, {c_string(sub.name or sid)}, "
                    f"{c_string(sid)}, {c_string(device_class)}, {c_string(unit)});"
                )

        code.loop.append(_every(ident, body))
        return code


class ADCSensorFactory(BaseFactory):
    """Voltage reading from an ADC1 channel."""

    kind = ComponentKind.SENSOR
    platform = "adc"
    required_properties = ("pin",)
    optional_properties = ("id", "name", "update_interval", "accuracy", "filters")
    id_prefix = "adc_sensor"

    def validate(self, entry: SensorConfig, board: BoardDefinition) -> list[ResolvedPin]:
        self.check_properties(entry)
        pin = self.require(entry, "pin")
        resolved = PinValidator(board).resolve(pin, PinRequirement.ADC)
        _update_interval_ms(self.platform, entry)
        check_filters(self.platform, entry.filters)
        return [resolved]

    def generate_code(self, entry: SensorConfig, ctx: EmitContext) -> ComponentCode:
        pin = ctx.resolve(entry.pin, PinRequirement.ADC)
        cid = self.component_id(entry)
        ident = c_identifier(cid)
        channel = f"ADC1_CHANNEL_{pin.adc_channel}"
        decimals = entry.accuracy if entry.accuracy is not None else 3
        entity = self.entity(cid)

        decls, filters = render_filters(self.platform, ident, f"{ident}_voltage", entry.filters)
        body = [
            f"int {ident}_raw = adc1_get_raw({channel});",
            f"float {ident}_voltage = {ident}_raw * (3.3f / 4095.0f);",
            *filters,
        ]
        if ctx.api_enabled:
            body.append(f"{ident}_report_state({ident}_voltage);")
        fmt = _printf_format(f"{entry.name or cid}: ", f"%.{decimals}fV (raw: %d)", "\n")
        body.append(f"printf({fmt}, {ident}_voltage, {ident}_raw);")

        code = ComponentCode(
            includes=['#include "driver/adc.h"'],
            declarations=[
                f"unsigned long {ident}_last_update = 0;",
                f"const unsigned long {ident}_update_interval = "
                f"{_update_interval_ms(self.platform, entry)};",
                *decls,
            ],
            setup=[
                "adc1_config_width(ADC_WIDTH_BIT_12);",
                f"adc1_config_channel_atten({channel}, ADC_ATTEN_DB_11);",
            ],
            loop=[_every(ident, body)],
            entities=[entity],
        )
        if ctx.api_enabled:
            code.definitions.append(_sensor_api_block(ident, entity.key))
            code.api_registrations.append(
                f"api_register_sensor({ident}_key, {c_string(entry.name or cid)}, "
                f'{c_string(cid)}, "voltage", "V");'
            )
        return code


def _every(ident: str, body: list[str]) -> str:
    """Wrap *body* in the ``<ident>_update_interval`` throttle."""
    inner = "\n".join(f"    {line}" for line in body)
    return (
        f"if (millis() - {ident}_last_update > {ident}_update_interval) {{\n"
        f"{inner}\n"
        f"    {ident}_last_update = millis();\n"
        f"}}"
    )


def _sensor_api_block(ident: str, key: int) -> str:
    return (
        f"static uint32_t {ident}_key = {key};\n"
        f"static float {ident}_state = 0.0f;\n"
        f"\n"
        f"void {ident}_report_state(float value) {{\n"
        f"    {ident}_state = value;\n"
        f"    api_send_sensor_state({ident}_key, value, false);\n"
        f"}}"
    )


def _printf_format(label: str, conversions: str, suffix: str) -> str:
    """A printf format literal; ``%`` in *label* and *suffix* is escaped."""
    return c_string(label.replace("%", "%%") + conversions + suffix.replace("%", "%%"))
