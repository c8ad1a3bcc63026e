"""Static hardware description of a target board."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class ChipFamily(str, Enum):
    ESP32 = "ESP32"
    ESP32_C3 = "ESP32-C3"
    ESP32_C6 = "ESP32-C6"
    ESP32_H2 = "ESP32-H2"
    ESP32_P4 = "ESP32-P4"
    ESP32_S3 = "ESP32-S3"


class Architecture(str, Enum):
    RISCV = "riscv"
    XTENSA = "xtensa"


class BoardCapability(str, Enum):
    WIFI = "wifi"
    BLUETOOTH = "bluetooth"
    THREAD = "thread"
    MATTER = "matter"
    ZIGBEE = "zigbee"
    ADC = "adc"
    PWM = "pwm"
    I2C = "i2c"
    SPI = "spi"
    UART = "uart"


class BoardDefinition(BaseModel):
    """What a board physically supports.

    Pins are addressed ``0..max_pin``.  *reserved_pins* (strapping and
    flash pins) may be used, but resolving one yields an advisory.
    *adc_channels* maps each ADC-capable pin to its ADC1 channel.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
    display_name: str
    chip_family: ChipFamily
    architecture: Architecture
    capabilities: frozenset[BoardCapability]
    max_pin: int
    input_only_pins: frozenset[int] = frozenset()
    reserved_pins: frozenset[int] = frozenset()
    adc_channels: dict[int, int] = {}
    ledc_channels: int = 6

    @model_validator(mode="after")
    def _pins_in_range(self):
        for label, pins in (
            ("input_only_pins", self.input_only_pins),
            ("reserved_pins", self.reserved_pins),
            ("adc_channels", self.adc_channels.keys()),
        ):
            bad = sorted(p for p in pins if not 0 <= p <= self.max_pin)
            if bad:
                raise ValueError(f"{label} outside 0..{self.max_pin}: {bad}")
        return self

    @property
    def adc_pins(self) -> frozenset[int]:
        return frozenset(self.adc_channels)

    def adc_channel(self, pin: int) -> int | None:
        return self.adc_channels.get(pin)

    def supports(self, capability: BoardCapability) -> bool:
        return capability in self.capabilities
