"""Top-level device configuration.

Mirrors the YAML document section by section.  Built once per build and
frozen; the generator only ever reads it.
"""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .components import (
    KIND_ORDER,
    BinarySensorConfig,
    ComponentConfig,
    ComponentKind,
    LightConfig,
    SensorConfig,
    SwitchConfig,
)
from .matter import MatterConfig


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class DeviceConfig(_Section):
    name: str = Field(pattern=r"^[a-z0-9_]+$")
    friendly_name: str | None = None
    comment: str | None = None
    area_id: str | None = None


class FrameworkType(str, Enum):
    ESP_IDF = "esp-idf"


class FrameworkConfig(_Section):
    type: FrameworkType = FrameworkType.ESP_IDF
    version: str | None = None
    source_dir: str | None = None


class ESP32Config(_Section):
    board: str
    framework: FrameworkConfig = FrameworkConfig()
    flash_size: str | None = None


class AccessPointConfig(_Section):
    ssid: str | None = None
    password: str | None = None


class ManualIPConfig(_Section):
    static_ip: str
    gateway: str
    subnet: str
    dns1: str | None = None
    dns2: str | None = None


class WiFiConfig(_Section):
    ssid: str = Field(min_length=1)
    password: str = Field(min_length=1)
    ap: AccessPointConfig | None = None
    manual_ip: ManualIPConfig | None = None
    use_address: str | None = None


class EncryptionConfig(_Section):
    key: str


class APIConfig(_Section):
    encryption: EncryptionConfig | None = None
    port: int = 6053
    password: str | None = None
    reboot_timeout: str | None = None


class OTAConfig(_Section):
    platform: str
    password: str | None = None
    id: str | None = None


class LogLevel(str, Enum):
    NONE = "NONE"
    ERROR = "ERROR"
    WARN = "WARN"
    INFO = "INFO"
    DEBUG = "DEBUG"
    VERBOSE = "VERBOSE"
    VERY_VERBOSE = "VERY_VERBOSE"


class LoggerConfig(_Section):
    level: LogLevel = LogLevel.INFO
    baud_rate: int = 115200
    tx_buffer: int | None = None

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class Configuration(BaseModel):
    """A complete device description."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    device: DeviceConfig = Field(
        validation_alias=AliasChoices("device", "esphome", "esphome_swift")
    )
    esp32: ESP32Config
    wifi: WiFiConfig | None = None
    api: APIConfig | None = None
    ota: list[OTAConfig] = []
    logger: LoggerConfig | None = None
    matter: MatterConfig | None = None
    sensor: list[SensorConfig] = []
    binary_sensor: list[BinarySensorConfig] = []
    switch_: list[SwitchConfig] = Field(default=[], alias="switch")
    light: list[LightConfig] = []

    @property
    def board(self) -> str:
        return self.esp32.board

    def entries(self, kind: ComponentKind) -> list[ComponentConfig]:
        if kind is ComponentKind.SWITCH:
            return list(self.switch_)
        return list(getattr(self, kind.value))

    def iter_entries(self):
        """Yield ``(kind, entry)`` in generation order."""
        for kind in KIND_ORDER:
            for entry in self.entries(kind):
                yield kind, entry
