"""The ``matter:`` section: device type, commissioning and network transport.

Field ranges that pydantic can express (16-bit ids, the 12-bit
discriminator) are checked here.  Rules that depend on the board or on
other sections are checked by the generator.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MatterCluster(str, Enum):
    IDENTIFY = "identify"
    GROUPS = "groups"
    SCENES = "scenes"
    DESCRIPTOR = "descriptor"
    ON_OFF = "on_off"
    LEVEL_CONTROL = "level_control"
    COLOR_CONTROL = "color_control"
    SWITCH = "switch"
    TEMPERATURE_MEASUREMENT = "temperature_measurement"
    RELATIVE_HUMIDITY_MEASUREMENT = "relative_humidity_measurement"
    PRESSURE_MEASUREMENT = "pressure_measurement"
    FLOW_MEASUREMENT = "flow_measurement"
    ILLUMINANCE_MEASUREMENT = "illuminance_measurement"
    OCCUPANCY_SENSING = "occupancy_sensing"
    BOOLEAN_STATE = "boolean_state"
    AIR_QUALITY = "air_quality"
    DOOR_LOCK = "door_lock"
    THERMOSTAT = "thermostat"
    FAN_CONTROL = "fan_control"
    WINDOW_COVERING = "window_covering"


class MatterDeviceType(str, Enum):
    ON_OFF_LIGHT = "on_off_light"
    DIMMABLE_LIGHT = "dimmable_light"
    COLOR_TEMPERATURE_LIGHT = "color_temperature_light"
    EXTENDED_COLOR_LIGHT = "extended_color_light"
    ON_OFF_SWITCH = "on_off_switch"
    DIMMER_SWITCH = "dimmer_switch"
    COLOR_DIMMER_SWITCH = "color_dimmer_switch"
    GENERIC_SWITCH = "generic_switch"
    TEMPERATURE_SENSOR = "temperature_sensor"
    HUMIDITY_SENSOR = "humidity_sensor"
    OCCUPANCY_SENSOR = "occupancy_sensor"
    CONTACT_SENSOR = "contact_sensor"
    AIR_QUALITY_SENSOR = "air_quality_sensor"
    PRESSURE_SENSOR = "pressure_sensor"
    FLOW_SENSOR = "flow_sensor"
    LIGHT_SENSOR = "light_sensor"
    SMART_PLUG = "smart_plug"
    SMART_OUTLET = "smart_outlet"
    DOOR_LOCK = "door_lock"
    THERMOSTAT = "thermostat"
    FAN = "fan"
    AIR_PURIFIER = "air_purifier"
    WINDOW_COVERING = "window_covering"
    BRIDGED_NODE = "bridged_node"
    ROOT_NODE = "root_node"

    @property
    def device_type_id(self) -> int:
        return _DEVICE_TYPE_IDS[self]

    @property
    def required_clusters(self) -> tuple[MatterCluster, ...]:
        return _REQUIRED_CLUSTERS[self]


_D = MatterDeviceType
_C = MatterCluster

_DEVICE_TYPE_IDS: dict[MatterDeviceType, int] = {
    _D.ON_OFF_LIGHT: 0x0100,
    _D.DIMMABLE_LIGHT: 0x0101,
    _D.COLOR_TEMPERATURE_LIGHT: 0x010C,
    _D.EXTENDED_COLOR_LIGHT: 0x010D,
    _D.ON_OFF_SWITCH: 0x0103,
    _D.DIMMER_SWITCH: 0x0104,
    _D.COLOR_DIMMER_SWITCH: 0x0105,
    _D.GENERIC_SWITCH: 0x000F,
    _D.TEMPERATURE_SENSOR: 0x0302,
    _D.HUMIDITY_SENSOR: 0x0307,
    _D.OCCUPANCY_SENSOR: 0x0107,
    _D.CONTACT_SENSOR: 0x0015,
    _D.AIR_QUALITY_SENSOR: 0x002C,
    _D.PRESSURE_SENSOR: 0x0305,
    _D.FLOW_SENSOR: 0x0306,
    _D.LIGHT_SENSOR: 0x0106,
    _D.SMART_PLUG: 0x010A,
    _D.SMART_OUTLET: 0x010A,
    _D.DOOR_LOCK: 0x000A,
    _D.THERMOSTAT: 0x0301,
    _D.FAN: 0x002B,
    _D.AIR_PURIFIER: 0x002D,
    _D.WINDOW_COVERING: 0x0202,
    _D.BRIDGED_NODE: 0x0013,
    _D.ROOT_NODE: 0x0016,
}

_LIGHT = (_C.IDENTIFY, _C.GROUPS, _C.SCENES, _C.ON_OFF)

_REQUIRED_CLUSTERS: dict[MatterDeviceType, tuple[MatterCluster, ...]] = {
    _D.ON_OFF_LIGHT: _LIGHT,
    _D.DIMMABLE_LIGHT: (*_LIGHT, _C.LEVEL_CONTROL),
    _D.COLOR_TEMPERATURE_LIGHT: (*_LIGHT, _C.LEVEL_CONTROL, _C.COLOR_CONTROL),
    _D.EXTENDED_COLOR_LIGHT: (*_LIGHT, _C.LEVEL_CONTROL, _C.COLOR_CONTROL),
    _D.ON_OFF_SWITCH: (_C.IDENTIFY, _C.SWITCH),
    _D.DIMMER_SWITCH: (_C.IDENTIFY, _C.SWITCH, _C.LEVEL_CONTROL),
    _D.COLOR_DIMMER_SWITCH: (_C.IDENTIFY, _C.SWITCH, _C.LEVEL_CONTROL, _C.COLOR_CONTROL),
    _D.GENERIC_SWITCH: (_C.IDENTIFY, _C.SWITCH),
    _D.TEMPERATURE_SENSOR: (_C.IDENTIFY, _C.TEMPERATURE_MEASUREMENT),
    _D.HUMIDITY_SENSOR: (_C.IDENTIFY, _C.RELATIVE_HUMIDITY_MEASUREMENT),
    _D.OCCUPANCY_SENSOR: (_C.IDENTIFY, _C.OCCUPANCY_SENSING),
    _D.CONTACT_SENSOR: (_C.IDENTIFY, _C.BOOLEAN_STATE),
    _D.AIR_QUALITY_SENSOR: (_C.IDENTIFY, _C.AIR_QUALITY),
    _D.PRESSURE_SENSOR: (_C.IDENTIFY, _C.PRESSURE_MEASUREMENT),
    _D.FLOW_SENSOR: (_C.IDENTIFY, _C.FLOW_MEASUREMENT),
    _D.LIGHT_SENSOR: (_C.IDENTIFY, _C.ILLUMINANCE_MEASUREMENT),
    _D.SMART_PLUG: _LIGHT,
    _D.SMART_OUTLET: _LIGHT,
    _D.DOOR_LOCK: (_C.IDENTIFY, _C.DOOR_LOCK),
    _D.THERMOSTAT: (_C.IDENTIFY, _C.THERMOSTAT),
    _D.FAN: (_C.IDENTIFY, _C.FAN_CONTROL),
    _D.AIR_PURIFIER: (_C.IDENTIFY, _C.FAN_CONTROL, _C.AIR_QUALITY),
    _D.WINDOW_COVERING: (_C.IDENTIFY, _C.WINDOW_COVERING),
    _D.BRIDGED_NODE: (_C.IDENTIFY, _C.DESCRIPTOR),
    _D.ROOT_NODE: (_C.IDENTIFY, _C.DESCRIPTOR),
}


class MatterTransport(str, Enum):
    WIFI = "wifi"
    THREAD = "thread"
    ETHERNET = "ethernet"


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class CommissioningConfig(_Section):
    discriminator: int = Field(default=3840, ge=0, le=4095)
    passcode: int = 20202021
    manual_pairing_code: str | None = None
    qr_code_payload: str | None = None


class ThreadConfig(_Section):
    enabled: bool = True
    dataset: str | None = None
    network_name: str | None = None
    ext_pan_id: str | None = None
    network_key: str | None = None
    channel: int | None = None
    pan_id: int | None = None


class MDNSConfig(_Section):
    enabled: bool = True
    hostname: str | None = None
    services: list[str] = []


class MatterNetworkConfig(_Section):
    transport: MatterTransport = MatterTransport.WIFI
    ipv6_enabled: bool = True
    mdns: MDNSConfig | None = None

    @field_validator("transport", mode="before")
    @classmethod
    def _lower_transport(cls, v):
        return v.lower() if isinstance(v, str) else v


class MatterConfig(_Section):
    enabled: bool = True
    device_type: MatterDeviceType
    vendor_id: int = Field(default=0xFFF1, ge=0, le=0xFFFF)
    product_id: int = Field(default=0x8000, ge=0, le=0xFFFF)
    commissioning: CommissioningConfig | None = None
    thread: ThreadConfig | None = None
    network: MatterNetworkConfig | None = None

    @field_validator("device_type", mode="before")
    @classmethod
    def _lower_device_type(cls, v):
        return v.lower() if isinstance(v, str) else v

    @property
    def thread_enabled(self) -> bool:
        return self.thread is not None and self.thread.enabled

    @property
    def transport(self) -> MatterTransport:
        """The configured transport; Thread when only Thread is set up."""
        if self.network is not None:
            return self.network.transport
        if self.thread_enabled:
            return MatterTransport.THREAD
        return MatterTransport.WIFI
