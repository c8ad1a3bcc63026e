"""Component entries as declared in a device configuration.

One model per component kind.  Fields a platform requires (``pin``,
``model``, ...) are optional at this level: the platform's factory decides
what is required, so a missing pin is reported by the factory that needed
it rather than as a generic schema error.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from .pins import PinSpec


class ComponentKind(str, Enum):
    SENSOR = "sensor"
    BINARY_SENSOR = "binary_sensor"
    SWITCH = "switch"
    LIGHT = "light"


# Generation order of the kind sections.
KIND_ORDER: tuple[ComponentKind, ...] = (
    ComponentKind.SENSOR,
    ComponentKind.BINARY_SENSOR,
    ComponentKind.SWITCH,
    ComponentKind.LIGHT,
)


def _lower(v):
    return v.lower() if isinstance(v, str) else v


class ComponentConfig(BaseModel):
    """Fields shared by every component entry."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    platform: str
    id: str | None = None
    name: str | None = None


# ---------------------------------------------------------------------------
# Sensors
# ---------------------------------------------------------------------------

class DHTModel(str, Enum):
    DHT11 = "dht11"
    DHT22 = "dht22"
    AM2302 = "am2302"


class FilterType(str, Enum):
    OFFSET = "offset"
    MULTIPLY = "multiply"
    CALIBRATE_LINEAR = "calibrate_linear"
    LAMBDA = "lambda"
    SLIDING_WINDOW_MOVING_AVERAGE = "sliding_window_moving_average"
    EXPONENTIAL_MOVING_AVERAGE = "exponential_moving_average"


class FilterConfig(BaseModel):
    """A sensor value filter.

    *value* is a number for offset/multiply/moving averages, a list of
    numbers for calibrate_linear, or a code string for lambda.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: FilterType
    value: float | list[float] | str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _lower_type(cls, v):
        return _lower(v)


class SensorSubConfig(BaseModel):
    """One reading of a multi-value sensor (e.g. a DHT's humidity)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str | None = None
    name: str | None = None
    filters: list[FilterConfig] = []
    device_class: str | None = None
    unit_of_measurement: str | None = None
    accuracy_decimals: int | None = None


class SensorConfig(ComponentConfig):
    pin: PinSpec | None = None
    update_interval: str | None = None
    accuracy: int | None = None
    filters: list[FilterConfig] = []

    # DHT
    model: DHTModel | None = None
    temperature: SensorSubConfig | None = None
    humidity: SensorSubConfig | None = None

    @field_validator("model", mode="before")
    @classmethod
    def _lower_model(cls, v):
        return _lower(v)


# ---------------------------------------------------------------------------
# Switches
# ---------------------------------------------------------------------------

class RestoreMode(str, Enum):
    """Switch state right after the device restarts."""

    RESTORE_DEFAULT_OFF = "restore_default_off"
    RESTORE_DEFAULT_ON = "restore_default_on"
    ALWAYS_OFF = "always_off"
    ALWAYS_ON = "always_on"
    RESTORE_INVERTED_DEFAULT_OFF = "restore_inverted_default_off"
    RESTORE_INVERTED_DEFAULT_ON = "restore_inverted_default_on"

    @property
    def initial_state(self) -> bool:
        return self in (
            RestoreMode.RESTORE_DEFAULT_ON,
            RestoreMode.ALWAYS_ON,
            RestoreMode.RESTORE_INVERTED_DEFAULT_ON,
        )


class SwitchConfig(ComponentConfig):
    pin: PinSpec | None = None
    inverted: bool | None = None
    restore_mode: RestoreMode | None = None
    icon: str | None = None

    @field_validator("restore_mode", mode="before")
    @classmethod
    def _lower_restore(cls, v):
        return _lower(v)


# ---------------------------------------------------------------------------
# Binary sensors
# ---------------------------------------------------------------------------

class BinarySensorDeviceClass(str, Enum):
    NONE = "none"
    BATTERY = "battery"
    BATTERY_CHARGING = "battery_charging"
    CARBON_MONOXIDE = "carbon_monoxide"
    COLD = "cold"
    CONNECTIVITY = "connectivity"
    DOOR = "door"
    GARAGE_DOOR = "garage_door"
    GAS = "gas"
    HEAT = "heat"
    LIGHT = "light"
    LOCK = "lock"
    MOISTURE = "moisture"
    MOTION = "motion"
    MOVING = "moving"
    OCCUPANCY = "occupancy"
    OPENING = "opening"
    PLUG = "plug"
    POWER = "power"
    PRESENCE = "presence"
    PROBLEM = "problem"
    RUNNING = "running"
    SAFETY = "safety"
    SMOKE = "smoke"
    SOUND = "sound"
    TAMPER = "tamper"
    UPDATE = "update"
    VIBRATION = "vibration"
    WINDOW = "window"


class BinarySensorFilterType(str, Enum):
    INVERT = "invert"
    DELAYED_ON = "delayed_on"
    DELAYED_OFF = "delayed_off"
    DELAYED_ON_OFF = "delayed_on_off"


class BinarySensorFilterConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: BinarySensorFilterType
    duration: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _lower_type(cls, v):
        return _lower(v)


class BinarySensorConfig(ComponentConfig):
    pin: PinSpec | None = None
    device_class: BinarySensorDeviceClass | None = None
    inverted: bool | None = None
    filters: list[BinarySensorFilterConfig] = []

    @field_validator("device_class", mode="before")
    @classmethod
    def _lower_class(cls, v):
        return _lower(v)


# ---------------------------------------------------------------------------
# Lights
# ---------------------------------------------------------------------------

class LightEffectType(str, Enum):
    RAINBOW = "rainbow"
    COLOR_WIPE = "color_wipe"
    SCAN = "scan"
    TWINKLE = "twinkle"
    RANDOM_TWINKLE = "random_twinkle"
    FIREWORKS = "fireworks"
    FLICKER = "flicker"
    ADDRESSABLE_RAINBOW = "addressable_rainbow"
    STROBE = "strobe"
    PULSE = "pulse"
    BREATHE = "breathe"


class LightEffectConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    type: LightEffectType | None = None


class LightConfig(ComponentConfig):
    pin: PinSpec | None = None
    red_pin: PinSpec | None = None
    green_pin: PinSpec | None = None
    blue_pin: PinSpec | None = None
    white_pin: PinSpec | None = None
    effects: list[LightEffectConfig] = []

