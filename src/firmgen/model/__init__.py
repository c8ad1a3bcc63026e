"""firmgen data model: configuration entries, boards, and generated-code IR."""

from .board import (
    Architecture,
    BoardCapability,
    BoardDefinition,
    ChipFamily,
)
from .code import (
    PHASES,
    Advisory,
    CompilationUnit,
    ComponentCode,
    Entity,
)
from .components import (
    KIND_ORDER,
    BinarySensorConfig,
    BinarySensorDeviceClass,
    BinarySensorFilterConfig,
    BinarySensorFilterType,
    ComponentConfig,
    ComponentKind,
    DHTModel,
    FilterConfig,
    FilterType,
    LightConfig,
    LightEffectConfig,
    LightEffectType,
    RestoreMode,
    SensorConfig,
    SensorSubConfig,
    SwitchConfig,
)
from .configuration import (
    APIConfig,
    AccessPointConfig,
    Configuration,
    DeviceConfig,
    ESP32Config,
    EncryptionConfig,
    FrameworkConfig,
    FrameworkType,
    LogLevel,
    LoggerConfig,
    ManualIPConfig,
    OTAConfig,
    WiFiConfig,
)
from .matter import (
    CommissioningConfig,
    MatterCluster,
    MatterConfig,
    MatterDeviceType,
    MatterNetworkConfig,
    MatterTransport,
    MDNSConfig,
    ThreadConfig,
)
from .pins import (
    PinMode,
    PinRequirement,
    PinSpec,
    ResolvedPin,
    normalize_pin_number,
)

__all__ = [
    # board
    "Architecture",
    "BoardCapability",
    "BoardDefinition",
    "ChipFamily",
    # code
    "PHASES",
    "Advisory",
    "CompilationUnit",
    "ComponentCode",
    "Entity",
    # components
    "KIND_ORDER",
    "BinarySensorConfig",
    "BinarySensorDeviceClass",
    "BinarySensorFilterConfig",
    "BinarySensorFilterType",
    "ComponentConfig",
    "ComponentKind",
    "DHTModel",
    "FilterConfig",
    "FilterType",
    "LightConfig",
    "LightEffectConfig",
    "LightEffectType",
    "RestoreMode",
    "SensorConfig",
    "SensorSubConfig",
    "SwitchConfig",
    # configuration
    "APIConfig",
    "AccessPointConfig",
    "Configuration",
    "DeviceConfig",
    "ESP32Config",
    "EncryptionConfig",
    "FrameworkConfig",
    "FrameworkType",
    "LogLevel",
    "LoggerConfig",
    "ManualIPConfig",
    "OTAConfig",
    "WiFiConfig",
    # matter
    "CommissioningConfig",
    "MatterCluster",
    "MatterConfig",
    "MatterDeviceType",
    "MatterNetworkConfig",
    "MatterTransport",
    "MDNSConfig",
    "ThreadConfig",
    # pins
    "PinMode",
    "PinRequirement",
    "PinSpec",
    "ResolvedPin",
    "normalize_pin_number",
]
