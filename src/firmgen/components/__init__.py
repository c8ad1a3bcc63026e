"""Built-in component factories.

Public API::

    from firmgen.components import default_registry
    factory = default_registry().dispatch(ComponentKind.SWITCH, "gpio")
"""

from functools import lru_cache

from firmgen.framework import FactoryRegistry

from .binary_sensors import GPIOBinarySensorFactory
from .lights import BinaryLightFactory, RGBLightFactory
from .sensors import ADCSensorFactory, DHTSensorFactory
from .switches import GPIOSwitchFactory


def builtin_factories() -> list:
    """A fresh instance of every built-in factory."""
    return [
        DHTSensorFactory(),
        ADCSensorFactory(),
        GPIOBinarySensorFactory(),
        GPIOSwitchFactory(),
        BinaryLightFactory(),
        RGBLightFactory(),
    ]


@lru_cache(maxsize=None)
def default_registry() -> FactoryRegistry:
    """The frozen registry of built-in factories, built on first use."""
    return FactoryRegistry(builtin_factories()).freeze()


__all__ = [
    "ADCSensorFactory",
    "BinaryLightFactory",
    "DHTSensorFactory",
    "GPIOBinarySensorFactory",
    "GPIOSwitchFactory",
    "RGBLightFactory",
    "builtin_factories",
    "default_registry",
]
