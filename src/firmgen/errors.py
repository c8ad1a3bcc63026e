"""Exceptions raised while validating a configuration or generating code.

Every build-time problem is a :class:`ConfigurationError`.  Each subclass
keeps the values it was built from as attributes and formats its message
up front, so callers can either inspect the fields or just print the
exception.  ``kind`` names the error category for display.
"""

from __future__ import annotations


class ConfigurationError(Exception):
    """Base class for errors that abort a build."""

    kind = "ConfigurationError"


class MissingRequiredPropertyError(ConfigurationError):
    kind = "MissingRequiredProperty"

    def __init__(self, component: str, property: str):
        self.component = component
        self.property = property
        super().__init__(
            f"Missing required property '{property}' in {component} component"
        )


class InvalidPropertyValueError(ConfigurationError):
    kind = "InvalidPropertyValue"

    def __init__(self, component: str, property: str, value: object, reason: str):
        self.component = component
        self.property = property
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid value '{value}' for property '{property}' "
            f"in {component} component: {reason}"
        )


class IncompatibleConfigurationError(ConfigurationError):
    kind = "IncompatibleConfiguration"

    def __init__(self, component: str, reason: str):
        self.component = component
        self.reason = reason
        super().__init__(f"Incompatible configuration for {component} component: {reason}")


class UnsupportedBoardError(ConfigurationError):
    kind = "UnsupportedBoard"

    def __init__(self, board_id: str, known: list[str] | None = None):
        self.board_id = board_id
        msg = f"Unsupported board '{board_id}'"
        if known:
            msg += f" (supported: {', '.join(known)})"
        super().__init__(msg)


class UnknownPlatformError(ConfigurationError):
    kind = "UnknownPlatform"

    def __init__(self, kind: object, platform: str):
        # ``kind`` is a ComponentKind; kept untyped to avoid a model import
        self.component_kind = kind
        self.platform = platform
        label = getattr(kind, "value", kind)
        super().__init__(f"Unknown {label} platform '{platform}'")


class DuplicateComponentIdError(ConfigurationError):
    kind = "DuplicateComponentId"

    def __init__(self, component_id: str, other: str | None = None):
        self.component_id = component_id
        self.other = other
        if other is None:
            msg = f"Component id '{component_id}' is used more than once"
        else:
            msg = (
                f"Component id '{component_id}' clashes with '{other}': "
                f"both name the same C++ symbol"
            )
        super().__init__(msg)


# ---------------------------------------------------------------------------
# Pin errors
# ---------------------------------------------------------------------------

class PinError(ConfigurationError):
    """A pin could not be resolved against the target board."""

    kind = "PinError"


class InvalidPinFormatError(PinError):
    kind = "InvalidPinFormat"

    def __init__(self, raw: object):
        self.raw = raw
        super().__init__(
            f"Invalid pin format: '{raw}'. Expected 'GPIO<number>' or an integer."
        )


class PinOutOfRangeError(PinError):
    kind = "PinOutOfRange"

    def __init__(self, pin: int, max_pin: int):
        self.pin = pin
        self.max_pin = max_pin
        super().__init__(f"GPIO{pin} is out of range for this board (0..{max_pin})")


class PinRoleMismatchError(PinError):
    kind = "PinRoleMismatch"

    def __init__(self, pin: int, requirement: object, detail: str = ""):
        self.pin = pin
        self.requirement = requirement
        label = getattr(requirement, "value", requirement)
        msg = f"GPIO{pin} cannot be used as {label}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class PinConflictError(PinError):
    kind = "PinConflict"

    def __init__(self, pin: int, owner: str, other: str):
        self.pin = pin
        self.owner = owner
        self.other = other
        super().__init__(
            f"GPIO{pin} is already claimed by '{owner}' and cannot also be used by '{other}'"
        )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

class ConfigurationLoadError(ConfigurationError):
    """The configuration document could not be read or parsed."""

    kind = "ConfigurationLoad"


# ---------------------------------------------------------------------------
# Programming errors
# ---------------------------------------------------------------------------

class DuplicateFactoryError(RuntimeError):
    """A second factory was registered for an occupied (kind, platform) key."""
