"""firmgen framework: validation and code assembly.

Users import everything from this single flat namespace::

    from firmgen.framework import generate_code, GenerationContext
    unit = generate_code(config, GenerationContext())
"""

from firmgen.errors import (
    ConfigurationError,
    ConfigurationLoadError,
    DuplicateComponentIdError,
    DuplicateFactoryError,
    IncompatibleConfigurationError,
    InvalidPinFormatError,
    InvalidPropertyValueError,
    MissingRequiredPropertyError,
    PinConflictError,
    PinError,
    PinOutOfRangeError,
    PinRoleMismatchError,
    UnknownPlatformError,
    UnsupportedBoardError,
)

from ._boards import (
    BUILTIN_BOARDS,
    BoardRegistry,
    default_boards,
)

from ._pins import (
    PinLedger,
    PinValidator,
)

from ._keys import component_key

from ._protocols import ComponentFactory

from ._registry import (
    FactoryInfo,
    FactoryRegistry,
)

from ._context import (
    EmitContext,
    GenerationContext,
)

from ._durations import parse_duration_ms

from ._cpp import (
    c_identifier,
    c_string,
)

from ._matter import (
    check_matter,
    matter_code,
)

from ._generator import (
    CodeGenerator,
    generate_code,
    validate_configuration,
)

__all__ = [
    # Errors
    "ConfigurationError",
    "ConfigurationLoadError",
    "DuplicateComponentIdError",
    "DuplicateFactoryError",
    "IncompatibleConfigurationError",
    "InvalidPinFormatError",
    "InvalidPropertyValueError",
    "MissingRequiredPropertyError",
    "PinConflictError",
    "PinError",
    "PinOutOfRangeError",
    "PinRoleMismatchError",
    "UnknownPlatformError",
    "UnsupportedBoardError",
    # Boards
    "BUILTIN_BOARDS",
    "BoardRegistry",
    "default_boards",
    # Pins
    "PinLedger",
    "PinValidator",
    # Keys
    "component_key",
    # Factories
    "ComponentFactory",
    "FactoryInfo",
    "FactoryRegistry",
    # Contexts
    "EmitContext",
    "GenerationContext",
    # Helpers
    "parse_duration_ms",
    "c_identifier",
    "c_string",
    # Matter
    "check_matter",
    "matter_code",
    # Generation
    "CodeGenerator",
    "generate_code",
    "validate_configuration",
]
