"""Configuration → CompilationUnit.

The generator walks the configuration's entries section by section
(sensor, binary_sensor, switch, light) and, within a section, in
declaration order.  For each entry it dispatches to a factory, validates
the entry against the board, records the entry's pin claims and ids, asks
the factory for code and merges that code into the unit.  An enabled
``matter:`` section is checked with the other sections and its code is
merged last.

The first error stops the build; it propagates unchanged and no partial
unit is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from firmgen.errors import DuplicateComponentIdError, IncompatibleConfigurationError
from firmgen.model.board import BoardCapability, BoardDefinition
from firmgen.model.code import Advisory, CompilationUnit
from firmgen.model.components import ComponentConfig, ComponentKind
from firmgen.model.configuration import Configuration
from firmgen.model.pins import PinRequirement

from ._boards import BoardRegistry, default_boards
from ._context import EmitContext, GenerationContext
from ._cpp import c_identifier
from ._matter import check_matter, matter_code
from ._pins import PinLedger
from ._protocols import ComponentFactory
from ._registry import FactoryRegistry

logger = logging.getLogger(__name__)


@dataclass
class _BuildState:
    """Bookkeeping for one pass over the entries."""

    board: BoardDefinition
    ledger: PinLedger = field(default_factory=PinLedger)
    ids: set[str] = field(default_factory=set)
    # C identifier -> the entity id that produced it
    symbols: dict[str, str] = field(default_factory=dict)
    pwm_channels: int = 0
    advisories: list[Advisory] = field(default_factory=list)


class CodeGenerator:
    """Validates configurations and assembles their generated code."""

    def __init__(
        self,
        factories: FactoryRegistry,
        boards: BoardRegistry | None = None,
    ) -> None:
        self.factories = factories
        self.boards = boards if boards is not None else default_boards()

    # -- Public API -----------------------------------------------------------

    def validate_configuration(
        self,
        config: Configuration,
        context: GenerationContext | None = None,
    ) -> list[Advisory]:
        """Check *config* without generating code.

        Returns the advisories a build would carry; raises on the first
        error.
        """
        state = self._begin(config, context)
        for kind, entry in config.iter_entries():
            self._check_entry(kind, entry, state)
        return state.advisories

    def generate_code(
        self,
        config: Configuration,
        context: GenerationContext | None = None,
    ) -> CompilationUnit:
        context = context or GenerationContext()
        state = self._begin(config, context)
        emit = EmitContext(board=state.board, configuration=config, context=context)
        unit = CompilationUnit(board=state.board.identifier)

        count = 0
        for kind, entry in config.iter_entries():
            factory = self._check_entry(kind, entry, state)
            code = factory.generate_code(entry, emit)
            unit.merge(code)
            count += 1

        if config.matter is not None and config.matter.enabled:
            logger.info("Adding Matter %s node", config.matter.device_type.value)
            unit.merge(matter_code(config.matter))

        unit.advisories.extend(state.advisories)
        logger.info(
            "Generated %d components for %s (%d includes, %d entities, %d advisories)",
            count, unit.board, len(unit.includes), len(unit.entities), len(unit.advisories),
        )
        return unit

    # -- Internals ------------------------------------------------------------

    def _begin(self, config: Configuration, context: GenerationContext | None) -> _BuildState:
        board_id = (context.target_board if context else None) or config.board
        board = self.boards.lookup(board_id)
        logger.info("Building '%s' for %s", config.device.name, board.identifier)
        self._check_sections(config, board)
        return _BuildState(board=board)

    @staticmethod
    def _check_sections(config: Configuration, board: BoardDefinition) -> None:
        if config.wifi is not None and not board.supports(BoardCapability.WIFI):
            raise IncompatibleConfigurationError(
                "wifi", f"{board.identifier} ({board.chip_family.value}) has no WiFi radio"
            )
        if config.api is not None and config.wifi is None:
            raise IncompatibleConfigurationError("api", "the api section requires wifi")
        if config.matter is not None and config.matter.enabled:
            check_matter(config.matter, board)

    def _check_entry(
        self,
        kind: ComponentKind,
        entry: ComponentConfig,
        state: _BuildState,
    ) -> ComponentFactory:
        factory = self.factories.dispatch(kind, entry.platform)
        pins = factory.validate(entry, state.board)
        owner = factory.component_id(entry)
        logger.debug("%s/%s '%s': %d pin(s)", kind.value, entry.platform, owner, len(pins))

        for entity_id in factory.entity_ids(entry):
            if entity_id in state.ids:
                raise DuplicateComponentIdError(entity_id)
            state.ids.add(entity_id)
            symbol = c_identifier(entity_id)
            if symbol in state.symbols:
                raise DuplicateComponentIdError(entity_id, state.symbols[symbol])
            state.symbols[symbol] = entity_id

        pwm = sum(1 for pin in pins if pin.requirement is PinRequirement.PWM)
        if state.pwm_channels + pwm > state.board.ledc_channels:
            raise IncompatibleConfigurationError(
                owner,
                f"{state.board.identifier} has only {state.board.ledc_channels} "
                f"PWM channels, all in use",
            )
        state.pwm_channels += pwm

        for pin in pins:
            state.ledger.claim(pin, owner)
            if pin.reserved:
                advisory = Advisory(
                    component=owner,
                    pin=pin.number,
                    message=(
                        f"GPIO{pin.number} is a strapping/flash pin on "
                        f"{state.board.identifier}"
                    ),
                )
                logger.warning("%s: %s", owner, advisory.message)
                state.advisories.append(advisory)
        return factory


# ---------------------------------------------------------------------------
# Module-level entry points
# ---------------------------------------------------------------------------

def _default_generator(
    factories: FactoryRegistry | None,
    boards: BoardRegistry | None,
) -> CodeGenerator:
    if factories is None:
        # components imports the framework, so this import cannot be at the top
        from firmgen.components import default_registry

        factories = default_registry()
    return CodeGenerator(factories, boards)


def validate_configuration(
    config: Configuration,
    context: GenerationContext | None = None,
    *,
    factories: FactoryRegistry | None = None,
    boards: BoardRegistry | None = None,
) -> list[Advisory]:
    """Validate *config* with the built-in registries unless others are given."""
    return _default_generator(factories, boards).validate_configuration(config, context)


def generate_code(
    config: Configuration,
    context: GenerationContext | None = None,
    *,
    factories: FactoryRegistry | None = None,
    boards: BoardRegistry | None = None,
) -> CompilationUnit:
    """Generate code for *config* with the built-in registries unless others are given."""
    return _default_generator(factories, boards).generate_code(config, context)
