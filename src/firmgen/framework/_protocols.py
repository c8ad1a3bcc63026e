"""Factory protocol.

A factory knows how to validate and generate code for one
``(kind, platform)`` pair.  Factories are looked up in a
:class:`~firmgen.framework._registry.FactoryRegistry`, never found through
inheritance; any object with these members can be registered.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from firmgen.model.board import BoardDefinition
from firmgen.model.code import ComponentCode
from firmgen.model.components import ComponentConfig, ComponentKind
from firmgen.model.pins import ResolvedPin

if TYPE_CHECKING:
    from ._context import EmitContext


@runtime_checkable
class ComponentFactory(Protocol):
    kind: ComponentKind
    platform: str
    required_properties: tuple[str, ...]
    optional_properties: tuple[str, ...]

    def validate(self, entry: ComponentConfig, board: BoardDefinition) -> list[ResolvedPin]:
        """Check *entry* against *board*; return the pins it claims."""
        ...

    def generate_code(self, entry: ComponentConfig, ctx: EmitContext) -> ComponentCode: ...

    def component_id(self, entry: ComponentConfig) -> str:
        """The entry's id, synthesized from platform and pin when absent."""
        ...

    def entity_ids(self, entry: ComponentConfig) -> list[str]:
        """Every id the entry introduces (sub-readings included)."""
        ...
