"""Component factory registry.

A table from ``(ComponentKind, platform)`` to one factory.  It is filled
at start-up, then frozen; after that it only answers lookups.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType

from firmgen.errors import DuplicateFactoryError, UnknownPlatformError
from firmgen.model.components import KIND_ORDER, ComponentKind

from ._protocols import ComponentFactory


@dataclass(frozen=True)
class FactoryInfo:
    """Introspection record for one registered factory."""

    kind: ComponentKind
    platform: str
    required_properties: tuple[str, ...]
    optional_properties: tuple[str, ...]


class FactoryRegistry:
    """``(kind, platform)`` → factory."""

    def __init__(self, factories: Iterable[ComponentFactory] = ()) -> None:
        self._table: dict[tuple[ComponentKind, str], ComponentFactory] = {}
        self._frozen = False
        for f in factories:
            self.register(f)

    def register(self, factory: ComponentFactory) -> ComponentFactory:
        if self._frozen:
            raise RuntimeError(
                f"Cannot register {factory.kind.value}/{factory.platform}: "
                f"registry is frozen"
            )
        if not isinstance(factory, ComponentFactory):
            raise TypeError(
                f"{type(factory).__name__} does not implement the ComponentFactory protocol"
            )
        key = (factory.kind, factory.platform)
        if key in self._table:
            existing = self._table[key]
            raise DuplicateFactoryError(
                f"A factory for {factory.kind.value}/{factory.platform} is already "
                f"registered ({type(existing).__name__})"
            )
        self._table[key] = factory
        return factory

    def freeze(self) -> FactoryRegistry:
        self._frozen = True
        self._table = MappingProxyType(dict(self._table))  # type: ignore[assignment]
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def dispatch(self, kind: ComponentKind, platform: str) -> ComponentFactory:
        factory = self._table.get((kind, platform))
        if factory is None:
            raise UnknownPlatformError(kind, platform)
        return factory

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)

    def factories(self) -> list[ComponentFactory]:
        """All factories, ordered by kind section then platform name."""
        order = {k: i for i, k in enumerate(KIND_ORDER)}
        keys = sorted(self._table, key=lambda k: (order.get(k[0], len(order)), k[1]))
        return [self._table[k] for k in keys]

    def platforms(self, kind: ComponentKind) -> list[str]:
        return sorted(p for k, p in self._table if k == kind)

    def describe(self) -> list[FactoryInfo]:
        return [
            FactoryInfo(
                kind=f.kind,
                platform=f.platform,
                required_properties=tuple(f.required_properties),
                optional_properties=tuple(f.optional_properties),
            )
            for f in self.factories()
        ]
