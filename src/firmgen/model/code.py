"""Generated-code IR.

Fragments are opaque strings.  Nothing here looks inside them; the only
operation is merging, which concatenates phases and drops repeated
includes.
"""

from __future__ import annotations

from pydantic import BaseModel, model_validator


class Entity(BaseModel):
    """A named entity exposed to remote clients under a fixed key."""

    id: str
    role: str
    key: int


class Advisory(BaseModel):
    """A non-fatal note about the configuration (e.g. a strapping pin)."""

    component: str
    message: str
    pin: int | None = None


class ComponentCode(BaseModel):
    """Fragments produced by one component entry, by phase."""

    includes: list[str] = []
    declarations: list[str] = []
    setup: list[str] = []
    loop: list[str] = []
    definitions: list[str] = []
    api_registrations: list[str] = []
    entities: list[Entity] = []


# Fragment lists shared by ComponentCode and CompilationUnit, in file order.
PHASES: tuple[str, ...] = (
    "includes",
    "declarations",
    "setup",
    "loop",
    "definitions",
    "api_registrations",
)


class CompilationUnit(BaseModel):
    """All component fragments of one build, merged."""

    board: str
    includes: list[str] = []
    declarations: list[str] = []
    setup: list[str] = []
    loop: list[str] = []
    definitions: list[str] = []
    api_registrations: list[str] = []
    entities: list[Entity] = []
    advisories: list[Advisory] = []

    @model_validator(mode="after")
    def _unique_includes(self):
        if len(set(self.includes)) != len(self.includes):
            raise ValueError("includes must not contain duplicates")
        return self

    def merge(self, code: ComponentCode) -> None:
        """Append *code*'s fragments; includes keep first-seen order."""
        seen = set(self.includes)
        for inc in code.includes:
            if inc not in seen:
                seen.add(inc)
                self.includes.append(inc)
        for phase in PHASES[1:]:
            getattr(self, phase).extend(getattr(code, phase))
        self.entities.extend(code.entities)

    def entity_key(self, entity_id: str) -> int | None:
        for e in self.entities:
            if e.id == entity_id:
                return e.key
        return None
