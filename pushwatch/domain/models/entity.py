"""Reference to a tracked entity."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, eq=True)
class EntityRef:
    """Identity of a tracked entity as reported by the event source.

    Attributes:
        entity_id: Stable numeric identifier.
        name: Display name; falls back to the identifier when unknown.
    """

    entity_id: int
    name: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", str(self.entity_id))
