"""Entity event source stub.

In-memory stand-in for the real-time client. Tests register the router's
listeners on it and then emit property changes by hand.
"""

from __future__ import annotations

from collections import defaultdict

from pushwatch.application.ports.entity_event_source import (
    EntityEventSourceProtocol,
    PropertyCallback,
    PropertyKind,
)
from pushwatch.domain.models.change_record import ChangeValue
from pushwatch.domain.models.entity import EntityRef


class EntityEventSourceStub(EntityEventSourceProtocol):
    """Event source stub with manual emission.

    Attributes:
        _listeners: (entity_id, kind) -> registered callbacks.
        _names: Display names reported with emitted changes.
        queried: Entity ids passed to query_entity, in call order.
    """

    def __init__(self, names: dict[int, str] | None = None) -> None:
        self._listeners: dict[tuple[int, PropertyKind], list[PropertyCallback]] = defaultdict(list)
        self._names = dict(names or {})
        self.queried: list[int] = []

    def add_listener(
        self, entity_id: int, kind: PropertyKind, callback: PropertyCallback
    ) -> None:
        self._listeners[(entity_id, kind)].append(callback)

    def query_entity(self, entity_id: int) -> None:
        self.queried.append(entity_id)

    def listener_count(self, entity_id: int, kind: PropertyKind) -> int:
        return len(self._listeners.get((entity_id, kind), []))

    def emit(
        self,
        entity_id: int,
        kind: PropertyKind,
        before: ChangeValue | None,
        after: ChangeValue | None,
    ) -> None:
        """Deliver a property change to every listener of the entity."""
        entity = EntityRef(entity_id, self._names.get(entity_id, ""))
        for callback in list(self._listeners.get((entity_id, kind), [])):
            callback(entity, before, after)
