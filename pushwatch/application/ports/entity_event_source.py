"""Entity event source port.

Protocol for the real-time client that reports property changes of tracked
entities. The client itself lives outside this package; it is wrapped by an
adapter that satisfies this port.

Developer Golden Rules:
1. One listener per kind per entity - the router guards registration
2. Callbacks run on the event loop thread and must not block
3. Values are passed through untouched - filtering is the router's job
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from pushwatch.domain.models.change_record import ChangeValue
from pushwatch.domain.models.entity import EntityRef

PropertyCallback = Callable[[EntityRef, ChangeValue | None, ChangeValue | None], None]


class PropertyKind(str, Enum):
    """Entity properties the source reports changes for."""

    VIDEO_STATE = "video_state"
    RANK = "rank"
    TOPIC = "topic"


class EntityEventSourceProtocol(Protocol):
    """Protocol for the external real-time client."""

    @abstractmethod
    def add_listener(
        self, entity_id: int, kind: PropertyKind, callback: PropertyCallback
    ) -> None:
        """Register a callback for changes of one property of one entity.

        Args:
            entity_id: Entity to listen to.
            kind: Which property to listen to.
            callback: Called with (entity, before, after) on every change.
        """
        ...

    @abstractmethod
    def query_entity(self, entity_id: int) -> None:
        """Ask the source to fetch the current state of an entity.

        Used after (re)connecting so entities that are online but not
        broadcasting are reported too.

        Args:
            entity_id: Entity to query.
        """
        ...
