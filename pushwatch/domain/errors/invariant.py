"""Invariant violations inside the aggregation engine.

These indicate wiring bugs (for example a change arriving for a property
that has no resolved target). They are never swallowed: callers let them
propagate so the process stops instead of silently dropping changes.
"""

from pushwatch.domain.exceptions import PushWatchError


class InvariantViolationError(PushWatchError):
    """Base exception for programming-invariant violations."""

    pass


class ChangeRecordInvariantError(InvariantViolationError):
    """Raised when a change record mixes value and message payloads."""

    pass


class RoutingInvariantError(InvariantViolationError):
    """Raised when a change has no delivery target for its property."""

    def __init__(self, entity_id: int, property_name: str) -> None:
        """Initialize with the entity and property lacking a target.

        Args:
            entity_id: Entity whose batch was being rendered.
            property_name: Property that has no configured target.
        """
        self.entity_id = entity_id
        self.property_name = property_name
        super().__init__(
            f"No delivery target configured for property {property_name!r} "
            f"on entity {entity_id}"
        )


class UnknownChangePropertyError(InvariantViolationError):
    """Raised when a change record carries a property the composer cannot render."""

    def __init__(self, property_name: object) -> None:
        """Initialize with the unrecognized property tag.

        Args:
            property_name: The property tag that could not be rendered.
        """
        self.property_name = property_name
        super().__init__(f"Don't know how to render property: {property_name!r}")
