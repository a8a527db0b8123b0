"""Delivery target identifiers."""

# Configuration literal and resolved identifier meaning "every delivery target"
ALL_TARGETS = "All Devices"


def is_all_targets(target: str) -> bool:
    """Whether a target identifier is the every-target sentinel."""
    return target == ALL_TARGETS
