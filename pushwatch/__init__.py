"""
pushwatch - Batched push notifications for live broadcast state changes

Watches per-entity state changes reported by a real-time client and turns
bursts of them into a small number of deduplicated, human-readable push
notifications.

Core Rules:
- One pending batch per entity, flushed on a trailing-edge debounce
- Newest change first in every rendered body
- Wiring bugs are fatal, delivery failures are not
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
