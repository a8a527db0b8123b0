"""Target directory port.

Resolves the human-readable target names used in the watch configuration
into delivery target identifiers.
"""

from abc import abstractmethod
from typing import Protocol


class TargetDirectoryProtocol(Protocol):
    """Protocol for listing known delivery targets."""

    @abstractmethod
    async def list_targets(self) -> dict[str, str]:
        """List every known delivery target.

        Returns:
            Mapping of target display name to target identifier.
        """
        ...
