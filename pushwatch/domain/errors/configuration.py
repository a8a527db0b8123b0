"""Configuration errors raised during startup.

Configuration problems are detected eagerly, before any listener is
registered, and are fatal: the process does not proceed with a partial
routing table.
"""

from pushwatch.domain.exceptions import PushWatchError


class ConfigurationError(PushWatchError):
    """Base exception for configuration problems."""

    pass


class SettingsError(ConfigurationError):
    """Raised when engine settings cannot be loaded."""

    pass


class WatchConfigurationError(ConfigurationError):
    """Raised when the watch configuration is malformed.

    Covers non-mapping sections, empty or non-list event lists, unknown
    event kinds, non-integer entity identifiers and targets that the
    target directory does not know.
    """

    def __init__(self, message: str, target: str | None = None, entity: str | None = None) -> None:
        """Initialize with optional location details.

        Args:
            message: Error description.
            target: Target name of the offending section, if known.
            entity: Entity key of the offending entry, if known.
        """
        self.target = target
        self.entity = entity
        location = []
        if target is not None:
            location.append(f"target={target!r}")
        if entity is not None:
            location.append(f"entity={entity!r}")
        if location:
            message = f"{message} ({', '.join(location)})"
        super().__init__(message)


class TargetDirectoryError(ConfigurationError):
    """Raised when the delivery target directory cannot be listed at startup."""

    pass
