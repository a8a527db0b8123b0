"""Domain errors for pushwatch.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from PushWatchError.
"""

from pushwatch.domain.errors.configuration import (
    ConfigurationError,
    SettingsError,
    TargetDirectoryError,
    WatchConfigurationError,
)
from pushwatch.domain.errors.invariant import (
    ChangeRecordInvariantError,
    InvariantViolationError,
    RoutingInvariantError,
    UnknownChangePropertyError,
)

__all__: list[str] = [
    "ChangeRecordInvariantError",
    "ConfigurationError",
    "InvariantViolationError",
    "RoutingInvariantError",
    "SettingsError",
    "TargetDirectoryError",
    "UnknownChangePropertyError",
    "WatchConfigurationError",
]
