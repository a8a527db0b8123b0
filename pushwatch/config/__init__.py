"""Configuration module for pushwatch.

This module provides centralized configuration for the aggregation engine.

Available Configurations:
- PushSettings: Engine tunables with environment overrides
- WatchConfiguration: Target/entity/event-kind routing table
"""

from pushwatch.config.push_settings import (
    DEFAULT_PUSH_SETTINGS,
    TEST_PUSH_SETTINGS,
    PushSettings,
)
from pushwatch.config.watch_config import (
    WatchConfiguration,
    WatchRoute,
    load_watch_config,
    parse_watch_config,
)

__all__ = [
    "PushSettings",
    "DEFAULT_PUSH_SETTINGS",
    "TEST_PUSH_SETTINGS",
    "WatchConfiguration",
    "WatchRoute",
    "load_watch_config",
    "parse_watch_config",
]
