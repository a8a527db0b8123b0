"""Engine settings with environment variable overrides.

This module defines the tunables of the aggregation engine. The debounce
interval is the only knob that bounds how long a continuously changing
entity postpones its notification.

Environment Variables:
- PUSHWATCH_DEBOUNCE_SECONDS: Quiet period before a batch is sent (default: 5.0, min: 0.01, max: 600)
- PUSHWATCH_RANK_CEILING: Rank shown for the below-threshold sentinel 0 (default: 1000, min: 1, max: 100000)
- PUSHWATCH_COUNTDOWN_PLACEHOLDER: Topic token meaning "countdown reached" (default: "[none]")
- PUSHWATCH_TITLE_TEMPLATE: Notification title format (default: "PM: {name}")
- PUSHWATCH_ENVIRONMENT: "production" (JSON logs) or "development" (default: production)
- JOIN_API_KEY: API key of the Join push service (optional)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta

from pushwatch.domain.services.countdown_inference import DEFAULT_COUNTDOWN_PLACEHOLDER


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed float value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# =============================================================================
# Debounce Configuration
# =============================================================================

# Default quiet period before a batch is sent
DEFAULT_DEBOUNCE_SECONDS = 5.0

# Floor keeps timers meaningful
MIN_DEBOUNCE_SECONDS = 0.01

# Ceiling (10 minutes - beyond this notifications stop being "live")
MAX_DEBOUNCE_SECONDS = 600.0

# =============================================================================
# Rendering Configuration
# =============================================================================

# Rank 0 means "below the ranked list"; rendered as "over {ceiling}"
DEFAULT_RANK_CEILING = 1000

MIN_RANK_CEILING = 1

MAX_RANK_CEILING = 100_000

DEFAULT_TITLE_TEMPLATE = "PM: {name}"

DEFAULT_ENVIRONMENT = "production"


@dataclass(frozen=True)
class PushSettings:
    """Tunables of the aggregation engine.

    Attributes:
        debounce_seconds: Quiet period before a batch is sent.
                          Default: 5.0 seconds.
        rank_ceiling: Rank rendered for the below-threshold sentinel 0.
                      Default: 1000.
        countdown_placeholder: Topic token normalized to 0 before number
                               extraction. Default: "[none]".
        title_template: Title format; receives name and entity_id.
        environment: Logging environment, "production" or "development".
        join_api_key: Join API key; None disables the Join adapter.
    """

    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    rank_ceiling: int = DEFAULT_RANK_CEILING
    countdown_placeholder: str = DEFAULT_COUNTDOWN_PLACEHOLDER
    title_template: str = DEFAULT_TITLE_TEMPLATE
    environment: str = DEFAULT_ENVIRONMENT
    join_api_key: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not MIN_DEBOUNCE_SECONDS <= self.debounce_seconds <= MAX_DEBOUNCE_SECONDS:
            raise ValueError(
                f"debounce_seconds must be between {MIN_DEBOUNCE_SECONDS} "
                f"and {MAX_DEBOUNCE_SECONDS}, got {self.debounce_seconds}"
            )
        if not MIN_RANK_CEILING <= self.rank_ceiling <= MAX_RANK_CEILING:
            raise ValueError(
                f"rank_ceiling must be between {MIN_RANK_CEILING} "
                f"and {MAX_RANK_CEILING}, got {self.rank_ceiling}"
            )
        if "{name}" not in self.title_template and "{entity_id}" not in self.title_template:
            raise ValueError(
                "title_template must reference {name} or {entity_id}, "
                f"got {self.title_template!r}"
            )

    @property
    def debounce_timedelta(self) -> timedelta:
        """Debounce interval as a timedelta."""
        return timedelta(seconds=self.debounce_seconds)

    @classmethod
    def from_environment(cls) -> PushSettings:
        """Create settings from environment variables with defaults.

        Out-of-range numeric values are clamped into their valid range.

        Returns:
            PushSettings with values from environment or defaults.
        """
        debounce = _get_float_env("PUSHWATCH_DEBOUNCE_SECONDS", DEFAULT_DEBOUNCE_SECONDS)
        # Clamp to valid range
        debounce = max(MIN_DEBOUNCE_SECONDS, min(debounce, MAX_DEBOUNCE_SECONDS))

        rank_ceiling = _get_int_env("PUSHWATCH_RANK_CEILING", DEFAULT_RANK_CEILING)
        # Clamp to valid range
        rank_ceiling = max(MIN_RANK_CEILING, min(rank_ceiling, MAX_RANK_CEILING))

        title_template = os.environ.get("PUSHWATCH_TITLE_TEMPLATE", DEFAULT_TITLE_TEMPLATE)
        if "{name}" not in title_template and "{entity_id}" not in title_template:
            title_template = DEFAULT_TITLE_TEMPLATE

        return cls(
            debounce_seconds=debounce,
            rank_ceiling=rank_ceiling,
            countdown_placeholder=os.environ.get(
                "PUSHWATCH_COUNTDOWN_PLACEHOLDER", DEFAULT_COUNTDOWN_PLACEHOLDER
            ),
            title_template=title_template,
            environment=os.environ.get("PUSHWATCH_ENVIRONMENT", DEFAULT_ENVIRONMENT),
            join_api_key=os.environ.get("JOIN_API_KEY") or None,
        )


# Default production settings
DEFAULT_PUSH_SETTINGS = PushSettings()

# Testing settings with a short debounce so timers fire quickly
TEST_PUSH_SETTINGS = PushSettings(
    debounce_seconds=0.05,
    environment="development",
)
