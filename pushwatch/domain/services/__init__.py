"""Pure domain services."""

from pushwatch.domain.services.countdown_inference import (
    DEFAULT_COUNTDOWN_PLACEHOLDER,
    DEFAULT_DECREMENT_THRESHOLD,
    CountdownInferenceEngine,
    extract_numbers,
)

__all__: list[str] = [
    "DEFAULT_COUNTDOWN_PLACEHOLDER",
    "DEFAULT_DECREMENT_THRESHOLD",
    "CountdownInferenceEngine",
    "extract_numbers",
]
