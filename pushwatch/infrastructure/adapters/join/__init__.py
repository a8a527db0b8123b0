"""Join (joaoapps) push service adapter."""

from pushwatch.infrastructure.adapters.join.join_client import (
    JOIN_ALL_DEVICES_ID,
    JOIN_API_BASE_URL,
    JoinClient,
)

__all__: list[str] = ["JOIN_ALL_DEVICES_ID", "JOIN_API_BASE_URL", "JoinClient"]
