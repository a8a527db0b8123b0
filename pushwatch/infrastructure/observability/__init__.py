"""Observability infrastructure for structured logging.

Usage:
    from pushwatch.infrastructure.observability import configure_structlog

    # At startup
    configure_structlog(environment="production")
"""

from pushwatch.infrastructure.observability.logging import (
    configure_structlog,
    get_logger_for_service,
)

__all__: list[str] = [
    "configure_structlog",
    "get_logger_for_service",
]
