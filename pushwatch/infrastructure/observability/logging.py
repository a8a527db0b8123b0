"""structlog setup for pushwatch.

Every pushwatch module logs through ``structlog.get_logger()`` with
snake_case event names: ``change_enqueued`` and ``buffer_flushed`` from the
change buffers, ``notification_dispatched`` and
``notification_delivery_failed`` from the router, ``join_push_*`` from the
Join adapter. While a batch is rendered and handed to delivery the router
binds ``flush_id`` and ``entity_id`` as contextvars, so those keys show up on
every entry the flush produces without being passed around.

``PUSHWATCH_ENVIRONMENT`` picks the renderer (one JSON object per line in
production, coloured key=value in development) and ``LOG_LEVEL`` the
threshold.
"""

import logging
import os

import structlog
from structlog.typing import FilteringBoundLogger, Processor

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level() -> int:
    """Resolve LOG_LEVEL to a stdlib level number; unknown names mean INFO."""
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    level = getattr(logging, level_name, None)
    return level if isinstance(level, int) else logging.INFO


def _shared_processors() -> list[Processor]:
    return [
        # flush_id / entity_id bound by the router
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(environment: str) -> Processor:
    if environment == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def configure_structlog(environment: str = "production") -> None:
    """Install the pushwatch processor chain.

    Called once by the CLI before any router is built.

    Args:
        environment: ``"production"`` renders JSON lines, anything else
            renders for a terminal.
    """
    structlog.configure(
        processors=[*_shared_processors(), _renderer(environment)],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger_for_service(
    service_name: str, component: str = "pushwatch"
) -> FilteringBoundLogger:
    """Logger with ``service`` and ``component`` bound, used by adapters."""
    return structlog.get_logger().bind(service=service_name, component=component)
