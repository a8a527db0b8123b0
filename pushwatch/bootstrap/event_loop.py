"""Event loop wiring for a running router.

Debounce timers fire as loop callbacks, so an exception raised inside a flush
never reaches a caller; asyncio hands it to the loop's exception handler. The
handler installed here treats a broken invariant as fatal and stops the loop,
and leaves everything else to asyncio's default handling.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from pushwatch.domain.errors.invariant import InvariantViolationError

log = structlog.get_logger()


def install_invariant_handler(loop: asyncio.AbstractEventLoop) -> None:
    """Stop ``loop`` when a callback raises an InvariantViolationError."""

    def handler(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        exc = context.get("exception")
        if isinstance(exc, InvariantViolationError):
            log.critical(
                "invariant_violation",
                error=str(exc),
                error_type=type(exc).__name__,
                message=context.get("message"),
            )
            loop.stop()
            return
        loop.default_exception_handler(context)

    loop.set_exception_handler(handler)


__all__ = ["install_invariant_handler"]
