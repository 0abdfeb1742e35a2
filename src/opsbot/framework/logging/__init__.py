"""
opsbot logging - structured, dispatch-aware logging.

This package provides:
- Structured logging with structlog
- Dispatch context propagation via contextvars
- Step timing with lightweight spans
- Environment-based configuration

Usage:
    from opsbot.framework.logging import get_logger, configure_logging, log_step, push_context

    # Configure once at startup
    configure_logging()

    log = get_logger(__name__)

    # Attach dispatch context to every log line underneath
    token = push_context(delivery_id="72d3162e", event="issues.labeled")
    try:
        with log_step("operation.run", operation="roadmap-sync"):
            ...
    finally:
        token.restore()
"""

from opsbot.framework.logging.config import configure_logging
from opsbot.framework.logging.context import (
    LogContext,
    clear_context,
    get_context,
    get_logger,
    push_context,
)
from opsbot.framework.logging.timing import TimingResult, log_step, timed_block

__all__ = [
    # Configuration
    "configure_logging",
    # Context
    "get_logger",
    "get_context",
    "push_context",
    "clear_context",
    "LogContext",
    # Timing
    "log_step",
    "timed_block",
    "TimingResult",
]
